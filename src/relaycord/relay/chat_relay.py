"""Chat relay: forwards a message to an OpenAI-compatible endpoint and returns the reply.

One request per message and no retry. Callers catch :class:`UpstreamError`
and answer with an apology; the underlying cause is logged here.
"""

from __future__ import annotations

from typing import List

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletionMessageParam

from relaycord.configuration.relay_settings import RelaySettings
from relaycord.errors import EmptyQuery, UpstreamError
from relaycord.util.logger import get_logger

logger = get_logger("chat_relay")


class ChatRelay:
    """Thin wrapper around ``AsyncOpenAI`` chat completions."""

    def __init__(self, settings: RelaySettings, client: AsyncOpenAI | None = None) -> None:
        self._settings = settings
        self._client = client or AsyncOpenAI(
            api_key=settings.api_key or "not-set",
            base_url=settings.base_url,
        )
        self._model_name = settings.model_name
        logger.info(
            "[RELAY] Initialized with base_url=%s, model=%s",
            settings.base_url,
            self._model_name,
        )

    def build_messages(self, query: str) -> List[ChatCompletionMessageParam]:
        return [
            {"role": "system", "content": self._settings.system_prompt},
            {"role": "user", "content": query},
        ]

    async def respond(self, query: str) -> str:
        """
        Generate a reply to ``query``.

        Raises:
            EmptyQuery: If ``query`` is empty after trimming.
            UpstreamError: If the API call raises or returns empty content.
        """
        query = (query or "").strip()
        if not query:
            raise EmptyQuery("Cannot relay an empty message")

        try:
            response = await self._client.chat.completions.create(
                model=self._model_name,
                messages=self.build_messages(query),
                max_tokens=self._settings.max_tokens,
            )
        except Exception as exc:
            logger.error("[RELAY] API request failed: %s", exc)
            raise UpstreamError(f"relay request failed: {exc}") from exc

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        if not content.strip():
            logger.error("[RELAY] Received empty response from API")
            raise UpstreamError("Received empty response from API")

        return content.strip()

    async def close(self) -> None:
        await self._client.close()
