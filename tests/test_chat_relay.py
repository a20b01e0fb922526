"""Tests for the chat relay wrapper around the OpenAI client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from relaycord.configuration.relay_settings import DEFAULT_SYSTEM_PROMPT, RelaySettings
from relaycord.errors import EmptyQuery, UpstreamError
from relaycord.relay.chat_relay import ChatRelay


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion("  Hello friend!  "))
    client.close = AsyncMock()
    return client


@pytest.fixture
def relay(client):
    settings = RelaySettings({"model_name": "test-model", "max_tokens": 64, "system_prompt": "Be nice."})
    return ChatRelay(settings, client=client)


@pytest.mark.asyncio
async def test_respond_returns_trimmed_reply(relay, client):
    assert await relay.respond("  hi  ") == "Hello friend!"

    kwargs = client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["max_tokens"] == 64
    assert kwargs["messages"] == [
        {"role": "system", "content": "Be nice."},
        {"role": "user", "content": "hi"},
    ]


@pytest.mark.asyncio
async def test_empty_query_never_calls_api(relay, client):
    with pytest.raises(EmptyQuery):
        await relay.respond("   ")
    client.chat.completions.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_api_exception_becomes_upstream_error(relay, client):
    client.chat.completions.create.side_effect = ConnectionError("unreachable")

    with pytest.raises(UpstreamError) as excinfo:
        await relay.respond("hi")
    assert isinstance(excinfo.value.__cause__, ConnectionError)


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   ", None])
async def test_blank_reply_is_upstream_error(relay, client, content):
    client.chat.completions.create.return_value = completion(content)

    with pytest.raises(UpstreamError, match="empty response"):
        await relay.respond("hi")


@pytest.mark.asyncio
async def test_no_choices_is_upstream_error(relay, client):
    client.chat.completions.create.return_value = SimpleNamespace(choices=[])

    with pytest.raises(UpstreamError):
        await relay.respond("hi")


@pytest.mark.asyncio
async def test_close_closes_client(relay, client):
    await relay.close()
    client.close.assert_awaited_once()


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("RELAY_API_KEY", raising=False)
    settings = RelaySettings()

    assert settings.base_url is None
    assert settings.model_name == "gpt-4o-mini"
    assert settings.max_tokens == 300
    assert settings.system_prompt == DEFAULT_SYSTEM_PROMPT
    assert settings.api_key == ""


def test_settings_api_key_prefers_environment(monkeypatch):
    monkeypatch.setenv("RELAY_API_KEY", "from-env")
    assert RelaySettings({"api_key": "from-config"}).api_key == "from-env"

    monkeypatch.delenv("RELAY_API_KEY")
    assert RelaySettings({"api_key": "from-config"}).api_key == "from-config"
