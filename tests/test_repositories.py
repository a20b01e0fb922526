"""Tests for the SQLite-backed config and banned word repositories."""

import pytest
import pytest_asyncio

from relaycord.database.database import Database
from relaycord.database.db_connection import ConnectionManager
from relaycord.datatypes.discord_datatypes import ChannelID, GuildID
from relaycord.repositories.banned_word_repo import BannedWordRepository
from relaycord.repositories.community_config_repo import CommunityConfigRepository


@pytest_asyncio.fixture
async def test_db(tmp_path):
    """Create a temporary database with its own connection."""
    db = Database(tmp_path / "test.db", ConnectionManager())
    assert await db.initialize()
    assert db.connection_manager.is_open
    yield db
    await db.shutdown()


@pytest.fixture
def config_repo(test_db):
    return CommunityConfigRepository(test_db.connection_manager)


@pytest.fixture
def word_repo(test_db):
    return BannedWordRepository(test_db.connection_manager)


@pytest.mark.asyncio
async def test_unknown_guild_has_no_config(config_repo):
    assert await config_repo.find_by_community(GuildID(1)) is None


@pytest.mark.asyncio
async def test_upsert_creates_then_replaces_channel(config_repo):
    created = await config_repo.upsert(GuildID(1), channel_id=ChannelID(10))
    assert created.channel_id == ChannelID(10)

    updated = await config_repo.upsert(GuildID(1), channel_id=ChannelID(20))
    assert updated.channel_id == ChannelID(20)

    fetched = await config_repo.find_by_community(GuildID(1))
    assert fetched.guild_id == GuildID(1)
    assert fetched.channel_id == ChannelID(20)


@pytest.mark.asyncio
async def test_upsert_keeps_exception_channels(config_repo):
    await config_repo.add_to_exception_set(GuildID(1), ChannelID(30))
    config = await config_repo.upsert(GuildID(1), channel_id=ChannelID(10))

    assert config.link_exception_channels == {ChannelID(30)}


@pytest.mark.asyncio
async def test_exception_set_is_idempotent(config_repo):
    assert await config_repo.add_to_exception_set(GuildID(1), ChannelID(30)) is True
    assert await config_repo.add_to_exception_set(GuildID(1), ChannelID(30)) is False
    assert await config_repo.add_to_exception_set(GuildID(1), ChannelID(31)) is True

    config = await config_repo.find_by_community(GuildID(1))
    assert config.channel_id is None
    assert config.link_exception_channels == {ChannelID(30), ChannelID(31)}
    assert config.is_exception_channel(30)
    assert not config.is_response_channel(30)


@pytest.mark.asyncio
async def test_list_all_returns_every_guild(config_repo):
    await config_repo.upsert(GuildID(2), channel_id=ChannelID(20))
    await config_repo.upsert(GuildID(1), channel_id=ChannelID(10))
    await config_repo.add_to_exception_set(GuildID(3), ChannelID(30))

    configs = await config_repo.list_all()

    assert [c.guild_id for c in configs] == [GuildID(1), GuildID(2), GuildID(3)]
    assert configs[2].channel_id is None
    assert configs[2].link_exception_channels == {ChannelID(30)}


@pytest.mark.asyncio
async def test_banned_words_are_normalized_and_ordered(word_repo):
    assert await word_repo.create("  Walnut ") == "walnut"
    await word_repo.create("Pecan")

    assert await word_repo.list_all() == ["walnut", "pecan"]


@pytest.mark.asyncio
async def test_empty_banned_word_is_rejected(word_repo):
    with pytest.raises(ValueError):
        await word_repo.create("   ")
    assert await word_repo.list_all() == []


@pytest.mark.asyncio
async def test_data_survives_reopen(tmp_path):
    path = tmp_path / "persist.db"

    first = Database(path, ConnectionManager())
    await first.initialize()
    await CommunityConfigRepository(first.connection_manager).upsert(GuildID(1), channel_id=ChannelID(10))
    await BannedWordRepository(first.connection_manager).create("walnut")
    await first.shutdown()

    second = Database(path, ConnectionManager())
    await second.initialize()
    try:
        config = await CommunityConfigRepository(second.connection_manager).find_by_community(GuildID(1))
        words = await BannedWordRepository(second.connection_manager).list_all()
    finally:
        await second.shutdown()

    assert config.channel_id == ChannelID(10)
    assert words == ["walnut"]


@pytest.mark.asyncio
async def test_closed_connection_raises(tmp_path):
    manager = ConnectionManager()
    assert not manager.is_open
    repo = CommunityConfigRepository(manager)
    with pytest.raises(RuntimeError):
        await repo.find_by_community(GuildID(1))
