"""Tests for LogNotifier delivery."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

from conftest import FakeUser, make_http_error
from modwatch.moderation.notifier import LogNotifier


class FakeChannel:
    def __init__(self, error=None) -> None:
        self.sent_embeds: list = []
        self.error = error

    async def send(self, *, embed=None):
        if self.error:
            raise self.error
        self.sent_embeds.append(embed)


def make_bot(cached=None, fetched=None, fetch_error=None):
    return SimpleNamespace(
        get_channel=lambda channel_id: cached,
        fetch_channel=AsyncMock(return_value=fetched, side_effect=fetch_error),
    )


@pytest.fixture
def embed():
    return discord.Embed(title="Log")


@pytest.mark.asyncio
async def test_send_log_embed_uses_cached_channel(embed):
    channel = FakeChannel()
    bot = make_bot(cached=channel)

    assert await LogNotifier(bot, 123).send_log_embed(embed) is True
    assert channel.sent_embeds == [embed]
    bot.fetch_channel.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_log_embed_fetches_uncached_channel(embed):
    channel = FakeChannel()
    bot = make_bot(fetched=channel)

    assert await LogNotifier(bot, 123).send_log_embed(embed) is True
    bot.fetch_channel.assert_awaited_once_with(123)
    assert channel.sent_embeds == [embed]


@pytest.mark.asyncio
async def test_send_log_embed_missing_channel(embed):
    bot = make_bot(fetch_error=make_http_error(discord.NotFound, 404, "Unknown Channel"))
    assert await LogNotifier(bot, 123).send_log_embed(embed) is False


@pytest.mark.asyncio
async def test_send_log_embed_channel_not_sendable(embed):
    bot = make_bot(cached=SimpleNamespace(id=123))
    assert await LogNotifier(bot, 123).send_log_embed(embed) is False


@pytest.mark.asyncio
async def test_send_log_embed_suppresses_send_errors(embed):
    channel = FakeChannel(error=make_http_error(discord.Forbidden, 403, "Missing Access"))
    bot = make_bot(cached=channel)
    assert await LogNotifier(bot, 123).send_log_embed(embed) is False


@pytest.mark.asyncio
async def test_send_direct_embed(embed):
    user = FakeUser(10)
    assert await LogNotifier(make_bot(), 123).send_direct_embed(user, embed) is True
    user.send.assert_awaited_once_with(embed=embed)


@pytest.mark.asyncio
async def test_send_direct_embed_with_dms_closed(embed):
    user = FakeUser(10)
    user.send.side_effect = make_http_error(discord.Forbidden, 403, "Cannot send messages to this user")
    assert await LogNotifier(make_bot(), 123).send_direct_embed(user, embed) is False
