from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from modwatch.bot.cogs import events_listener


class FakeActivity:
    def __init__(self, *, type, name):
        self.type = type
        self.name = name


@pytest.fixture(autouse=True)
def patch_discord(monkeypatch):
    monkeypatch.setattr(events_listener.discord, "Activity", FakeActivity, raising=False)
    yield


@pytest.fixture
def fake_bot():
    return SimpleNamespace(
        user=SimpleNamespace(id=999),
        change_presence=AsyncMock(),
        guilds=[SimpleNamespace(id=1)],
    )


@pytest.mark.asyncio
async def test_on_ready_sets_watching_presence(fake_bot):
    cog = events_listener.EventsListenerCog(fake_bot)

    await cog.on_ready()

    fake_bot.change_presence.assert_awaited_once()
    activity = fake_bot.change_presence.call_args.kwargs["activity"]
    assert activity.name == events_listener.app_config.activity_name


@pytest.mark.asyncio
async def test_on_ready_without_user_skips_presence(fake_bot):
    fake_bot.user = None
    cog = events_listener.EventsListenerCog(fake_bot)

    await cog.on_ready()

    fake_bot.change_presence.assert_not_awaited()
