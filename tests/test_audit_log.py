"""Tests for audit log lookups."""

from types import SimpleNamespace

import discord
import pytest

from conftest import make_http_error
from modwatch.datatypes.action_datatypes import ActionType
from modwatch.util import audit_log


def make_guild(entries=(), error=None):
    calls = []

    def audit_logs(**kwargs):
        calls.append(kwargs)

        async def iterate():
            if error is not None:
                raise error
            for entry in entries:
                yield entry

        return iterate()

    guild = SimpleNamespace(id=1, name="TestGuild", audit_logs=audit_logs)
    return guild, calls


def make_entry(target_id, executor_id=10, reason=None):
    return SimpleNamespace(
        target=SimpleNamespace(id=target_id),
        user=SimpleNamespace(id=executor_id),
        reason=reason,
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "action_type, expected",
    [
        (ActionType.KICK, discord.AuditLogAction.kick),
        (ActionType.BAN, discord.AuditLogAction.ban),
        (ActionType.TIMEOUT, discord.AuditLogAction.member_update),
    ],
)
async def test_requests_newest_entry_of_matching_action(action_type, expected):
    entry = make_entry(42)
    guild, calls = make_guild([entry])

    assert await audit_log.find_recent_entry(guild, action_type, 42) is entry
    assert calls == [{"limit": 1, "action": expected}]


@pytest.mark.asyncio
async def test_entry_for_other_target_is_ignored():
    guild, _ = make_guild([make_entry(7)])
    assert await audit_log.find_recent_entry(guild, ActionType.KICK, 42) is None


@pytest.mark.asyncio
async def test_empty_audit_log_returns_none():
    guild, _ = make_guild([])
    assert await audit_log.find_recent_entry(guild, ActionType.BAN, 42) is None


@pytest.mark.asyncio
async def test_entry_without_target_is_ignored():
    guild, _ = make_guild([SimpleNamespace(target=None, user=None, reason=None)])
    assert await audit_log.find_recent_entry(guild, ActionType.BAN, 42) is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        make_http_error(discord.Forbidden, 403, "Missing Access"),
        make_http_error(discord.HTTPException, 500, "Server Error"),
    ],
)
async def test_fetch_failures_return_none(error):
    guild, _ = make_guild(error=error)
    assert await audit_log.find_recent_entry(guild, ActionType.KICK, 42) is None
