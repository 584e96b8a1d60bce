"""
Audit log lookups used to attribute member events to a moderator.

Discord does not say who kicked, banned or timed out a member in the gateway
event itself; the newest audit log entry of the matching type has to be read
and checked against the affected member.
"""

import discord

from modwatch.datatypes.action_datatypes import ActionType
from modwatch.util.logger import get_logger

logger = get_logger("audit_log")


async def fetch_latest_entry(guild: discord.Guild, action_type: ActionType) -> discord.AuditLogEntry | None:
    """Return the newest audit log entry for ``action_type``, or None on failure."""
    try:
        async for entry in guild.audit_logs(limit=1, action=action_type.audit_log_action):
            return entry
    except discord.Forbidden:
        logger.warning("Missing 'View Audit Log' permission in guild %s (%s)", guild.name, guild.id)
    except discord.HTTPException as exc:
        logger.warning("Failed to fetch %s audit log in guild %s: %s", action_type, guild.id, exc)
    return None


async def find_recent_entry(
    guild: discord.Guild,
    action_type: ActionType,
    target_id: int,
) -> discord.AuditLogEntry | None:
    """
    Find the audit log entry that explains an action against ``target_id``.

    Args:
        guild (discord.Guild): Guild the event happened in.
        action_type (ActionType): Kind of punishment to look up.
        target_id (int): ID of the member the event is about.

    Returns:
        discord.AuditLogEntry | None: The newest matching entry, or None when
        the fetch failed, the log is empty, or the newest entry targets someone
        else (for example a member who left on their own).
    """
    entry = await fetch_latest_entry(guild, action_type)
    if entry is None:
        return None

    target = getattr(entry, "target", None)
    if getattr(target, "id", None) != target_id:
        logger.debug(
            "Newest %s audit entry in guild %s targets %s, not %s; ignoring",
            action_type, guild.id, getattr(target, "id", None), target_id,
        )
        return None

    return entry
