"""
Embed creation utilities for moderation and anti-abuse notifications.

Every embed the bot sends is built here so titles, colours and field layout
stay consistent between the log channel and moderator DMs.
"""

import datetime
from typing import Iterable, Tuple

import discord

from modwatch.datatypes.action_datatypes import ActionType, ModerationEvent, describe_user

# Discord rejects field values longer than 1024 characters
ERROR_TEXT_LIMIT = 900

# (name, value, inline)
Field = Tuple[str, str, bool]

ACTION_TITLES = {
    ActionType.KICK: "Member Kicked",
    ActionType.BAN: "Member Banned",
    ActionType.TIMEOUT: "Member Timed Out",
}

ACTION_COLORS = {
    ActionType.KICK: discord.Color.orange(),
    ActionType.BAN: discord.Color.red(),
    ActionType.TIMEOUT: discord.Color.orange(),
}


def build_embed(
    title: str,
    description: str,
    fields: Iterable[Field] = (),
    color: discord.Color | None = None,
) -> discord.Embed:
    """Create a timestamped embed with the given fields."""
    embed = discord.Embed(
        title=title,
        description=description,
        color=color if color is not None else discord.Color.orange(),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    for name, value, inline in fields:
        embed.add_field(name=name, value=value, inline=inline)
    return embed


def build_action_log_embed(event: ModerationEvent) -> discord.Embed:
    """Log entry for a single confirmed kick, ban or timeout."""
    return build_embed(
        ACTION_TITLES[event.action],
        f"Target: {event.target_text}",
        [
            ("Moderator", event.executor_text, True),
            ("Reason", event.reason_text, True),
        ],
        ACTION_COLORS[event.action],
    )


def build_member_missing_embed(moderator_id: int, guild: discord.Guild) -> discord.Embed:
    return build_embed(
        "⚠️ Anti-Abuse Triggered (member not found)",
        f"Moderator with ID `{moderator_id}` triggered anti-abuse in guild **{guild.name}** "
        "but could not be fetched.",
    )


def build_threshold_reached_embed(
    member: discord.Member,
    guild: discord.Guild,
    count: int,
    threshold_text: str,
) -> discord.Embed:
    """Notice for a moderator over the limit who does not hold the monitored role."""
    return build_embed(
        "⚠️ Anti-Abuse Threshold Reached",
        f"{describe_user(member)} exceeded the punishment threshold ({count}) "
        "but does not have the monitored admin role.",
        [
            ("Guild", guild.name, True),
            ("Moderator", describe_user(member), True),
            ("Threshold", threshold_text, True),
        ],
        discord.Color.yellow(),
    )


def build_role_removal_failed_embed(member: discord.Member, error: BaseException) -> discord.Embed:
    return build_embed(
        "❌ Failed to Remove Admin Role",
        f"Could not remove admin role from {describe_user(member)}.",
        [("Error", str(error)[:ERROR_TEXT_LIMIT] or type(error).__name__, False)],
        discord.Color.dark_red(),
    )


def build_role_removed_dm_embed(guild: discord.Guild, action_limit: int, window_text: str) -> discord.Embed:
    """DM sent to the moderator whose admin role was revoked."""
    return build_embed(
        "⚠️ Admin Role Removed",
        "Your admin role has been removed.",
        [
            ("Reason", f"You exceeded {action_limit} kicks/bans/timeouts within {window_text}.", False),
            ("Guild", guild.name, True),
        ],
        discord.Color.dark_red(),
    )


def build_role_removed_log_embed(
    member: discord.Member,
    guild: discord.Guild,
    threshold_text: str,
) -> discord.Embed:
    return build_embed(
        "⚠️ Admin Role Removed (Anti-Abuse)",
        f"{describe_user(member)} had the admin role removed after exceeding punishment threshold.",
        [
            ("Moderator", describe_user(member), True),
            ("Guild", guild.name, True),
            ("Threshold", threshold_text, True),
        ],
        discord.Color.dark_red(),
    )


def build_test_log_embed() -> discord.Embed:
    """Embed posted by ``modwatch-logcheck`` to prove the log channel is writable."""
    return build_embed(
        "✅ Test Log Message",
        "This message was sent to verify that the bot can post to the log channel.",
        color=discord.Color.green(),
    )
