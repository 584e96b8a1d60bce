"""
Action types and data structures for observed moderation actions.

This module defines the ActionType enum and the ModerationEvent dataclass used
to carry a confirmed kick, ban or timeout from the listeners to the notifier
and the abuse policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import discord


UNKNOWN_MODERATOR = "Unknown"
UNSPECIFIED_REASON = "Not specified"


class ActionType(Enum):
    """Enumeration of punitive actions counted against a moderator."""

    KICK = "kick"
    BAN = "ban"
    TIMEOUT = "timeout"

    def __str__(self) -> str:
        return self.value

    @property
    def audit_log_action(self) -> discord.AuditLogAction:
        """Audit log action that records this kind of punishment.

        Timeouts have no dedicated audit log action; they are recorded as a
        member update that sets ``communication_disabled_until``.
        """
        return {
            ActionType.KICK: discord.AuditLogAction.kick,
            ActionType.BAN: discord.AuditLogAction.ban,
            ActionType.TIMEOUT: discord.AuditLogAction.member_update,
        }[self]


def describe_user(user: discord.abc.User) -> str:
    """Render a user as ``name (id)`` for embeds and logs."""
    return f"{user} ({user.id})"


@dataclass(slots=True)
class ModerationEvent:
    """A punitive action confirmed through the guild audit log.

    Attributes:
        action: Kind of punishment.
        guild: Guild the action happened in.
        target: User or member that was punished.
        executor: Moderator that performed the action, if the audit log names one.
        reason: Audit log reason, if any.
    """
    action: ActionType
    guild: discord.Guild
    target: discord.abc.User
    executor: discord.abc.User | None = None
    reason: str | None = None

    @property
    def reason_text(self) -> str:
        return self.reason or UNSPECIFIED_REASON

    @property
    def executor_text(self) -> str:
        return describe_user(self.executor) if self.executor is not None else UNKNOWN_MODERATOR

    @property
    def target_text(self) -> str:
        return describe_user(self.target)
