"""
Anti-abuse enforcement.

Each punitive action a moderator takes is counted by the AbuseTracker. Once a
moderator goes over the limit inside the window, the monitored admin role is
revoked, the moderator is told why by DM, and the outcome is posted to the log
channel. The moderator's counter is cleared after every resolution so a new
cycle starts from zero.
"""

from __future__ import annotations

import discord

from modwatch.moderation.abuse_tracker import AbuseTracker
from modwatch.moderation.notifier import LogNotifier
from modwatch.ui import action_embed
from modwatch.util.format_utils import format_duration, format_threshold
from modwatch.util.logger import get_logger

logger = get_logger("abuse_policy")

ROLE_REMOVAL_REASON = "Auto anti-abuse: exceeded punishment threshold"


async def resolve_member(guild: discord.Guild, member_id: int) -> discord.Member | None:
    """Return the guild member for ``member_id`` from cache or the API, or None."""
    member = guild.get_member(member_id)
    if member is not None:
        return member

    try:
        return await guild.fetch_member(member_id)
    except discord.NotFound:
        return None
    except discord.HTTPException as exc:
        logger.warning("Failed to fetch member %s in guild %s: %s", member_id, guild.id, exc)
        return None


class AbusePolicy:
    """Count moderator actions and revoke the admin role on abuse.

    Parameters
    ----------
    tracker:
        Counter shared by every guild the bot is in.
    notifier:
        Sender for log channel and DM embeds.
    admin_role_id:
        ID of the role revoked from an abusing moderator.
    """

    def __init__(self, tracker: AbuseTracker, notifier: LogNotifier, admin_role_id: int) -> None:
        self.tracker = tracker
        self.notifier = notifier
        self.admin_role_id = admin_role_id

    @property
    def window_text(self) -> str:
        return format_duration(self.tracker.window_seconds)

    @property
    def threshold_text(self) -> str:
        return format_threshold(self.tracker.action_limit, self.tracker.window_seconds)

    async def handle_abuse(self, guild: discord.Guild, moderator_id: int) -> None:
        """Record one action by ``moderator_id`` and enforce the limit.

        Never raises; unexpected errors are logged with their traceback.
        """
        try:
            count = self.tracker.increment(guild.id, moderator_id)
            logger.debug("Moderator %s in guild %s is at %d action(s)", moderator_id, guild.id, count)

            if not self.tracker.is_exceeded(count):
                return

            logger.warning(
                "Moderator %s exceeded %s in guild %s (%d actions)",
                moderator_id, self.threshold_text, guild.name, count,
            )
            await self._enforce(guild, moderator_id, count)
        except Exception as exc:
            logger.exception("handle_abuse error for moderator %s in guild %s: %s", moderator_id, guild.id, exc)

    async def _enforce(self, guild: discord.Guild, moderator_id: int, count: int) -> None:
        try:
            member = await resolve_member(guild, moderator_id)
            if member is None:
                await self.notifier.send_log_embed(action_embed.build_member_missing_embed(moderator_id, guild))
                return

            if member.get_role(self.admin_role_id) is None:
                await self.notifier.send_log_embed(
                    action_embed.build_threshold_reached_embed(member, guild, count, self.threshold_text)
                )
                return

            if not await self._remove_admin_role(member):
                return

            await self.notifier.send_direct_embed(
                member,
                action_embed.build_role_removed_dm_embed(guild, self.tracker.action_limit, self.window_text),
            )
            await self.notifier.send_log_embed(
                action_embed.build_role_removed_log_embed(member, guild, self.threshold_text)
            )
            logger.info("Removed admin role from %s (%s) in guild %s", member, member.id, guild.name)
        finally:
            self.tracker.clear(guild.id, moderator_id)

    async def _remove_admin_role(self, member: discord.Member) -> bool:
        try:
            await member.remove_roles(discord.Object(id=self.admin_role_id), reason=ROLE_REMOVAL_REASON)
            return True
        except discord.HTTPException as exc:
            logger.error("Failed removing admin role from %s (%s): %s", member, member.id, exc)
            await self.notifier.send_log_embed(action_embed.build_role_removal_failed_embed(member, exc))
            return False
