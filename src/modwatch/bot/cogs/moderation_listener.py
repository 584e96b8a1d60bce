"""Moderation listener Cog for Modwatch.

Turns member removals, bans and newly applied timeouts into audit-log backed
ModerationEvents, posts each one to the log channel and counts it against the
moderator who performed it.
"""

import datetime

import discord
from discord.ext import commands

from modwatch.datatypes.action_datatypes import ActionType, ModerationEvent
from modwatch.moderation.abuse_policy import AbusePolicy
from modwatch.ui import action_embed
from modwatch.util import audit_log
from modwatch.util.logger import get_logger

logger = get_logger("moderation_listener_cog")


def is_newly_timed_out(before: discord.Member, after: discord.Member) -> bool:
    """Return True when ``after`` carries a timeout that ``before`` did not."""
    now = discord.utils.utcnow()
    old_until: datetime.datetime | None = getattr(before, "communication_disabled_until", None)
    new_until: datetime.datetime | None = getattr(after, "communication_disabled_until", None)

    was_timed_out = old_until is not None and old_until > now
    return not was_timed_out and new_until is not None and new_until > now


class ModerationListenerCog(commands.Cog):
    """Cog that attributes kicks, bans and timeouts to moderators."""

    def __init__(self, discord_bot_instance, abuse_policy: AbusePolicy):
        """Initialize the moderation listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        abuse_policy:
            Policy that counts actions and revokes the admin role on abuse.
        """
        self.bot = discord_bot_instance
        self.abuse_policy = abuse_policy
        self.notifier = abuse_policy.notifier
        logger.info("Moderation listener cog loaded")

    async def process_action(
        self,
        action_type: ActionType,
        guild: discord.Guild,
        target: discord.abc.User,
    ) -> ModerationEvent | None:
        """Confirm an action via the audit log, log it, and count it against its executor."""
        entry = await audit_log.find_recent_entry(guild, action_type, target.id)
        if entry is None:
            return None

        event = ModerationEvent(
            action=action_type,
            guild=guild,
            target=target,
            executor=entry.user,
            reason=entry.reason,
        )
        logger.info("[%s] %s by %s in %s", action_type, event.target_text, event.executor_text, guild.name)

        await self.notifier.send_log_embed(action_embed.build_action_log_embed(event))

        if event.executor is not None:
            await self.abuse_policy.handle_abuse(guild, event.executor.id)
        return event

    @commands.Cog.listener(name='on_member_remove')
    async def on_member_remove(self, member: discord.Member):
        """Kicks arrive as plain member removals; voluntary leaves have no kick entry."""
        try:
            await self.process_action(ActionType.KICK, member.guild, member)
        except Exception as exc:
            logger.exception("on_member_remove handler error: %s", exc)

    @commands.Cog.listener(name='on_member_ban')
    async def on_member_ban(self, guild: discord.Guild, user: discord.User | discord.Member):
        try:
            await self.process_action(ActionType.BAN, guild, user)
        except Exception as exc:
            logger.exception("on_member_ban handler error: %s", exc)

    @commands.Cog.listener(name='on_member_update')
    async def on_member_update(self, before: discord.Member, after: discord.Member):
        if not is_newly_timed_out(before, after):
            return

        try:
            await self.process_action(ActionType.TIMEOUT, after.guild, after)
        except Exception as exc:
            logger.exception("on_member_update handler error: %s", exc)


def setup(discord_bot_instance, abuse_policy: AbusePolicy):
    """Register the ModerationListenerCog with the bot.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    abuse_policy:
        Shared abuse policy for every guild.
    """
    discord_bot_instance.add_cog(ModerationListenerCog(discord_bot_instance, abuse_policy))
