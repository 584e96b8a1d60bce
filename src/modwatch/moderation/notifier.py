"""
Delivery of log and DM embeds.

Notifications are best effort: a missing channel, closed DMs or an HTTP error
is logged and swallowed so that it never interrupts the moderation flow.
"""

from __future__ import annotations

import discord

from modwatch.util.logger import get_logger

logger = get_logger("notifier")


class LogNotifier:
    """Send embeds to the configured log channel and to user DMs.

    Parameters
    ----------
    bot:
        Connected Discord client used to resolve the log channel.
    log_channel_id:
        ID of the channel that receives log embeds.
    """

    def __init__(self, bot: discord.Client, log_channel_id: int) -> None:
        self.bot = bot
        self.log_channel_id = log_channel_id

    async def resolve_log_channel(self) -> discord.abc.Messageable | None:
        """Return the log channel from cache, falling back to an API fetch."""
        channel = self.bot.get_channel(self.log_channel_id)
        if channel is not None:
            return channel

        try:
            return await self.bot.fetch_channel(self.log_channel_id)
        except (discord.NotFound, discord.Forbidden, discord.InvalidData) as exc:
            logger.debug("Could not fetch log channel %s: %s", self.log_channel_id, exc)
        except discord.HTTPException as exc:
            logger.error("HTTP error while fetching log channel %s: %s", self.log_channel_id, exc)
        return None

    async def send_log_embed(self, embed: discord.Embed) -> bool:
        """Post ``embed`` to the log channel. Returns True when it was sent."""
        channel = await self.resolve_log_channel()
        if channel is None or not callable(getattr(channel, "send", None)):
            logger.warning("Log channel not found or not sendable: %s", self.log_channel_id)
            return False

        try:
            await channel.send(embed=embed)
            return True
        except Exception as exc:
            logger.error("Failed to send log embed '%s': %s", embed.title, exc)
            return False

    async def send_direct_embed(self, user: discord.abc.User, embed: discord.Embed) -> bool:
        """DM ``embed`` to ``user``. Returns True when it was delivered."""
        try:
            await user.send(embed=embed)
            return True
        except discord.Forbidden:
            logger.warning("Could not send DM to %s (%s): DMs disabled", user, user.id)
        except discord.HTTPException as exc:
            logger.warning("Failed to DM %s (%s): %s", user, user.id, exc)
        return False
