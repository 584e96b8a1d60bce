"""Event listener Cog for Modwatch.

This cog handles bot lifecycle events. Moderation events are handled by the
ModerationListenerCog.
"""

import discord
from discord.ext import commands

from modwatch.configuration.app_configuration import app_config
from modwatch.util.logger import get_logger

logger = get_logger("events_listener_cog")


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle handlers."""

    def __init__(self, discord_bot_instance):
        self.bot = discord_bot_instance
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name='on_ready')
    async def on_ready(self):
        """Log the connected account and set the bot's presence."""
        if self.bot.user:
            await self._update_presence()
            logger.info(f"{self.bot.user} is online! (ID: {self.bot.user.id}, guilds: {len(self.bot.guilds)})")
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

        logger.info("--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--")

    async def _update_presence(self) -> None:
        if not self.bot.user:
            return

        await self.bot.change_presence(
            status=discord.Status.online,
            activity=discord.Activity(
                type=discord.ActivityType.watching,
                name=app_config.activity_name,
            )
        )


def setup(discord_bot_instance):
    """Register the EventsListenerCog with the bot."""
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance))
