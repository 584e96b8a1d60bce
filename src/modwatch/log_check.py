"""
Log channel check
=================

Logs in with the configured token, posts a single test embed to the log
channel and disconnects. Run it once after setup to confirm the bot can reach
and write to the channel before relying on it for anti-abuse notices.
"""

import sys

# Resolves the base directory (and chdir) before the configuration is loaded
from modwatch import main as runtime

import asyncio
import discord

from modwatch.configuration.app_configuration import app_config
from modwatch.moderation.notifier import LogNotifier
from modwatch.ui.action_embed import build_test_log_embed
from modwatch.util.logger import get_logger

logger = get_logger("log_check")


class LogCheckClient(discord.Client):
    """Minimal client that sends the test embed once ready, then closes."""

    def __init__(self, log_channel_id: int, **options) -> None:
        super().__init__(intents=discord.Intents(guilds=True), **options)
        self.log_channel_id = log_channel_id
        self.succeeded = False

    async def on_ready(self):
        logger.info(f"{self.user} logged in!")
        try:
            self.succeeded = await send_test_message(self, self.log_channel_id)
        finally:
            await self.close()


async def send_test_message(client: discord.Client, log_channel_id: int) -> bool:
    """Send the test embed to ``log_channel_id``. Returns True on success."""
    notifier = LogNotifier(client, log_channel_id)
    sent = await notifier.send_log_embed(build_test_log_embed())
    if sent:
        logger.info("Test message sent to log channel %s!", log_channel_id)
    else:
        logger.error("Could not send test message to log channel %s.", log_channel_id)
    return sent


async def run_log_check(token: str, log_channel_id: int) -> int:
    """Connect, send the test embed and return a process exit code."""
    client = LogCheckClient(log_channel_id)
    try:
        await client.start(token)
    except discord.LoginFailure as exc:
        logger.critical("Failed to login: %s", exc)
        return 1
    finally:
        if not client.is_closed():
            await client.close()
    return 0 if client.succeeded else 1


def main() -> int:
    token = runtime.load_environment()

    log_channel_id = app_config.log_channel_id
    if log_channel_id is None:
        logger.critical("'log_channel_id' is not configured. Nothing to check.")
        return 1

    try:
        return asyncio.run(run_log_check(token, log_channel_id))
    except KeyboardInterrupt:
        logger.info("Log check interrupted by user.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
