"""
Modwatch Discord Bot
====================

A Discord bot that logs every kick, ban and timeout to a log channel and
revokes the admin role of a moderator who punishes too many members within a
short window.
"""

import os
import sys
from pathlib import Path

def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. MODWATCH_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller, Nuitka), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("MODWATCH_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]

BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord
from dotenv import load_dotenv

from modwatch.configuration.app_configuration import app_config
from modwatch.moderation.abuse_policy import AbusePolicy
from modwatch.moderation.abuse_tracker import AbuseTracker
from modwatch.moderation.notifier import LogNotifier
from modwatch.ui.console import ConsoleControl, close_bot_instance, console_session
from modwatch.util.format_utils import format_threshold
from modwatch.util.logger import get_logger, handle_exception


logger = get_logger("main")

RESTART_EXIT_CODE = 42


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Returns
    -------
    str
        Discord bot token extracted from the loaded environment.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def validate_configuration() -> bool:
    """Check that the log channel and admin role are configured.

    Returns
    -------
    bool
        False when a required setting is missing; the reason is logged.
    """
    missing = app_config.missing_required()
    if missing:
        logger.critical(
            "Required configuration not set: %s. Edit %s or set the matching MODWATCH_* environment variables.",
            ", ".join(missing),
            app_config.config_path,
        )
        return False
    return True


def build_intents() -> discord.Intents:
    """Construct the Discord intents needed to observe kicks, bans and timeouts.

    Returns
    -------
    discord.Intents
        Intents enabling guild, member and ban events.
    """
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True
    intents.bans = True
    return intents


def build_tracker() -> AbuseTracker:
    """Create the abuse tracker from the configured policy."""
    tracker = AbuseTracker(
        action_limit=app_config.action_limit,
        window_seconds=app_config.window_seconds,
    )
    logger.info("Anti-abuse threshold: %s", format_threshold(tracker.action_limit, tracker.window_seconds))
    return tracker


def load_cogs(discord_bot_instance: discord.Bot, abuse_policy: AbusePolicy) -> None:
    """Register all operational cogs with the provided Discord bot instance.

    Parameters
    ----------
    discord_bot_instance:
        Py-Cord bot object that should receive the Modwatch cogs.
    abuse_policy:
        Policy shared by the moderation listener.
    """
    from modwatch.bot.cogs import events_listener, moderation_listener

    events_listener.setup(discord_bot_instance)
    moderation_listener.setup(discord_bot_instance, abuse_policy)

    logger.info("All cogs loaded successfully.")


def create_bot(tracker: AbuseTracker) -> discord.Bot:
    """Instantiate the Discord bot, wire the abuse policy and register all cogs."""
    bot = discord.Bot(intents=build_intents())
    notifier = LogNotifier(bot, app_config.log_channel_id)
    abuse_policy = AbusePolicy(tracker, notifier, app_config.admin_role_id)
    load_cogs(bot, abuse_policy)
    return bot


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection.

    Parameters
    ----------
    bot:
        Discord client to start.
    token:
        Authentication token used to connect to Discord.
    """
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None = None) -> None:
    """Gracefully stop the Discord bot.

    Parameters
    ----------
    bot:
        Optional bot instance to close.
    """
    await close_bot_instance(bot, log_close=True)
    logger.info("Shutdown complete.")


async def run_bot_session(bot: discord.Bot, token: str, control: ConsoleControl) -> int:
    """Run the bot alongside the console, returning an exit code."""
    control.set_bot(bot)
    exit_code = 0

    try:
        async with console_session(control):
            try:
                await start_bot(bot, token)
            except asyncio.CancelledError:
                logger.info("Bot start cancelled; proceeding to shutdown")
            except discord.LoginFailure as exc:
                logger.critical("Failed to login: %s", exc)
                exit_code = 1
            except Exception as exc:
                logger.critical("Discord bot runtime error: %s", exc)
                exit_code = 1
    finally:
        control.set_bot(None)
        await shutdown_runtime(bot)

    return exit_code


async def async_main() -> int:
    """Bootstrap the bot and console, returning an exit code.

    Returns
    -------
    int
        Process exit code reflecting success or failure of initialization.
    """
    token = load_environment()

    if not validate_configuration():
        return 1

    tracker = build_tracker()

    try:
        bot = create_bot(tracker)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        return 1

    control = ConsoleControl(tracker)
    exit_code = await run_bot_session(bot, token, control)

    if control.is_restart_requested():
        logger.info("Restart requested, returning exit code %d to trigger restart", RESTART_EXIT_CODE)
        return RESTART_EXIT_CODE

    return exit_code


def main() -> int:
    """Entrypoint that orchestrates the async runtime and returns the process code.

    Returns
    -------
    int
        Exit code propagated to the operating system.
    """
    logger.info("Starting Modwatch…")
    try:
        exit_code = asyncio.run(async_main())

        if exit_code == RESTART_EXIT_CODE:
            logger.info("Restart requested; replacing current process with new instance.")
            os.execv(sys.executable, [sys.executable] + sys.argv)
            return 0  # pragma: no cover

        return exit_code
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        if code is None:
            return 1
        try:
            return int(code)
        except (ValueError, TypeError):
            logger.warning("SystemExit.code is not an int (%r); defaulting to 1", code)
            return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
