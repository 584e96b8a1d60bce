"""
Modwatch - Moderator Abuse Watchdog for Discord

Modwatch watches the punitive actions moderators take in a guild and steps in
when one of them goes on a spree.

Core Components:

- **Moderation Listener**: Confirms kicks, bans and timeouts against the guild
  audit log and posts a log embed for each one to the configured log channel
- **Abuse Tracker**: Per-guild, per-moderator counter over a rolling window
- **Abuse Policy**: Revokes the monitored admin role from a moderator who
  exceeds the action limit, DMs them and records the outcome in the log channel
- **Interactive Console**: Live bot administration interface for status checks,
  counter inspection, and graceful restart/shutdown

Usage:
    from modwatch.main import main
    main()  # Starts the bot with console interface
"""
