"""
Moderator abuse detection for Modwatch.

- **abuse_tracker.py**: In-memory, per-guild and per-moderator counter of
  punitive actions over a rolling window.

- **abuse_policy.py**: Decides what happens once a moderator exceeds the
  action limit: revoke the monitored role, DM the moderator and log it.

- **notifier.py**: Delivers embeds to the log channel and to moderator DMs,
  suppressing delivery failures.
"""
