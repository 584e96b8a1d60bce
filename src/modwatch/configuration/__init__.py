"""
Configuration management for Modwatch.

- **app_configuration.py**: YAML configuration loader for the log channel,
  the monitored admin role, the abuse policy limits and the bot presence.
  Channel and role IDs may be overridden from the environment. Falls back
  gracefully on missing or malformed config files.
"""
