"""
User interface components for Modwatch.

- **action_embed.py**: Builders for every embed the bot sends, from the
  per-action log entries to the anti-abuse notices and the moderator DM.

- **console.py**: Interactive developer console for live bot management with
  status checks, guild listing, abuse counter inspection and reset, and
  graceful shutdown/restart. Uses prompt_toolkit so input does not interfere
  with Discord event handling.
"""
