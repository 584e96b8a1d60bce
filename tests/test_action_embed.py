"""
Tests for the embed builders.
"""

import unittest
from types import SimpleNamespace

import discord

from conftest import FakeUser, make_http_error
from modwatch.datatypes.action_datatypes import ActionType, ModerationEvent
from modwatch.ui import action_embed


class TestActionEmbeds(unittest.TestCase):
    def setUp(self):
        self.guild = SimpleNamespace(id=1, name="TestGuild")
        self.moderator = FakeUser(10, "mod")
        self.target = FakeUser(42, "target")

    def test_action_log_embed_per_action(self):
        expected = {
            ActionType.KICK: ("Member Kicked", discord.Color.orange()),
            ActionType.BAN: ("Member Banned", discord.Color.red()),
            ActionType.TIMEOUT: ("Member Timed Out", discord.Color.orange()),
        }
        for action, (title, color) in expected.items():
            event = ModerationEvent(action, self.guild, self.target, self.moderator, "rule 3")
            embed = action_embed.build_action_log_embed(event)

            self.assertEqual(embed.title, title)
            self.assertEqual(embed.color, color)
            self.assertEqual(embed.description, "Target: target (42)")
            self.assertEqual([(f.name, f.value, f.inline) for f in embed.fields], [
                ("Moderator", "mod (10)", True),
                ("Reason", "rule 3", True),
            ])
            self.assertIsNotNone(embed.timestamp)

    def test_member_missing_embed(self):
        embed = action_embed.build_member_missing_embed(10, self.guild)
        self.assertIn("`10`", embed.description)
        self.assertIn("**TestGuild**", embed.description)
        self.assertEqual(len(embed.fields), 0)

    def test_role_removal_failed_embed_truncates_error(self):
        error = make_http_error(discord.Forbidden, 403, "x" * 2000)
        embed = action_embed.build_role_removal_failed_embed(self.moderator, error)
        self.assertEqual(embed.color, discord.Color.dark_red())
        self.assertEqual(len(embed.fields[0].value), action_embed.ERROR_TEXT_LIMIT)

    def test_role_removed_dm_embed(self):
        embed = action_embed.build_role_removed_dm_embed(self.guild, 3, "60 minutes")
        self.assertEqual(embed.title, "⚠️ Admin Role Removed")
        self.assertEqual(embed.fields[0].value, "You exceeded 3 kicks/bans/timeouts within 60 minutes.")
        self.assertFalse(embed.fields[0].inline)
        self.assertEqual(embed.fields[1].value, "TestGuild")

    def test_role_removed_log_embed(self):
        embed = action_embed.build_role_removed_log_embed(self.moderator, self.guild, "3 per 60 minutes")
        self.assertEqual(embed.title, "⚠️ Admin Role Removed (Anti-Abuse)")
        self.assertEqual([f.name for f in embed.fields], ["Moderator", "Guild", "Threshold"])
        self.assertEqual(embed.fields[2].value, "3 per 60 minutes")

    def test_test_log_embed(self):
        embed = action_embed.build_test_log_embed()
        self.assertEqual(embed.color, discord.Color.green())
        self.assertTrue(embed.title.startswith("✅"))


if __name__ == "__main__":
    unittest.main()
