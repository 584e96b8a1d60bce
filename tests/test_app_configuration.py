import os
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from modwatch.configuration.app_configuration import (
    ADMIN_ROLE_ENV,
    DEFAULT_ACTION_LIMIT,
    DEFAULT_WINDOW_SECONDS,
    LOG_CHANNEL_ENV,
    AppConfig,
)


def write_config(content: str) -> Path:
    with tempfile.NamedTemporaryFile("w", delete=False, suffix=".yml") as tmp:
        tmp.write(textwrap.dedent(content))
        return Path(tmp.name)


class TestAppConfig(unittest.TestCase):
    def setUp(self):
        env = patch.dict(os.environ)
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop(LOG_CHANNEL_ENV, None)
        os.environ.pop(ADMIN_ROLE_ENV, None)

    def load(self, content: str) -> AppConfig:
        path = write_config(content)
        self.addCleanup(path.unlink, missing_ok=True)
        return AppConfig(config_path=path)

    def test_repo_config_ships_unset_ids(self):
        cfg = AppConfig(config_path=Path(__file__).parents[1] / "config" / "app_config.yml")
        self.assertEqual(cfg.action_limit, 3)
        self.assertEqual(cfg.window_seconds, 3600.0)
        self.assertEqual(cfg.missing_required(), ["log_channel_id", "admin_role_id"])

    def test_missing_config_path_returns_defaults(self):
        cfg = AppConfig(config_path=Path("does_not_exist_12345.yml"))
        self.assertEqual(cfg.data, {})
        self.assertIsNone(cfg.log_channel_id)
        self.assertIsNone(cfg.admin_role_id)
        self.assertEqual(cfg.action_limit, DEFAULT_ACTION_LIMIT)
        self.assertEqual(cfg.window_seconds, float(DEFAULT_WINDOW_SECONDS))

    def test_reads_ids_and_policy(self):
        cfg = self.load(
            """
            log_channel_id: 111
            admin_role_id: "222"
            abuse_policy:
              action_limit: 5
              window_seconds: 600
            presence:
              activity_name: "the staff"
            """
        )
        self.assertEqual(cfg.log_channel_id, 111)
        self.assertEqual(cfg.admin_role_id, 222)
        self.assertEqual(cfg.action_limit, 5)
        self.assertEqual(cfg.window_seconds, 600.0)
        self.assertEqual(cfg.activity_name, "the staff")
        self.assertEqual(cfg.missing_required(), [])

    def test_environment_overrides_ids(self):
        os.environ[LOG_CHANNEL_ENV] = "333"
        os.environ[ADMIN_ROLE_ENV] = "444"
        cfg = self.load("log_channel_id: 111\nadmin_role_id: 222\n")
        self.assertEqual(cfg.log_channel_id, 333)
        self.assertEqual(cfg.admin_role_id, 444)

    def test_invalid_values_fall_back(self):
        cfg = self.load(
            """
            log_channel_id: not-a-number
            admin_role_id: 0
            abuse_policy:
              action_limit: lots
              window_seconds: -5
            """
        )
        self.assertIsNone(cfg.log_channel_id)
        self.assertIsNone(cfg.admin_role_id)
        self.assertEqual(cfg.action_limit, DEFAULT_ACTION_LIMIT)
        self.assertEqual(cfg.window_seconds, float(DEFAULT_WINDOW_SECONDS))

    def test_non_mapping_config_is_ignored(self):
        cfg = self.load("- just\n- a list\n")
        self.assertEqual(cfg.data, {})

    def test_reload_picks_up_changes(self):
        cfg = self.load("admin_role_id: 1\n")
        cfg.config_path.write_text("admin_role_id: 2\n", encoding="utf-8")
        self.assertEqual(cfg.reload(), {"admin_role_id": 2})
        self.assertEqual(cfg.admin_role_id, 2)


if __name__ == "__main__":
    unittest.main()
