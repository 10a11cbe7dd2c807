import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from config import Settings


class TestSettings(unittest.TestCase):
    def test_settings_are_immutable(self):
        settings = Settings(github_token="abc")

        with self.assertRaises(ValidationError):
            settings.github_token = "changed"

    def test_equal_settings_share_a_hash(self):
        self.assertEqual(hash(Settings(github_token="abc")), hash(Settings(github_token="abc")))

    def test_from_env_defaults(self):
        with patch.dict(os.environ, {"SERVER_HOST": "0.0.0.0", "SERVER_PORT": "9000"}, clear=True):
            settings = Settings.from_env()

        self.assertEqual(settings.base_url, "http://0.0.0.0:9000")
        self.assertEqual(settings.github_username, "kylnor")
        self.assertIsNone(settings.todoist_api_token)
        self.assertEqual(settings.cache_ttl_seconds, 300)

    def test_from_env_reads_credentials(self):
        env = {"TODOIST_API_TOKEN": "t-token", "GITHUB_TOKEN": "g-token", "GITHUB_USERNAME": "octo"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()

        self.assertEqual(settings.todoist_api_token, "t-token")
        self.assertEqual(settings.github_token, "g-token")
        self.assertEqual(settings.github_username, "octo")


if __name__ == "__main__":
    unittest.main(verbosity=2)
