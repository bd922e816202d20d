import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from credential_flatfile.config.loader import ConfigLoader


def _clean_env(**overrides):
    env = {k: v for k, v in os.environ.items() if not k.startswith("FLATFILE_")}
    env.update(overrides)
    return patch.dict(os.environ, env, clear=True)


class TestConfigLoader(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.config_path = Path(self.tmp_dir.name) / "flatfile.yaml"

    def tearDown(self):
        self.tmp_dir.cleanup()

    def test_defaults_without_config_file(self):
        with _clean_env():
            config = ConfigLoader().load()
        self.assertIsNone(config['store']['path'])
        self.assertFalse(config['store']['strict'])
        self.assertEqual(config['lock']['timeout'], 10.0)
        self.assertEqual(config['logging'], {'level': 'WARNING', 'format': 'plain'})

    def test_missing_config_file_is_ignored(self):
        with _clean_env():
            config = ConfigLoader(config_path=str(self.config_path)).load()
        self.assertEqual(config['lock']['timeout'], 10.0)

    def test_yaml_values(self):
        self.config_path.write_text(
            "store:\n  path: /tmp/creds.json\n  strict: true\n"
            "lock:\n  timeout: 2.5\n"
            "logging:\n  level: debug\n  format: json\n",
            encoding="utf-8",
        )
        with _clean_env(FLATFILE_CONFIG=str(self.config_path)):
            config = ConfigLoader().load()
        self.assertEqual(config['store'], {'path': str(Path('/tmp/creds.json')), 'strict': True})
        self.assertEqual(config['lock']['timeout'], 2.5)
        self.assertEqual(config['logging'], {'level': 'DEBUG', 'format': 'json'})

    def test_env_overrides_yaml(self):
        self.config_path.write_text("lock:\n  timeout: 3\nstore:\n  strict: true\n", encoding="utf-8")
        with _clean_env(FLATFILE_LOCK_TIMEOUT="7", FLATFILE_STRICT="no", FLATFILE_STORE_PATH="/srv/creds.json"):
            config = ConfigLoader(config_path=str(self.config_path)).load()
        self.assertEqual(config['lock']['timeout'], 7.0)
        self.assertFalse(config['store']['strict'])
        self.assertEqual(config['store']['path'], str(Path('/srv/creds.json')))

    def test_invalid_values(self):
        cases = [
            {"FLATFILE_LOCK_TIMEOUT": "soon"},
            {"FLATFILE_LOCK_TIMEOUT": "0"},
            {"FLATFILE_STRICT": "maybe"},
            {"FLATFILE_LOG_FORMAT": "xml"},
            {"FLATFILE_LOG_LEVEL": "LOUD"},
        ]
        for overrides in cases:
            with self.subTest(overrides=overrides), _clean_env(**overrides):
                with self.assertRaises(ValueError):
                    ConfigLoader().load()

    def test_non_mapping_yaml(self):
        self.config_path.write_text("- just\n- a list\n", encoding="utf-8")
        with _clean_env():
            with self.assertRaises(ValueError):
                ConfigLoader(config_path=str(self.config_path)).load()

        self.config_path.write_text("lock: 5\n", encoding="utf-8")
        with _clean_env():
            with self.assertRaises(ValueError):
                ConfigLoader(config_path=str(self.config_path)).load()


if __name__ == '__main__':
    unittest.main()
