"""
/**
 * @file template_translator/tests/test_settings_merge.py
 * @description 配置合并单元测试。
 */
"""

import json
import os
import tempfile
import unittest
from unittest.mock import patch

from template_translator.config.settings import DEFAULT_SENDGRID_ENDPOINT, Settings, load_settings


class TestSettingsMerge(unittest.TestCase):
    def test_merge_base_and_local(self):
        with tempfile.TemporaryDirectory() as tmp:
            base_path = os.path.join(tmp, "config.json")
            local_path = os.path.join(tmp, "config.local.json")
            example_path = os.path.join(tmp, "config.example.json")

            with open(base_path, "w") as f:
                json.dump({"endpoints": {"sendgrid": "https://a.test/v3"}, "executor": {"max_workers": 2}}, f)
            with open(local_path, "w") as f:
                json.dump({"endpoints": {"sendgrid": "https://b.test/v3/"}}, f)
            with open(example_path, "w") as f:
                json.dump({}, f)

            s = load_settings(base_path=base_path, local_path=local_path, example_path=example_path)
            self.assertEqual(s.sendgrid_endpoint, "https://b.test/v3/")
            self.assertEqual(s.max_workers, 2)

    def test_example_fallback(self):
        with tempfile.TemporaryDirectory() as tmp:
            example_path = os.path.join(tmp, "config.example.json")
            with open(example_path, "w") as f:
                json.dump({"endpoints": {"sendgrid": "https://example.test/v3"}, "logging": {"level": "debug"}}, f)

            s = load_settings(
                base_path=os.path.join(tmp, "missing.json"),
                local_path=os.path.join(tmp, "missing.local.json"),
                example_path=example_path,
            )
            self.assertEqual(s.sendgrid_endpoint, "https://example.test/v3/")
            self.assertEqual(s.log_level, "DEBUG")

    def test_defaults(self):
        s = Settings(raw={})
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(s.sendgrid_endpoint, DEFAULT_SENDGRID_ENDPOINT)
            self.assertIsNone(s.sendgrid_timeout)
            self.assertEqual(s.max_workers, 8)
            self.assertTrue(s.antiforgery_enabled)
            self.assertFalse(s.docs_enabled)
            self.assertEqual(s.cors_origins, ["*"])

    def test_env_overrides(self):
        s = Settings(raw={"antiforgery": {"enabled": True, "secret": "file"}})
        env = {"ANTIFORGERY_ENABLED": "false", "ANTIFORGERY_SECRET": "env", "APP_ENV": "Development"}
        with patch.dict(os.environ, env, clear=True):
            self.assertFalse(s.antiforgery_enabled)
            self.assertEqual(s.antiforgery_secret, "env")
            self.assertTrue(s.docs_enabled)


if __name__ == "__main__":
    unittest.main()
