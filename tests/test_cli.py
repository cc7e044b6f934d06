import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from click.testing import CliRunner

from pyproptype.cli import main

FIELDS_TOML = """
[fields.title]
kind = "string"
required = true
validators = ["non_empty"]

[fields.rating]
kind = "integer"
validators = [{ name = "between", args = [1, 5] }]
"""

CLEAN_ENV = {
    "PROPTYPE_MODE": None,
    "PROPTYPE_COLORS": None,
    "PROPTYPE_VERBOSE": None,
    "PROPTYPE_DEFAULT_LOCATION": None,
    "PROPTYPE_ANONYMOUS_NAME": None,
}


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        self.root = Path(self.tmp_dir.name)
        self.user_path = self.root / "user" / "config.toml"
        patcher = mock.patch("pyproptype.core.config.USER_CONFIG_PATH", self.user_path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.runner = CliRunner()
        self.fields = self._write("fields.toml", FIELDS_TOML)

    def _write(self, name, content):
        path = self.root / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    def _invoke(self, *args, env=None):
        return self.runner.invoke(main, list(args), env={**CLEAN_ENV, **(env or {})})

    def test_check_valid_records(self):
        records = self._write("records.json", json.dumps([{"title": "a", "rating": 2}, {"title": "b"}]))
        result = self._invoke("check", records, "--fields", self.fields, "--json")
        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.stdout)
        self.assertEqual(len(payload), 2)
        self.assertTrue(all(not report["errors"] for report in payload))

    def test_check_invalid_records_exit_code(self):
        records = self._write("records.json", json.dumps([{"rating": 9}, {"title": "ok"}]))
        result = self._invoke("check", records, "--fields", self.fields, "--json", "--entity", "Card")
        self.assertEqual(result.exit_code, 1)
        payload = json.loads(result.stdout)
        self.assertEqual([e["field"] for e in payload[0]["errors"]], ["title", "rating"])
        self.assertEqual(payload[0]["entity"], "Card")
        self.assertEqual(payload[1]["errors"], [])

    def test_check_block_mode_stops_early(self):
        config = self._write("block.toml", 'mode = "block"\n')
        records = self._write("records.json", json.dumps([{"rating": 9}, {"title": "ok"}]))
        result = self._invoke("check", records, "--fields", self.fields, "--json", "--config", config)
        self.assertEqual(result.exit_code, 1)
        self.assertEqual(len(json.loads(result.stdout)), 1)

    def test_check_table_output(self):
        records = self._write("records.json", json.dumps({"title": "a"}))
        result = self._invoke("check", records, "--fields", self.fields)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("valid", result.output)

    def test_check_bad_declarations(self):
        fields = self._write("bad.toml", '[fields.title]\nkind = "text"\n')
        records = self._write("records.json", "{}")
        result = self._invoke("check", records, "--fields", fields)
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Unknown kind", result.output)

    def test_check_invalid_regex_declaration(self):
        """An uncompilable `matches` pattern is reported as unusable input."""
        fields = self._write("regex.toml", '[fields.code]\nkind = "string"\nvalidators = [{ name = "matches", args = ["("] }]\n')
        records = self._write("records.json", json.dumps({"code": "a"}))
        result = self._invoke("check", records, "--fields", fields)
        self.assertEqual(result.exit_code, 2, result.output)
        self.assertIsInstance(result.exception, SystemExit)
        self.assertIn("Field `code`", result.output)

    def test_check_invalid_configured_location(self):
        """A bad default_location exits with status 2 instead of crashing."""
        records = self._write("records.json", json.dumps({"title": "a"}))
        result = self._invoke("check", records, "--fields", self.fields, env={"PROPTYPE_DEFAULT_LOCATION": "props"})
        self.assertEqual(result.exit_code, 2, result.output)
        self.assertIsInstance(result.exception, SystemExit)
        self.assertIn("default_location", result.output)

    def test_location_option_overrides_configured_default(self):
        records = self._write("records.json", json.dumps({}))
        result = self._invoke(
            "check", records, "--fields", self.fields, "--json", "--location", "context",
            env={"PROPTYPE_DEFAULT_LOCATION": "props"},
        )
        self.assertEqual(result.exit_code, 1, result.output)
        self.assertEqual(json.loads(result.stdout)[0]["location"], "context")

    def test_check_alias(self):
        records = self._write("records.json", json.dumps({"title": "a"}))
        result = self._invoke("c", records, "--fields", self.fields, "--json")
        self.assertEqual(result.exit_code, 0, result.output)

    def test_kinds_alias(self):
        result = self._invoke("ls")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("string", result.output)
        self.assertIn("between", result.output)

    def test_config_set_get_reset(self):
        result = self._invoke("config", "set", "mode", "silent")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(self.user_path.exists())

        result = self._invoke("config", "get", "mode")
        self.assertEqual(result.stdout.strip(), "silent")

        result = self._invoke("config", "reset")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertFalse(self.user_path.exists())

    def test_config_get_requires_key(self):
        result = self._invoke("config", "get")
        self.assertEqual(result.exit_code, 1)


if __name__ == '__main__':
    unittest.main()
