import json
import tempfile
import unittest
from pathlib import Path

from pyproptype import DeclarationError, InvalidValueError
from pyproptype.utils.files import build_checker, load_declarations, load_records
from pyproptype.validators.values import build_validator, matches, one_of

FIELDS_TOML = """
[fields.title]
kind = "string"
required = true
validators = ["non_empty", { name = "max_length", args = [5] }]

[fields.rating]
kind = "integer"
validators = [{ name = "between", args = [1, 5], message = "rating must be 1..5" }]

[fields.extra]
"""


class TestLoading(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        self.root = Path(self.tmp_dir.name)

    def _write(self, name, content):
        path = self.root / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_load_declarations(self):
        declarations = load_declarations(self._write("fields.toml", FIELDS_TOML))
        self.assertEqual(list(declarations), ["title", "rating", "extra"])
        self.assertTrue(declarations["title"].required)
        self.assertFalse(declarations["rating"].required)

        self.assertIsNone(declarations["title"]({"title": "abc"}, "title", "Card"))
        error = declarations["title"]({"title": "abcdef"}, "title", "Card")
        self.assertIn("`max_length(5)`", error.message)
        error = declarations["rating"]({"rating": 7}, "rating", "Card")
        self.assertIsInstance(error, InvalidValueError)
        self.assertTrue(error.message.endswith("rating must be 1..5"))
        self.assertIsNone(declarations["extra"]({"extra": object()}, "extra", "Card"))

    def test_declarations_from_json(self):
        path = self._write("fields.json", json.dumps({"fields": {"name": {"kind": "string"}}}))
        self.assertEqual(list(load_declarations(path)), ["name"])

    def test_unknown_kind_or_validator(self):
        with self.assertRaises(DeclarationError) as ctx:
            build_checker("title", {"kind": "text"})
        self.assertIn("Unknown kind 'text'", str(ctx.exception))
        with self.assertRaises(DeclarationError):
            build_checker("title", {"kind": "string", "validators": ["shiny"]})
        with self.assertRaises(DeclarationError):
            build_checker("title", {"kind": "string", "validators": [{"args": [1]}]})
        with self.assertRaises(DeclarationError):
            build_checker("title", {"kind": "string", "validators": [{"name": "between", "args": [1, 2], "message": 3}]})

    def test_invalid_regex_is_a_declaration_error(self):
        with self.assertRaises(DeclarationError) as ctx:
            build_checker("code", {"kind": "string", "validators": [{"name": "matches", "args": ["("]}]})
        self.assertIn("Field `code`", str(ctx.exception))

    def test_missing_fields_table(self):
        with self.assertRaises(DeclarationError):
            load_declarations(self._write("fields.toml", "title = 1\n"))

    def test_load_records(self):
        single = self._write("one.json", json.dumps({"title": "a"}))
        many = self._write("many.json", json.dumps([{"title": "a"}, {"title": "b"}]))
        toml = self._write("records.toml", '[[records]]\ntitle = "a"\n\n[[records]]\ntitle = "b"\n')
        self.assertEqual(load_records(single), [{"title": "a"}])
        self.assertEqual(len(load_records(many)), 2)
        self.assertEqual(load_records(toml), [{"title": "a"}, {"title": "b"}])

    def test_load_records_rejects_bad_input(self):
        with self.assertRaises(ValueError):
            load_records(self._write("records.yaml", "title: a"))
        with self.assertRaises(ValueError):
            load_records(self._write("records.json", "[1, 2]"))
        with self.assertRaises(ValueError):
            load_records(self._write("broken.json", "{"))


class TestBuiltinValidators(unittest.TestCase):

    def test_factories_are_named(self):
        self.assertEqual(matches(r"^\d+$").__name__, "matches('^\\\\d+$')")
        self.assertEqual(one_of("a", "b").__name__, "one_of('a', 'b')")

    def test_matches_and_one_of(self):
        self.assertTrue(matches(r"^\d+$")("123"))
        self.assertFalse(matches(r"^\d+$")(123))
        self.assertTrue(one_of("a", "b")("a"))
        self.assertFalse(one_of("a", "b")("c"))

    def test_build_validator(self):
        self.assertEqual(build_validator("non_empty").__name__, "non_empty")
        spec = build_validator("min_length", [2], "too short")
        self.assertEqual(spec.failure_message, "too short")
        with self.assertRaises(TypeError):
            build_validator("positive", [1])
        with self.assertRaises(KeyError):
            build_validator("nope")


if __name__ == '__main__':
    unittest.main()
