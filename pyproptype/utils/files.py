"""Loads records and field declarations from JSON or TOML files.

Field declarations describe one checker per field using the built-in kinds
and validators:

    [fields.title]
    kind = "string"
    required = true
    validators = ["non_empty", { name = "max_length", args = [80] }]
"""
import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Union

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

from ..core.checker import Checker, create_checker
from ..core.errors import DeclarationError
from ..validators.kinds import get_kind, is_any
from ..validators.values import build_validator


def load_document(file_path: Union[str, Path]) -> Any:
    """Parses a `.json` or `.toml` file.

    Raises:
        ValueError: If the extension is unsupported or the content is invalid.
        OSError: If the file cannot be read.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {path}: {e}") from e
    if suffix == ".toml":
        with open(path, "rb") as f:
            try:
                return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e
    raise ValueError(f"Unsupported file type '{suffix}' for {path}; expected .json or .toml.")


def load_records(file_path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Loads one record or a list of records.

    A TOML document (always a table) may hold its records under a `records`
    array of tables; otherwise the document itself is the record.
    """
    document = load_document(file_path)
    if isinstance(document, Mapping) and isinstance(document.get("records"), list):
        document = document["records"]
    if isinstance(document, Mapping):
        return [dict(document)]
    if isinstance(document, list) and all(isinstance(item, Mapping) for item in document):
        return [dict(item) for item in document]
    raise ValueError(f"{file_path} must contain a record or a list of records.")


def _validator_from_declaration(item: Any) -> Any:
    if isinstance(item, str):
        return build_validator(item)
    if isinstance(item, Mapping) and "name" in item:
        return build_validator(item["name"], item.get("args", ()), item.get("message"))
    raise TypeError("validators must be names or tables with a `name`.")


def build_checker(field: str, declaration: Mapping) -> Checker:
    """Builds the checker described by one field declaration.

    A field without validators gets an always-true validator, so only the
    kind gate and the required check apply.

    Raises:
        DeclarationError: If the kind or a validator is unknown, or the
            checker cannot be constructed.
    """
    if not isinstance(declaration, Mapping):
        raise DeclarationError(f"Field `{field}` must be declared as a table.")

    try:
        kind = get_kind(declaration.get("kind", "any"))
        items = declaration.get("validators") or [is_any]
        if not isinstance(items, list):
            items = [items]
        validators = [item if callable(item) else _validator_from_declaration(item) for item in items]
        checker = create_checker(kind.label, kind.predicate, validators)
    except (KeyError, TypeError, ValueError, re.error) as e:
        message = e.args[0] if isinstance(e, KeyError) and e.args else str(e)
        raise DeclarationError(f"Field `{field}`: {message}") from e

    return checker.is_required if declaration.get("required", False) else checker


def load_declarations(file_path: Union[str, Path]) -> Dict[str, Checker]:
    """Loads a field declaration file into field name to checker."""
    document = load_document(file_path)
    fields = document.get("fields") if isinstance(document, Mapping) else None
    if not isinstance(fields, Mapping) or not fields:
        raise DeclarationError(f"{file_path} must contain a non-empty `fields` table.")
    return {field: build_checker(field, declaration) for field, declaration in fields.items()}
