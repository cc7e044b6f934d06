"""Built-in primitive kinds.

Each kind pairs the label shown in "Invalid input type" messages with the
predicate used as the checker's kind gate.
"""
from collections.abc import Mapping
from typing import Any, Dict, NamedTuple

from ..core.base_validator import Predicate


class Kind(NamedTuple):
    label: str
    predicate: Predicate


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a number here.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_function(value: Any) -> bool:
    return callable(value)


def is_any(value: Any) -> bool:
    return True


KINDS: Dict[str, Kind] = {
    kind.label: kind
    for kind in (
        Kind("string", is_string),
        Kind("number", is_number),
        Kind("integer", is_integer),
        Kind("boolean", is_boolean),
        Kind("object", is_object),
        Kind("array", is_array),
        Kind("function", is_function),
        Kind("any", is_any),
    )
}


def get_kind(label: str) -> Kind:
    """Looks up a built-in kind by label.

    Raises:
        KeyError: If no kind has that label.
    """
    try:
        return KINDS[label]
    except KeyError:
        raise KeyError(f"Unknown kind '{label}'. Known kinds: {', '.join(sorted(KINDS))}") from None
