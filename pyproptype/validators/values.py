"""Built-in secondary validators.

Plain predicates can be passed straight into a checker's validator chain. The
factories return predicates whose `__name__` describes their arguments, e.g.
`between(1, 5)`, so failure messages stay readable without a custom message.
"""
import re
from collections.abc import Sized
from typing import Any, Callable, Dict, Optional, Sequence

from ..core.base_validator import Predicate, ValidatorSpec


def _named(predicate: Predicate, name: str) -> Predicate:
    predicate.__name__ = name
    predicate.__qualname__ = name
    return predicate


def non_empty(value: Any) -> bool:
    if isinstance(value, Sized):
        return len(value) > 0
    return True


def positive(value: Any) -> bool:
    return value > 0


def non_negative(value: Any) -> bool:
    return value >= 0


def between(low: Any, high: Any) -> Predicate:
    """Inclusive range check."""
    def check(value: Any) -> bool:
        return low <= value <= high
    return _named(check, f"between({low!r}, {high!r})")


def min_length(length: int) -> Predicate:
    def check(value: Any) -> bool:
        return len(value) >= length
    return _named(check, f"min_length({length})")


def max_length(length: int) -> Predicate:
    def check(value: Any) -> bool:
        return len(value) <= length
    return _named(check, f"max_length({length})")


def matches(pattern: str) -> Predicate:
    """Checks that a string contains a match for `pattern` (`re.search`)."""
    compiled = re.compile(pattern)

    def check(value: Any) -> bool:
        return isinstance(value, str) and compiled.search(value) is not None
    return _named(check, f"matches({pattern!r})")


def one_of(*choices: Any) -> Predicate:
    allowed = tuple(choices)

    def check(value: Any) -> bool:
        return value in allowed
    return _named(check, f"one_of({', '.join(repr(c) for c in allowed)})")


PREDICATES: Dict[str, Predicate] = {
    "non_empty": non_empty,
    "positive": positive,
    "non_negative": non_negative,
}

FACTORIES: Dict[str, Callable[..., Predicate]] = {
    "between": between,
    "min_length": min_length,
    "max_length": max_length,
    "matches": matches,
    "one_of": one_of,
}


def build_validator(name: str, args: Sequence[Any] = (), message: Optional[str] = None) -> Any:
    """Resolves a declared validator into something a checker accepts.

    Args:
        name (str): A key of `PREDICATES` or `FACTORIES`.
        args (Sequence[Any]): Arguments for a factory. Plain predicates take
            none.
        message (Optional[str]): A custom failure message.

    Returns:
        Any: A predicate, or a `ValidatorSpec` when `message` is given.

    Raises:
        KeyError: If `name` is unknown.
        TypeError: If arguments are given to a plain predicate, or a factory
            rejects them.
    """
    if name in PREDICATES:
        if args:
            raise TypeError(f"Validator '{name}' takes no arguments.")
        predicate = PREDICATES[name]
    elif name in FACTORIES:
        predicate = FACTORIES[name](*args)
    else:
        known = sorted(list(PREDICATES) + list(FACTORIES))
        raise KeyError(f"Unknown validator '{name}'. Known validators: {', '.join(known)}")

    if message is not None:
        return ValidatorSpec(predicate, message)
    return predicate
