"""
Secondary validator specs and the safe predicate runner.
"""

import traceback
from collections.abc import Mapping
from typing import Any, Callable, List, NamedTuple, Optional, Tuple

from .errors import CheckerConstructionError

Predicate = Callable[[Any], Any]

# Keys accepted in a spec-shaped mapping, snake_case first.
_PREDICATE_KEYS = ("validation_predicate", "validationPredicate")
_MESSAGE_KEYS = ("failure_message", "failureMessage")


class PredicateOutcome(NamedTuple):
    """The result of running a single predicate through `run_predicate`.

    Attributes:
        passed (bool): True if the predicate returned a truthy value.
        fault (Optional[BaseException]): The exception raised by the
            predicate, if any. `passed` is always False when set.
        trace (str): The formatted traceback for `fault`.
    """

    passed: bool
    fault: Optional[BaseException] = None
    trace: str = ""


def run_predicate(predicate: Predicate, value: Any) -> PredicateOutcome:
    """Runs a user-supplied predicate without letting it raise.

    This mirrors the way every validation step is wrapped: a predicate that
    misbehaves is reported as a fault instead of crashing the caller.

    Args:
        predicate (Predicate): The callable to invoke with `value`.
        value (Any): The value under validation.

    Returns:
        PredicateOutcome: The pass/fail result, or the captured fault.
    """
    try:
        return PredicateOutcome(bool(predicate(value)))
    except Exception as e:
        return PredicateOutcome(False, e, traceback.format_exc())


def display_name(predicate: Predicate) -> Optional[str]:
    """Returns the discoverable name of a predicate, or None if anonymous.

    Lambdas and callables without a `__name__` (e.g. `functools.partial`
    objects) count as anonymous.
    """
    name = getattr(predicate, "__name__", None)
    if not isinstance(name, str) or not name or name == "<lambda>":
        return None
    return name


class ValidatorSpec(NamedTuple):
    """One secondary validator in a checker's chain.

    Attributes:
        predicate (Predicate): Returns a truthy value when the value is valid.
        failure_message (Optional[str]): Custom text reported on failure.
        name (Optional[str]): Display name used when no custom message is set.
    """

    predicate: Predicate
    failure_message: Optional[str] = None
    name: Optional[str] = None

    def run(self, value: Any) -> PredicateOutcome:
        return run_predicate(self.predicate, value)


def _first_present(source: Mapping, keys: Tuple[str, ...]) -> Tuple[bool, Any]:
    for key in keys:
        if key in source:
            return True, source[key]
    return False, None


def _spec_from_mapping(source: Mapping, index: int) -> ValidatorSpec:
    found, predicate = _first_present(source, _PREDICATE_KEYS)
    if not found or not callable(predicate):
        raise CheckerConstructionError(
            f"`validationPredicate` of validator [{index}] must be callable."
        )

    found, message = _first_present(source, _MESSAGE_KEYS)
    if found and message is not None:
        if not isinstance(message, str):
            raise CheckerConstructionError(
                f"`failureMessage` of validator [{index}] must be a string."
            )
        if not message:
            raise CheckerConstructionError(
                f"`failureMessage` of validator [{index}] must not be empty."
            )
    else:
        message = None

    name = source.get("name")
    if name is not None and not isinstance(name, str):
        raise CheckerConstructionError(f"`name` of validator [{index}] must be a string.")

    return ValidatorSpec(predicate, message, name or display_name(predicate))


def to_validator_spec(item: Any, index: int = 0) -> ValidatorSpec:
    """Normalizes one chain element into a `ValidatorSpec`.

    Args:
        item (Any): A callable, a spec-shaped mapping, or a `ValidatorSpec`.
        index (int): Position of the element in the chain, used in errors.

    Returns:
        ValidatorSpec: The normalized spec.

    Raises:
        CheckerConstructionError: If the element is malformed.
    """
    if isinstance(item, ValidatorSpec):
        return _spec_from_mapping(
            {"validation_predicate": item.predicate, "failure_message": item.failure_message, "name": item.name},
            index,
        )
    if isinstance(item, Mapping):
        return _spec_from_mapping(item, index)
    if callable(item):
        return ValidatorSpec(item, None, display_name(item))
    raise CheckerConstructionError(
        f"`valueValidator` [{index}] must be a callable or a mapping with a "
        f"`validationPredicate`, got `{type(item).__name__}`."
    )


def normalize_validators(value_validator: Any) -> Tuple[ValidatorSpec, ...]:
    """Normalizes the `valueValidator` construction argument into a chain.

    A single callable or spec becomes a one-element chain. Lists and tuples
    are normalized element by element, preserving their order.

    Raises:
        CheckerConstructionError: If the argument is absent, empty, or any
            element is malformed.
    """
    if value_validator is None:
        raise CheckerConstructionError("`valueValidator` must be supplied.")

    if isinstance(value_validator, (list, tuple)) and not isinstance(value_validator, ValidatorSpec):
        items: List[Any] = list(value_validator)
    else:
        items = [value_validator]

    if not items:
        raise CheckerConstructionError("`valueValidator` must contain at least one validator.")

    return tuple(to_validator_spec(item, index) for index, item in enumerate(items))
