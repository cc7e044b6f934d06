"""Builds checkers and runs the per-value validation pipeline.

A checker is created once per declared field and then called for every record
that carries the field:

1.  The factory (`create_checker`, `create_checker_from_options` or the
    shape-sniffing `generic_proptype`) validates its arguments and freezes
    them into a `CheckerConfig`.
2.  Calling the checker runs the pipeline: the required check, the primitive
    kind gate, then the secondary validator chain, which stops at the first
    failure.

Checkers return errors instead of raising them, and a predicate that raises is
reported as a `ValidatorFaultError`.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, NamedTuple, Optional, Tuple, Union

from .base_validator import Predicate, PredicateOutcome, ValidatorSpec, normalize_validators, run_predicate
from .errors import (
    CheckerConstructionError,
    InvalidKindError,
    InvalidValueError,
    MissingRequiredPropError,
    PropTypeError,
    ValidatorFaultError,
)

logger = logging.getLogger(__name__)

ANONYMOUS = "<<anonymous>>"

# Bundle keys, snake_case first, camelCase accepted for compatibility.
_OPTION_KEYS = {
    "expected_primitive_type": ("expected_primitive_type", "expectedPrimitiveType"),
    "primitive_type_validator": ("primitive_type_validator", "primitiveTypeValidator"),
    "value_validator": ("value_validator", "valueValidator"),
}


class Location(str, Enum):
    """Where a validated value was found on its entity."""

    PROP = "prop"
    CONTEXT = "context"
    CHILD_CONTEXT = "childContext"

    @property
    def label(self) -> str:
        return "child context" if self is Location.CHILD_CONTEXT else self.value


def location_label(location: Union[Location, str]) -> str:
    """Returns the display word for a location, e.g. "child context"."""
    try:
        return Location(location).label
    except ValueError:
        return str(location)


class CheckerConfig(NamedTuple):
    """The frozen configuration shared by a checker and its required twin.

    Attributes:
        expected_kind (str): Display label of the primitive kind.
        kind_predicate (Predicate): Returns a truthy value for the right kind.
        validators (Tuple[ValidatorSpec, ...]): The secondary validator chain.
    """

    expected_kind: str
    kind_predicate: Predicate
    validators: Tuple[ValidatorSpec, ...]


def build_config(expected_kind: Any, kind_predicate: Any, value_validator: Any) -> CheckerConfig:
    """Validates the construction arguments and freezes them.

    Raises:
        CheckerConstructionError: If any argument is malformed.
    """
    if not isinstance(expected_kind, str):
        raise CheckerConstructionError("`expectedPrimitiveType` must be of type `str`.")
    if not expected_kind:
        raise CheckerConstructionError("`expectedPrimitiveType` must not be empty.")
    if not callable(kind_predicate):
        raise CheckerConstructionError("`primitiveTypeValidator` must be callable.")

    return CheckerConfig(expected_kind, kind_predicate, normalize_validators(value_validator))


def _fault(outcome: PredicateOutcome) -> ValidatorFaultError:
    logger.debug("Validator raised during validation", exc_info=outcome.fault)
    return ValidatorFaultError(
        f"A validator raised an unexpected error: {type(outcome.fault).__name__}: {outcome.fault}",
        fault=outcome.fault,
        trace=outcome.trace,
    )


def validate(
    config: CheckerConfig,
    is_required: bool,
    record: Mapping,
    field_name: str,
    entity_name: Optional[str] = None,
    location: Union[Location, str] = Location.PROP,
    display_field_name: Optional[str] = None,
) -> Optional[PropTypeError]:
    """Validates one field of a record against a checker configuration.

    Args:
        config (CheckerConfig): The checker's frozen configuration.
        is_required (bool): Whether a missing field is itself an error.
        record (Mapping): The record holding the field.
        field_name (str): The key of the field inside `record`.
        entity_name (Optional[str]): Name of the entity that owns the record.
            Defaults to `ANONYMOUS`.
        location (Union[Location, str]): Where the record came from.
        display_field_name (Optional[str]): Full name of the field used in the
            "required" message. Defaults to `field_name`.

    Returns:
        Optional[PropTypeError]: None if the value is valid, otherwise the
        error for the first failing check.
    """
    entity_name = entity_name or ANONYMOUS
    display_field_name = display_field_name or field_name
    where = location_label(location)

    if is_required and field_name not in record:
        return MissingRequiredPropError(
            f"Required {where} `{display_field_name}` was not specified in `{entity_name}`."
        )

    value = record.get(field_name)
    if value is None:
        return None

    observed = type(value).__name__
    outcome = run_predicate(config.kind_predicate, value)
    if outcome.fault is not None:
        return _fault(outcome)
    if not outcome.passed:
        return InvalidKindError(
            f"Invalid input type: `{field_name}` of type `{observed}` supplied to "
            f"`{entity_name}`, expected `{config.expected_kind}`."
        )

    for index, spec in enumerate(config.validators):
        outcome = spec.run(value)
        if outcome.fault is not None:
            return _fault(outcome)
        if outcome.passed:
            continue

        message = f"Invalid {where}: `{field_name}` of type `{observed}` supplied to `{entity_name}`, "
        if spec.failure_message:
            message += spec.failure_message
        elif spec.name:
            message += f"expected to be successfully validated with `{spec.name}`."
        else:
            message += f"expected to be successfully validated with supplied validator [{index}]."
        return InvalidValueError(message)

    return None


class Checker:
    """A callable that validates one named field of a record.

    The optional form is what the factory returns; its required twin is
    available as `checker.is_required` and shares the same configuration.

    Attributes:
        config (CheckerConfig): The frozen configuration.
        required (bool): True for the required form.
    """

    def __init__(self, config: CheckerConfig, required: bool = False) -> None:
        self.config = config
        self.required = required
        if not required:
            self.is_required = Checker(config, required=True)

    def __call__(
        self,
        record: Mapping,
        field_name: str,
        entity_name: Optional[str] = None,
        location: Union[Location, str] = Location.PROP,
        display_field_name: Optional[str] = None,
    ) -> Optional[PropTypeError]:
        return validate(self.config, self.required, record, field_name, entity_name, location, display_field_name)

    def __repr__(self) -> str:
        mode = "required" if self.required else "optional"
        return f"<Checker {self.config.expected_kind!r} ({mode}, {len(self.config.validators)} validator(s))>"


def create_checker(expected_kind: str, kind_predicate: Predicate, value_validator: Any) -> Checker:
    """Creates a checker from positional construction arguments.

    Args:
        expected_kind (str): Display label of the expected primitive kind,
            e.g. "string".
        kind_predicate (Predicate): Checks that a value has that kind.
        value_validator (Any): A callable, a spec-shaped mapping
            (`validation_predicate`, optional `failure_message`), or a list
            mixing both. List order is the evaluation order.

    Returns:
        Checker: The optional checker; `.is_required` holds the required one.

    Raises:
        CheckerConstructionError: If the arguments are malformed.
    """
    return Checker(build_config(expected_kind, kind_predicate, value_validator))


def create_checker_from_options(options: Mapping) -> Checker:
    """Creates a checker from a construction bundle.

    The bundle holds `expected_primitive_type`, `primitive_type_validator` and
    `value_validator` (camelCase spellings are accepted too).
    """
    if not isinstance(options, Mapping):
        raise CheckerConstructionError(
            f"Construction options must be a mapping, got `{type(options).__name__}`."
        )

    resolved = {}
    for field, keys in _OPTION_KEYS.items():
        resolved[field] = next((options[key] for key in keys if key in options), None)

    return Checker(
        build_config(
            resolved["expected_primitive_type"],
            resolved["primitive_type_validator"],
            resolved["value_validator"],
        )
    )


def generic_proptype(*args: Any, **kwargs: Any) -> Checker:
    """Creates a checker from either positional arguments or a bundle.

    A single mapping argument (or keyword arguments only) is read as a
    construction bundle; anything else is read as
    `(expected_kind, kind_predicate, value_validator)`.
    """
    if kwargs and not args:
        return create_checker_from_options(kwargs)
    if len(args) == 1 and not kwargs and isinstance(args[0], Mapping):
        return create_checker_from_options(args[0])
    if kwargs:
        raise CheckerConstructionError("Cannot mix positional arguments with construction options.")
    if len(args) > 3:
        raise CheckerConstructionError(f"Expected at most 3 arguments, got {len(args)}.")

    padded = args + (None,) * (3 - len(args))
    return create_checker(*padded)
