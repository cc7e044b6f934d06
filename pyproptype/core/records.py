"""Runs a set of declared checkers over a whole record.

This is the host side of the checkers: it calls every checker once per field,
surfaces returned errors as warnings, and only stops the caller when the
configuration asks for it ("block" mode).
"""

import logging
from collections.abc import Mapping
from typing import Dict, List, Optional, Tuple, Union

from .checker import Location
from .config import Config
from .errors import PropTypeError, RecordValidationFailed

logger = logging.getLogger(__name__)


class RecordReport:
    """The outcome of checking every declared field of one record.

    Attributes:
        entity_name (str): The entity the record belongs to.
        location (Location): Where the record came from.
        results (Dict[str, Optional[PropTypeError]]): Per-field outcome, in
            declaration order.
    """

    def __init__(self, entity_name: str, location: Location) -> None:
        self.entity_name = entity_name
        self.location = location
        self.results: Dict[str, Optional[PropTypeError]] = {}

    @property
    def errors(self) -> List[Tuple[str, PropTypeError]]:
        return [(field, error) for field, error in self.results.items() if error is not None]

    @property
    def faults(self) -> List[Tuple[str, PropTypeError]]:
        return [(field, error) for field, error in self.errors if error.is_fault]

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, object]:
        return {
            "entity": self.entity_name,
            "location": self.location.value,
            "errors": [
                {"field": field, "type": type(error).__name__, "message": error.message}
                for field, error in self.errors
            ],
        }


def check_record(
    declarations: Mapping,
    record: Mapping,
    entity_name: Optional[str] = None,
    location: Union[Location, str, None] = None,
    config: Optional[Config] = None,
) -> RecordReport:
    """Validates every declared field of a record.

    Args:
        declarations (Mapping): Field name to `Checker`.
        record (Mapping): The values to validate.
        entity_name (Optional[str]): Name of the owning entity. Defaults to
            the configured `anonymous_name`.
        location (Union[Location, str, None]): Where the record came from.
            Defaults to the configured `default_location`.
        config (Optional[Config]): The configuration to use. A default
            `Config()` is loaded when omitted.

    Returns:
        RecordReport: The per-field results.

    Raises:
        ValueError: If the location, or the configured default, is not a
            `Location` value.
        RecordValidationFailed: In "block" mode, once every field has been
            checked and at least one returned an error.
    """
    config = config if config is not None else Config()
    entity_name = entity_name or config.get("anonymous_name")
    location = Location(location or config.get("default_location", "prop"))

    report = RecordReport(entity_name, location)
    for field_name, checker in declarations.items():
        if not callable(checker):
            raise TypeError(f"Declaration for `{field_name}` is not a checker.")
        error = checker(record, field_name, entity_name, location)
        report.results[field_name] = error
        if error is not None and not config.is_silent():
            logger.warning(f"Warning: Failed {location.label} type: {error.message}")

    logger.info(f"Checked {len(report.results)} field(s) of `{entity_name}`: {len(report.errors)} error(s).")

    if report.errors and config.should_block():
        raise RecordValidationFailed(report)
    return report
