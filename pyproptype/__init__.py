"""pyproptype: composable runtime checkers for named record values.

A checker validates one field of a record (for example a component's
properties) against a primitive kind and a chain of secondary validators, and
returns a descriptive error instead of raising.
"""

from .core.base_validator import ValidatorSpec
from .core.checker import (
    ANONYMOUS,
    Checker,
    CheckerConfig,
    Location,
    create_checker,
    create_checker_from_options,
    generic_proptype,
)
from .core.errors import (
    CheckerConstructionError,
    DeclarationError,
    InvalidKindError,
    InvalidValueError,
    MissingRequiredPropError,
    PropTypeError,
    RecordValidationFailed,
    ValidatorFaultError,
)
from .core.records import RecordReport, check_record

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__license__",
    "ANONYMOUS",
    "Checker",
    "CheckerConfig",
    "CheckerConstructionError",
    "DeclarationError",
    "InvalidKindError",
    "InvalidValueError",
    "Location",
    "MissingRequiredPropError",
    "PropTypeError",
    "RecordReport",
    "RecordValidationFailed",
    "ValidatorFaultError",
    "ValidatorSpec",
    "check_record",
    "create_checker",
    "create_checker_from_options",
    "generic_proptype",
]
