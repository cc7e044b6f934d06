"""Error types used by the checker factory and the validation pipeline.

There are three disjoint families:

* `CheckerConstructionError` is *raised* when a checker is built from
  malformed arguments.
* `PropTypeError` and its subclasses are *returned* by a checker to describe
  the first failing check for a value.
* `ValidatorFaultError` is also returned, but signals that a predicate itself
  blew up rather than that the data was invalid.
"""

from typing import Optional


class CheckerConstructionError(TypeError):
    """Raised when a checker cannot be built from the supplied arguments."""


class PropTypeError(Exception):
    """Base class for errors returned by a checker.

    Instances are handed back to the caller as data; the pipeline never
    raises them.

    Attributes:
        message (str): The human-readable description of the failure.
    """

    is_fault = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class MissingRequiredPropError(PropTypeError):
    """A required field is not present in the record."""


class InvalidKindError(PropTypeError):
    """The value failed the primitive kind gate."""


class InvalidValueError(PropTypeError):
    """The value failed one of the secondary validators."""


class ValidatorFaultError(PropTypeError):
    """A kind predicate or secondary validator raised while running.

    Attributes:
        fault (BaseException): The exception raised by the predicate.
        trace (str): The formatted traceback of `fault`.
    """

    is_fault = True

    def __init__(self, message: str, fault: Optional[BaseException] = None, trace: str = "") -> None:
        super().__init__(message)
        self.fault = fault
        self.trace = trace


class RecordValidationFailed(Exception):
    """Raised by `check_record` in "block" mode when a record has errors.

    Attributes:
        report: The `RecordReport` describing every failing field.
    """

    def __init__(self, report) -> None:
        super().__init__(
            f"{len(report.errors)} field(s) of `{report.entity_name}` failed validation."
        )
        self.report = report


class DeclarationError(ValueError):
    """Raised when a field declaration cannot be turned into a checker."""
