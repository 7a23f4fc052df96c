"""Validation entry points.

validate() returns a ValidationResult with every error keyed by field name
(or alias); validate_struct() raises ValidationErrors instead. Both raise
TypeError when given something other than a record or None. Each call
allocates a fresh report and walker, so concurrent calls never share error
state.
"""

import logging
from typing import Any

from fieldrules.config import ValidatorConfig, get_config
from fieldrules.errors import (
    FieldError,
    RecursionLimitError,
    UnsupportedTypeError,
    ValidationErrors,
)
from fieldrules.records import is_record, record_name
from fieldrules.report import ErrorReport
from fieldrules.types import ValidationResult
from fieldrules.walker import StructuralWalker

logger = logging.getLogger(__name__)


class ValidationService:
    """Runs record validation with a fixed configuration.

    The service itself is stateless between calls; all per-call state lives
    in the report and walker created by each call.

    Example:
        service = ValidationService()
        result = service.validate(user)
        if not result.valid:
            return {"errors": result.errors}
    """

    def __init__(self, config: ValidatorConfig | None = None):
        self._config = config

    @property
    def config(self) -> ValidatorConfig:
        return self._config or get_config()

    def validate(self, record: Any) -> ValidationResult:
        """Validate a record and collect every error.

        Args:
            record: A dataclass instance or pydantic model (None is valid)

        Returns:
            ValidationResult; ``errors`` is empty when the record is valid.
            Structural problems (unsupported value types, excessive nesting)
            set ``error`` and are also reported under the offending field.

        Raises:
            TypeError: If ``record`` is not a record
        """
        report, valid, fatal = self._run(record)
        return ValidationResult(valid=valid, errors=report.messages, error=fatal)

    def validate_struct(self, record: Any) -> bool:
        """Validate a record, raising on failure.

        Returns:
            True when the record is valid

        Raises:
            ValidationErrors: With every FieldError found
            UnsupportedTypeError: For a value the walker cannot validate
            RecursionLimitError: When nesting exceeds max_depth
            TypeError: If ``record`` is not a record
        """
        report, valid, fatal = self._run(record)
        if fatal is not None:
            raise fatal
        if not valid:
            raise ValidationErrors(report.errors)
        return True

    def _run(self, record: Any) -> tuple[ErrorReport, bool, Exception | None]:
        report = ErrorReport()
        if record is None:
            return report.finalize(), True, None
        if not is_record(record):
            raise TypeError(
                "validation only accepts dataclasses or pydantic models; "
                f"got {type(record).__name__}"
            )

        config = self.config
        walker = StructuralWalker(report, config)
        fatal: Exception | None = None
        try:
            valid = walker.walk_record(record)
        except (UnsupportedTypeError, RecursionLimitError) as exc:
            logger.debug("Validation of %s aborted: %s", record_name(record), exc)
            report.add(FieldError(name=exc.field, message=str(exc)))
            valid = False
            fatal = exc

        report.finalize()
        logger.debug(
            "Validated %s: valid=%s, %d field(s) with errors",
            record_name(record),
            valid,
            len(report),
        )
        return report, valid, fatal


_default_service = ValidationService()


def validate(record: Any) -> ValidationResult:
    """Validate a record with the process-wide configuration."""
    return _default_service.validate(record)


def validate_struct(record: Any) -> bool:
    """Validate a record with the process-wide configuration, raising on failure."""
    return _default_service.validate_struct(record)
