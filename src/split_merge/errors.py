# =============================================================================
# Error Handling Types (Result + ErrorReport)
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar('T')


class HostError(Exception):
    """Raised by a windowing host when a call cannot be carried out."""


class ErrorType(Enum):
    INCONSISTENT_STATE = "inconsistent_state"
    RELOCATION_ERROR = "relocation_error"
    CLEANUP_ERROR = "cleanup_error"
    COMPENSATION_ERROR = "compensation_error"
    UNEXPECTED_ERROR = "unexpected_error"
    PARSE_ERROR = "parse_error"
    VALIDATION_ERROR = "validation_error"


@dataclass
class Error:
    error_type: ErrorType
    message: str
    context: dict = field(default_factory=dict)
    original_exception: Exception = None


@dataclass
class Result(Generic[T]):
    success: bool
    value: T = None
    error: Error = None

    @staticmethod
    def ok(value: T) -> 'Result[T]':
        return Result(success=True, value=value)

    @staticmethod
    def err(error: Error) -> 'Result[T]':
        return Result(success=False, error=error)

    def is_ok(self) -> bool:
        return self.success

    def is_err(self) -> bool:
        return not self.success


@dataclass
class ErrorReport:
    """Outcome of one split or merge invocation.

    ``completed`` and ``failed`` hold the identifiers of the units of work
    (windows) that finished or were abandoned.
    """
    operation: str = "error_report"
    errors: list[Error] = field(default_factory=list)
    warnings: list[Error] = field(default_factory=list)
    completed: list = field(default_factory=list)
    failed: list = field(default_factory=list)

    def add_error(self, error: Error):
        self.errors.append(error)
        logger.error(
            error.message,
            operation=self.operation,
            status="error",
            error_type=error.error_type.value,
            **error.context
        )

    def add_warning(self, error: Error):
        self.warnings.append(error)
        logger.warning(
            error.message,
            operation=self.operation,
            status="warning",
            error_type=error.error_type.value,
            **error.context
        )

    def collect_result(self, result: Result) -> bool:
        """Collect error from Result into report if failed."""
        if result.is_err():
            self.add_error(result.error)
            return False
        return True

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def log_summary(self, op_trace_id: str):
        """Log final summary for the invocation."""
        logger.info(
            "Operation complete",
            operation=self.operation,
            status="complete",
            trace_id=op_trace_id,
            metrics={
                "total_errors": len(self.errors),
                "total_warnings": len(self.warnings),
                "completed": len(self.completed),
                "failed": len(self.failed)
            }
        )
