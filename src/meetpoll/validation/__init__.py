"""Validation module for checking requests and schedule results."""

from meetpoll.validation.validator import (
    RequestValidator,
    ScheduleValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "RequestValidator",
    "ScheduleValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
