"""Validation of scheduling inputs and results.

Two validators live here:

- ``RequestValidator`` checks participants and settings before they reach
  the scheduler, which assumes well-formed input.
- ``ScheduleValidator`` re-checks a produced result against the guarantees
  the scheduler makes about its output.

Neither raises on bad data; problems are collected into a ValidationResult.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from meetpoll.domain.models import ScheduleRequest, ScheduleResult
from meetpoll.domain.policies import (
    CoreDatePolicy,
    DefaultCoreDatePolicy,
    DefaultRepairPolicy,
    RepairPolicy,
)
from meetpoll.scheduling.availability import AvailabilityIndex

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Lower bound for each settings field.
SETTING_MINIMUMS = {
    "min_dates_per_person": 1,
    "min_meeting_dates": 1,
    "min_meetings_per_person": 0,
    "min_participants_per_meeting": 1,
}


class ValidationErrorType(Enum):
    """Types of validation errors."""

    # Request errors
    EMPTY_IDENTIFIER = "empty_identifier"
    EMPTY_NAME = "empty_name"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    MALFORMED_DATE = "malformed_date"
    TOO_FEW_DATES = "too_few_dates"
    SETTING_OUT_OF_RANGE = "setting_out_of_range"

    # Result errors
    QUORUM_NOT_MET = "quorum_not_met"
    MISSING_QUORUM_WARNING = "missing_quorum_warning"
    TOO_MANY_DATES = "too_many_dates"
    WRONG_DATE_COUNT = "wrong_date_count"
    ASSIGNMENT_MISMATCH = "assignment_mismatch"
    UNKNOWN_PARTICIPANT = "unknown_participant"
    CORE_DATE_NOT_SELECTED = "core_date_not_selected"
    WRONG_CORE_COUNT = "wrong_core_count"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    participant_id: Optional[str] = None
    date: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.participant_id:
            parts.append(f"Participant {self.participant_id}:")
        parts.append(self.message)
        if self.date is not None:
            parts.append(f"({self.date})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of a validation run."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def errors_of_type(self, error_type: ValidationErrorType) -> list[ValidationError]:
        return [e for e in self.errors if e.error_type == error_type]


def is_iso_date(value: str) -> bool:
    """Check that a string is a real calendar date in ``YYYY-MM-DD`` form."""
    if not ISO_DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


class RequestValidator:
    """Validates participants and settings before scheduling.

    Example:
        >>> validator = RequestValidator()
        >>> result = validator.validate(request)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate(self, request: ScheduleRequest) -> ValidationResult:
        """Validate a complete request.

        Args:
            request: Participants plus settings.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)

        self._validate_settings(request, result)

        if not request.participants:
            result.add_warning("No participants have submitted availability yet.")

        seen_ids: set[str] = set()
        for participant in request.participants:
            pid = participant.id

            if not pid.strip():
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.EMPTY_IDENTIFIER,
                        message="Participant identifier is empty",
                        details={"name": participant.name},
                    )
                )
            elif pid in seen_ids:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_IDENTIFIER,
                        message="Identifier is used by more than one participant",
                        participant_id=pid,
                    )
                )
            seen_ids.add(pid)

            if not participant.name.strip():
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.EMPTY_NAME,
                        message="Display name is empty",
                        participant_id=pid,
                    )
                )

            for day in sorted(participant.available_dates):
                if not is_iso_date(day):
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.MALFORMED_DATE,
                            message="Date is not a valid YYYY-MM-DD date",
                            participant_id=pid,
                            date=day,
                        )
                    )

            required = request.settings.min_dates_per_person
            submitted = len(participant.available_dates)
            if submitted < required:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.TOO_FEW_DATES,
                        message=(
                            f"{participant.name} selected {submitted} dates, "
                            f"at least {required} are required"
                        ),
                        participant_id=pid,
                        details={"submitted": submitted, "required": required},
                    )
                )

        return result

    def _validate_settings(self, request: ScheduleRequest, result: ValidationResult) -> None:
        for attr, minimum in SETTING_MINIMUMS.items():
            value = getattr(request.settings, attr)
            if value < minimum:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.SETTING_OUT_OF_RANGE,
                        message=f"{attr} must be at least {minimum}, got {value}",
                        details={"setting": attr, "value": value},
                    )
                )


class ScheduleValidator:
    """Validates a schedule result against the scheduler's guarantees.

    Checks the quorum of every final date, the repair bound, that each
    assignment equals the participant's availability intersected with the
    final dates, and the size and membership of the core dates.
    """

    def __init__(
        self,
        repair_policy: Optional[RepairPolicy] = None,
        core_policy: Optional[CoreDatePolicy] = None,
    ):
        self.repair_policy = repair_policy or DefaultRepairPolicy()
        self.core_policy = core_policy or DefaultCoreDatePolicy()

    def validate(self, schedule: ScheduleResult, request: ScheduleRequest) -> ValidationResult:
        """Validate a complete schedule result.

        Args:
            schedule: The result to validate.
            request: Original request the result was produced from.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)
        settings = request.settings
        index = AvailabilityIndex.build(request.participants)
        final_dates = schedule.final_dates

        self._validate_dates(schedule, request, index, result)

        max_dates = settings.min_meeting_dates + self.repair_policy.max_extra_candidates()
        if len(final_dates) > max_dates:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.TOO_MANY_DATES,
                    message=f"{len(final_dates)} dates selected, at most {max_dates} allowed",
                )
            )

        if settings.min_meetings_per_person == 0:
            valid_count = sum(
                1 for votes in index.tally.values()
                if votes >= settings.min_participants_per_meeting
            )
            expected = min(settings.min_meeting_dates, valid_count)
            if len(final_dates) != expected:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.WRONG_DATE_COUNT,
                        message=f"Expected {expected} dates, got {len(final_dates)}",
                    )
                )

        self._validate_assignments(schedule, request, result)
        self._validate_core_dates(schedule, result)

        return result

    def _validate_dates(
        self,
        schedule: ScheduleResult,
        request: ScheduleRequest,
        index: AvailabilityIndex,
        result: ValidationResult,
    ) -> None:
        """Check every final date meets the quorum."""
        quorum = request.settings.min_participants_per_meeting
        for day in schedule.final_dates:
            votes = index.get_votes(day)
            if votes < quorum:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.QUORUM_NOT_MET,
                        message=f"Only {votes} participants available, quorum is {quorum}",
                        date=day,
                    )
                )

        if not schedule.final_dates and not schedule.warnings:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.MISSING_QUORUM_WARNING,
                    message="No dates selected but no warning explains why",
                )
            )

    def _validate_assignments(
        self,
        schedule: ScheduleResult,
        request: ScheduleRequest,
        result: ValidationResult,
    ) -> None:
        final = set(schedule.final_dates)
        participants = {p.id: p for p in request.participants}

        for pid in schedule.assignments:
            if pid not in participants:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_PARTICIPANT,
                        message=f"Unknown participant ID: {pid}",
                        participant_id=pid,
                    )
                )

        for pid, participant in participants.items():
            expected = sorted(final & participant.available_dates)
            actual = schedule.assignments.get(pid, [])
            if actual != expected:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.ASSIGNMENT_MISMATCH,
                        message=f"Assigned {actual}, expected {expected}",
                        participant_id=pid,
                        details={"actual": actual, "expected": expected},
                    )
                )

    def _validate_core_dates(self, schedule: ScheduleResult, result: ValidationResult) -> None:
        final = set(schedule.final_dates)
        for day in schedule.core_dates:
            if day not in final:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.CORE_DATE_NOT_SELECTED,
                        message="Core date is not among the final dates",
                        date=day,
                    )
                )

        expected = self.core_policy.core_count(len(final))
        if len(schedule.core_dates) != expected:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.WRONG_CORE_COUNT,
                    message=f"Expected {expected} core dates, got {len(schedule.core_dates)}",
                )
            )
