"""Domain models for the meeting date recommender.

This module contains the core data structures shared by every stage of the
scheduling pipeline: participants and their availability, the settings
snapshot, and the result values handed to the presentation layer.

Dates are ISO-8601 strings (``YYYY-MM-DD``) throughout. For this format the
lexicographic order coincides with the chronological order, which both the
ranking and the assignment stages rely on.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

IsoDate = str
ParticipantId = str

# Accepted spellings for each settings field when loading from a mapping.
_SETTINGS_KEYS = {
    "min_dates_per_person": ("minDatesPerPerson", "min_dates_per_person"),
    "min_meeting_dates": ("minMeetingDates", "min_meeting_dates"),
    "min_meetings_per_person": ("minMeetingsPerPerson", "min_meetings_per_person"),
    "min_participants_per_meeting": (
        "minParticipantsPerMeeting",
        "min_participants_per_meeting",
    ),
}


@dataclass(frozen=True)
class Participant:
    """A person who submitted the dates they can attend.

    Attributes:
        id: Unique identifier for the participant.
        name: Display name used in warnings and reports.
        available_dates: ISO dates the participant marked as attendable.
    """

    id: ParticipantId
    name: str
    available_dates: frozenset[IsoDate] = field(default_factory=frozenset)

    def __post_init__(self):
        # Accept any iterable of dates, store a frozenset.
        if not isinstance(self.available_dates, frozenset):
            object.__setattr__(self, "available_dates", frozenset(self.available_dates))

    def is_available(self, day: IsoDate) -> bool:
        """Check if the participant listed a date."""
        return day in self.available_dates

    def attendance(self, dates: Iterable[IsoDate]) -> int:
        """Number of the given dates this participant can attend."""
        return sum(1 for d in set(dates) if d in self.available_dates)


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the selection constraints.

    Attributes:
        min_dates_per_person: Minimum distinct dates each participant must submit.
        min_meeting_dates: Target number of meeting dates to select.
        min_meetings_per_person: Minimum meetings each participant should
            be able to attend (0 disables the repair phase).
        min_participants_per_meeting: Quorum a date needs to be eligible.
    """

    min_dates_per_person: int = 1
    min_meeting_dates: int = 1
    min_meetings_per_person: int = 0
    min_participants_per_meeting: int = 2

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]] = None) -> "Settings":
        """Create settings from a partial mapping merged over the defaults.

        Both camelCase (``minMeetingDates``) and snake_case
        (``min_meeting_dates``) keys are accepted. Unknown keys are ignored.

        Raises:
            ValueError: If a provided value is not an integer.
        """
        values = {}
        for attr, aliases in _SETTINGS_KEYS.items():
            for key in aliases:
                if data and key in data:
                    value = data[key]
                    if isinstance(value, bool) or not isinstance(value, int):
                        raise ValueError(f"Setting '{key}' must be an integer, got {value!r}")
                    values[attr] = value
                    break
        return cls(**values)

    def to_dict(self) -> dict[str, int]:
        """Serialize using the camelCase keys of the interchange format."""
        return {
            aliases[0]: getattr(self, attr)
            for attr, aliases in _SETTINGS_KEYS.items()
        }


@dataclass(frozen=True)
class RankedDate:
    """A candidate date with its vote count."""

    date: IsoDate
    votes: int


@dataclass
class SelectionResult:
    """Dates chosen for the meetings, in selection (rank) order."""

    final_dates: list[IsoDate] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


@dataclass
class ScheduleResult:
    """Per-participant assignments derived from the selected dates.

    Attributes:
        assignments: Participant id -> attendable final dates, ascending.
        core_dates: Earliest quartile of the final dates (at least one).
        warnings: Diagnostics in generation order.
        final_dates: The selected dates in selection (rank) order.
    """

    assignments: dict[ParticipantId, list[IsoDate]] = field(default_factory=dict)
    core_dates: list[IsoDate] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    final_dates: list[IsoDate] = field(default_factory=list)

    def is_core_date(self, day: IsoDate) -> bool:
        """Check if a date is flagged as a core date."""
        return day in self.core_dates

    def get_attendees(self, day: IsoDate) -> list[ParticipantId]:
        """Get ids of participants assigned to a date."""
        return [pid for pid, dates in self.assignments.items() if day in dates]


@dataclass
class ScheduleRequest:
    """Participants plus the settings snapshot to schedule them with."""

    participants: list[Participant] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduleRequest":
        """Build a request from the JSON interchange format.

        Expected shape::

            {
                "settings": {"minMeetingDates": 2, ...},
                "participants": [
                    {"id": "p1", "name": "Alice", "dates": ["2024-03-01"]}
                ]
            }

        Only structure is checked here; value ranges and date formats are
        the job of ``RequestValidator``.

        Raises:
            ValueError: If the payload does not have the expected structure.
        """
        if not isinstance(data, dict):
            raise ValueError("Request must be a JSON object")

        settings_data = data.get("settings")
        if settings_data is None:
            settings_data = {}
        if not isinstance(settings_data, dict):
            raise ValueError("'settings' must be an object")
        settings = Settings.from_dict(settings_data)

        raw_participants = data.get("participants", [])
        if not isinstance(raw_participants, list):
            raise ValueError("'participants' must be a list")

        participants = []
        for i, entry in enumerate(raw_participants):
            if not isinstance(entry, dict):
                raise ValueError(f"Participant #{i + 1} must be an object")
            try:
                pid = entry["id"]
                name = entry.get("name", pid)
                dates = entry.get("dates", entry.get("availableDates", []))
            except KeyError as e:
                raise ValueError(f"Participant #{i + 1} is missing {e}") from e
            if not isinstance(pid, str) or not isinstance(name, str):
                raise ValueError(f"Participant #{i + 1}: 'id' and 'name' must be strings")
            if not isinstance(dates, list) or not all(isinstance(d, str) for d in dates):
                raise ValueError(f"Participant #{i + 1}: 'dates' must be a list of strings")
            participants.append(Participant(id=pid, name=name, available_dates=dates))

        return cls(participants=participants, settings=settings)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON interchange format."""
        return {
            "settings": self.settings.to_dict(),
            "participants": [
                {"id": p.id, "name": p.name, "dates": sorted(p.available_dates)}
                for p in self.participants
            ],
        }


@dataclass
class ParticipantStats:
    """Attendance figures for one participant over the final dates."""

    participant_id: ParticipantId
    name: str
    attending_dates: list[IsoDate] = field(default_factory=list)
    total_meetings: int = 0

    @property
    def attending_count(self) -> int:
        return len(self.attending_dates)

    @property
    def attendance_rate(self) -> float:
        """Share of final dates attended, 0-100."""
        if self.total_meetings == 0:
            return 0.0
        return 100.0 * self.attending_count / self.total_meetings


@dataclass
class DateStats:
    """Vote count of a final date."""

    date: IsoDate
    participants: int


@dataclass
class ScheduleStatistics:
    """Summary statistics over a finished schedule."""

    total_meetings: int = 0
    participant_stats: list[ParticipantStats] = field(default_factory=list)
    date_stats: list[DateStats] = field(default_factory=list)

    @property
    def avg_attendance_rate(self) -> float:
        if not self.participant_stats:
            return 0.0
        return sum(p.attendance_rate for p in self.participant_stats) / len(
            self.participant_stats
        )

    def get_participant(self, participant_id: ParticipantId) -> Optional[ParticipantStats]:
        """Get the stats entry for a participant, if present."""
        for stats in self.participant_stats:
            if stats.participant_id == participant_id:
                return stats
        return None
