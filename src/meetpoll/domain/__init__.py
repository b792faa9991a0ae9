"""Domain models and business rules for date selection."""

from meetpoll.domain.models import (
    DateStats,
    IsoDate,
    Participant,
    ParticipantId,
    ParticipantStats,
    RankedDate,
    ScheduleRequest,
    ScheduleResult,
    ScheduleStatistics,
    SelectionResult,
    Settings,
)
from meetpoll.domain.policies import (
    CoreDatePolicy,
    DefaultCoreDatePolicy,
    DefaultRepairPolicy,
    RepairPolicy,
)

__all__ = [
    # Models
    "DateStats",
    "IsoDate",
    "Participant",
    "ParticipantId",
    "ParticipantStats",
    "RankedDate",
    "ScheduleRequest",
    "ScheduleResult",
    "ScheduleStatistics",
    "SelectionResult",
    "Settings",
    # Policies
    "CoreDatePolicy",
    "DefaultCoreDatePolicy",
    "DefaultRepairPolicy",
    "RepairPolicy",
]
