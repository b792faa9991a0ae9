"""Scheduling engine for recommending meeting dates."""

from meetpoll.scheduling.assignment_builder import AssignmentBuilder
from meetpoll.scheduling.availability import AvailabilityIndex
from meetpoll.scheduling.date_selector import DateSelector, SelectionOutcome
from meetpoll.scheduling.ranker import CandidateRanker
from meetpoll.scheduling.repair import AttendanceState, ShortfallRepairer
from meetpoll.scheduling.scheduler import Scheduler, calculate_statistics
from meetpoll.scheduling.warning_collector import WarningCollector

__all__ = [
    # Core scheduler
    "Scheduler",
    "calculate_statistics",
    # Pipeline stages
    "AvailabilityIndex",
    "CandidateRanker",
    "DateSelector",
    "SelectionOutcome",
    "ShortfallRepairer",
    "AttendanceState",
    "AssignmentBuilder",
    "WarningCollector",
]
