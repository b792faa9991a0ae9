"""Main scheduler interface.

This module provides the high-level Scheduler class that runs the selection
pipeline: vote indexing, ranking, baseline selection, shortfall repair and
assignment building.
"""

import logging
from typing import Optional

from meetpoll.domain.models import (
    DateStats,
    IsoDate,
    Participant,
    ParticipantStats,
    ScheduleResult,
    ScheduleStatistics,
    SelectionResult,
    Settings,
)
from meetpoll.domain.policies import CoreDatePolicy, RepairPolicy
from meetpoll.scheduling.assignment_builder import AssignmentBuilder
from meetpoll.scheduling.availability import AvailabilityIndex
from meetpoll.scheduling.date_selector import DateSelector
from meetpoll.scheduling.ranker import CandidateRanker
from meetpoll.scheduling.repair import ShortfallRepairer
from meetpoll.scheduling.warning_collector import WarningCollector

logger = logging.getLogger(__name__)


class Scheduler:
    """High-level scheduler recommending meeting dates.

    The Scheduler holds no state between calls; every method recomputes
    from the participants and settings it is given.

    Example:
        >>> scheduler = Scheduler()
        >>> result = scheduler.generate_schedule(participants, Settings(min_meeting_dates=2))
        >>> result.core_dates
        ['2024-03-04']
    """

    def __init__(
        self,
        repair_policy: Optional[RepairPolicy] = None,
        core_policy: Optional[CoreDatePolicy] = None,
    ):
        """Initialize scheduler with policies.

        Args:
            repair_policy: Bounds for the shortfall repair scan.
            core_policy: Sizing rule for the core date subset.
        """
        self.ranker = CandidateRanker()
        self.selector = DateSelector()
        self.repairer = ShortfallRepairer(repair_policy=repair_policy)
        self.builder = AssignmentBuilder(core_policy=core_policy)

    def determine_final_dates(
        self,
        participants: list[Participant],
        settings: Settings,
    ) -> SelectionResult:
        """Select the meeting dates.

        Args:
            participants: Participants with their available dates.
            settings: Constraint snapshot.

        Returns:
            SelectionResult with dates in rank order and any warnings.
        """
        final_dates, warnings, _ = self._select(participants, settings)
        return SelectionResult(final_dates=final_dates, warnings=warnings.to_list())

    def generate_schedule(
        self,
        participants: list[Participant],
        settings: Settings,
    ) -> ScheduleResult:
        """Select the meeting dates and expand them into assignments.

        Args:
            participants: Participants with their available dates.
            settings: Constraint snapshot.

        Returns:
            ScheduleResult with assignments for every participant.
        """
        final_dates, warnings, _ = self._select(participants, settings)
        return self._build_result(final_dates, participants, warnings)

    def generate_schedule_with_stats(
        self,
        participants: list[Participant],
        settings: Settings,
    ) -> tuple[ScheduleResult, ScheduleStatistics]:
        """Generate schedule and return statistics.

        Returns:
            Tuple of (result, statistics).
        """
        final_dates, warnings, index = self._select(participants, settings)
        result = self._build_result(final_dates, participants, warnings)
        stats = calculate_statistics(final_dates, participants, index.tally)
        return result, stats

    def _select(
        self,
        participants: list[Participant],
        settings: Settings,
    ) -> tuple[list[IsoDate], WarningCollector, AvailabilityIndex]:
        """Run indexing, ranking, selection and repair."""
        warnings = WarningCollector()
        index = AvailabilityIndex.build(participants)
        ranked = self.ranker.rank(index.tally)

        outcome = self.selector.select(ranked, settings, warnings)
        if outcome.halted:
            return [], warnings, index

        final_dates = self.repairer.repair(
            outcome.baseline,
            outcome.valid_dates,
            participants,
            index,
            settings.min_meetings_per_person,
            warnings,
        )

        logger.debug(
            "Selected %d dates for %d participants (%d warnings)",
            len(final_dates),
            len(participants),
            len(warnings),
        )
        return final_dates, warnings, index

    def _build_result(
        self,
        final_dates: list[IsoDate],
        participants: list[Participant],
        warnings: WarningCollector,
    ) -> ScheduleResult:
        return ScheduleResult(
            assignments=self.builder.build_assignments(final_dates, participants),
            core_dates=self.builder.build_core_dates(final_dates),
            warnings=warnings.to_list(),
            final_dates=list(final_dates),
        )


def calculate_statistics(
    final_dates: list[IsoDate],
    participants: list[Participant],
    tally: dict[IsoDate, int],
) -> ScheduleStatistics:
    """Calculate attendance statistics for a set of final dates.

    Args:
        final_dates: Selected dates, in any order.
        participants: Participants to report on.
        tally: Vote counts per date.

    Returns:
        ScheduleStatistics with one entry per participant and per final date.
    """
    chronological = sorted(set(final_dates))
    total = len(chronological)

    participant_stats = [
        ParticipantStats(
            participant_id=p.id,
            name=p.name,
            attending_dates=[d for d in chronological if p.is_available(d)],
            total_meetings=total,
        )
        for p in participants
    ]
    date_stats = [DateStats(date=d, participants=tally.get(d, 0)) for d in final_dates]

    return ScheduleStatistics(
        total_meetings=total,
        participant_stats=participant_stats,
        date_stats=date_stats,
    )
