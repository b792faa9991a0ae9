"""Quorum filtering and baseline date selection."""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from meetpoll.domain.models import IsoDate, RankedDate, Settings
from meetpoll.scheduling.warning_collector import WarningCollector

logger = logging.getLogger(__name__)


@dataclass
class SelectionOutcome:
    """Result of the baseline selection.

    Attributes:
        baseline: First ``min_meeting_dates`` valid dates, in rank order.
        valid_dates: Every date meeting the quorum, in rank order.
        halted: True when no date meets the quorum and nothing else may run.
    """

    baseline: list[IsoDate] = field(default_factory=list)
    valid_dates: list[RankedDate] = field(default_factory=list)
    halted: bool = False


class DateSelector:
    """Applies the quorum and picks the baseline meeting dates."""

    def select(
        self,
        ranked: Iterable[RankedDate],
        settings: Settings,
        warnings: WarningCollector,
    ) -> SelectionOutcome:
        """Select the baseline dates.

        Args:
            ranked: Candidates in rank order.
            settings: Constraint snapshot.
            warnings: Collector receiving quorum and shortfall warnings.

        Returns:
            SelectionOutcome; ``halted`` is set when no date meets the quorum.
        """
        quorum = settings.min_participants_per_meeting
        valid_dates = [c for c in ranked if c.votes >= quorum]

        if not valid_dates:
            logger.warning("No date reaches the quorum of %d", quorum)
            warnings.add(
                f"No date satisfies the minimum-attendance quorum: "
                f"at least {quorum} participants must be available on a date."
            )
            return SelectionOutcome(halted=True)

        requested = settings.min_meeting_dates
        baseline = [c.date for c in valid_dates[:requested]]

        if len(baseline) < requested:
            warnings.add(
                f"{requested} meeting dates were requested, but only "
                f"{len(baseline)} dates meet the quorum of {quorum}."
            )

        logger.debug(
            "Baseline of %d dates from %d valid candidates",
            len(baseline),
            len(valid_dates),
        )
        return SelectionOutcome(baseline=baseline, valid_dates=valid_dates)
