"""Bounded greedy repair of per-participant attendance shortfalls.

When the baseline dates leave some participants below the minimum number of
meetings, the repairer walks the remaining valid dates in rank order and
extends the selection one date at a time:

1. A candidate that satisfies everyone is committed and the scan stops.
2. A candidate that leaves strictly fewer participants short than the best
   selection so far is adopted, and the scan continues from there.
3. Any other candidate is skipped.

The scan looks at a bounded number of candidates (see ``RepairPolicy``), so
the result is not guaranteed to be minimal or even feasible.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from meetpoll.domain.models import IsoDate, Participant, ParticipantId, RankedDate
from meetpoll.domain.policies import DefaultRepairPolicy, RepairPolicy
from meetpoll.scheduling.availability import AvailabilityIndex
from meetpoll.scheduling.warning_collector import WarningCollector

logger = logging.getLogger(__name__)


@dataclass
class AttendanceState:
    """Attendance counts of every participant over a set of dates."""

    threshold: int
    counts: dict[ParticipantId, int] = field(default_factory=dict)

    @classmethod
    def from_selection(
        cls,
        participants: list[Participant],
        selected: list[IsoDate],
        threshold: int,
    ) -> "AttendanceState":
        return cls(
            threshold=threshold,
            counts={p.id: p.attendance(selected) for p in participants},
        )

    @property
    def unsatisfied_count(self) -> int:
        return sum(1 for c in self.counts.values() if c < self.threshold)

    def unsatisfied_after(self, voters: frozenset[ParticipantId]) -> int:
        """Unsatisfied count if one more date, listed by ``voters``, were added.

        Only the date's own voters gain a meeting, and a voter stops being
        short exactly when it sat one below the threshold.
        """
        newly_satisfied = sum(
            1
            for pid in voters
            if self.counts.get(pid, self.threshold) == self.threshold - 1
        )
        return self.unsatisfied_count - newly_satisfied

    def add_date(self, voters: frozenset[ParticipantId]) -> None:
        for pid in voters:
            if pid in self.counts:
                self.counts[pid] += 1


class ShortfallRepairer:
    """Extends a baseline selection towards per-participant minimums.

    Example:
        >>> repairer = ShortfallRepairer()
        >>> dates = repairer.repair(baseline, valid_dates, participants,
        ...                         index, min_meetings=1, warnings=collector)
    """

    def __init__(self, repair_policy: Optional[RepairPolicy] = None):
        self.repair_policy = repair_policy or DefaultRepairPolicy()

    def repair(
        self,
        baseline: list[IsoDate],
        valid_dates: list[RankedDate],
        participants: list[Participant],
        index: AvailabilityIndex,
        min_meetings: int,
        warnings: WarningCollector,
    ) -> list[IsoDate]:
        """Return the repaired selection.

        Args:
            baseline: Baseline dates in rank order.
            valid_dates: All quorum-meeting dates in rank order.
            participants: Participants whose attendance is checked.
            index: Voter sets used for incremental attendance updates.
            min_meetings: Required meetings per participant (0 disables repair).
            warnings: Collector for the unmet-minimum warning.

        Returns:
            The selected dates in rank order, baseline first.
        """
        if min_meetings <= 0:
            return list(baseline)

        state = AttendanceState.from_selection(participants, baseline, min_meetings)
        if state.unsatisfied_count == 0:
            return list(baseline)

        best = list(baseline)
        chosen = set(baseline)
        remaining = [c for c in valid_dates[len(baseline):] if c.date not in chosen]
        cap = self.repair_policy.max_extra_candidates()

        for candidate in remaining[:cap]:
            voters = index.get_voters(candidate.date)
            unsatisfied = state.unsatisfied_after(voters)

            if unsatisfied == 0:
                best.append(candidate.date)
                logger.debug("Repair satisfied everyone with %d dates", len(best))
                return best

            # Ties keep the earlier selection.
            if unsatisfied < state.unsatisfied_count:
                best.append(candidate.date)
                state.add_date(voters)

        short = sorted(
            (p for p in participants if state.counts[p.id] < min_meetings),
            key=lambda p: p.id,
        )
        logger.warning(
            "%d participants remain below %d meetings after repair",
            len(short),
            min_meetings,
        )
        details = ", ".join(f"{p.name} ({state.counts[p.id]})" for p in short)
        warnings.add(
            f"These participants cannot attend the minimum of {min_meetings} "
            f"meetings: {details}"
        )
        return best
