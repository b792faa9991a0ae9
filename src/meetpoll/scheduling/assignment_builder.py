"""Expansion of the final dates into per-participant assignments."""

from typing import Optional

from meetpoll.domain.models import IsoDate, Participant, ParticipantId
from meetpoll.domain.policies import CoreDatePolicy, DefaultCoreDatePolicy


class AssignmentBuilder:
    """Builds assignments and core dates from the final selection.

    Assignments and core dates are reported chronologically, unlike the
    rank order used while selecting. Core dates are therefore the earliest
    final dates, not necessarily the most voted ones.
    """

    def __init__(self, core_policy: Optional[CoreDatePolicy] = None):
        self.core_policy = core_policy or DefaultCoreDatePolicy()

    def build_assignments(
        self,
        selected: list[IsoDate],
        participants: list[Participant],
    ) -> dict[ParticipantId, list[IsoDate]]:
        """Map each participant to the selected dates it can attend."""
        chronological = sorted(set(selected))
        return {
            p.id: [d for d in chronological if p.is_available(d)]
            for p in participants
        }

    def build_core_dates(self, selected: list[IsoDate]) -> list[IsoDate]:
        """Earliest ``core_count`` selected dates, ascending."""
        chronological = sorted(set(selected))
        return chronological[: self.core_policy.core_count(len(chronological))]
