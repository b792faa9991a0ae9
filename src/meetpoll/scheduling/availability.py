"""Aggregation of participant submissions into per-date votes."""

import logging
from dataclasses import dataclass, field

from meetpoll.domain.models import IsoDate, Participant, ParticipantId

logger = logging.getLogger(__name__)


@dataclass
class AvailabilityIndex:
    """Who listed which date, and how many distinct participants per date.

    Attributes:
        tally: Date -> number of distinct participants listing it.
        voters: Date -> ids of the participants listing it.
    """

    tally: dict[IsoDate, int] = field(default_factory=dict)
    voters: dict[IsoDate, frozenset[ParticipantId]] = field(default_factory=dict)

    @classmethod
    def build(cls, participants: list[Participant]) -> "AvailabilityIndex":
        """Index a list of participants.

        Each participant contributes at most one vote per distinct date,
        no matter how often the date appears in its own list.
        """
        tally: dict[IsoDate, int] = {}
        voters: dict[IsoDate, set[ParticipantId]] = {}

        for participant in participants:
            for day in set(participant.available_dates):
                tally[day] = tally.get(day, 0) + 1
                voters.setdefault(day, set()).add(participant.id)

        logger.debug(
            "Indexed %d participants over %d distinct dates",
            len(participants),
            len(tally),
        )
        return cls(
            tally=tally,
            voters={day: frozenset(ids) for day, ids in voters.items()},
        )

    def get_votes(self, day: IsoDate) -> int:
        """Get the vote count for a date (0 if nobody listed it)."""
        return self.tally.get(day, 0)

    def get_voters(self, day: IsoDate) -> frozenset[ParticipantId]:
        """Get ids of the participants who listed a date."""
        return self.voters.get(day, frozenset())

    def __len__(self) -> int:
        return len(self.tally)
