"""Deterministic ordering of candidate dates."""

from typing import Iterator

from meetpoll.domain.models import IsoDate, RankedDate


def rank_key(item: tuple[IsoDate, int]) -> tuple[int, IsoDate]:
    """Sort key: most votes first, then earliest ISO date."""
    day, votes = item
    return (-votes, day)


class CandidateRanker:
    """Ranks candidate dates by popularity.

    Dates are ordered by vote count descending; ties go to the
    lexicographically smaller ISO string, which for ``YYYY-MM-DD`` is the
    earlier date. The key never compares equal for two distinct dates, so
    the order does not depend on how the tally was built.

    Example:
        >>> ranker = CandidateRanker()
        >>> list(ranker.rank({"2024-03-02": 2, "2024-03-01": 2}))
        [RankedDate(date='2024-03-01', votes=2), RankedDate(date='2024-03-02', votes=2)]
    """

    def rank(self, tally: dict[IsoDate, int]) -> Iterator[RankedDate]:
        """Yield ranked candidates, best first."""
        for day, votes in sorted(tally.items(), key=rank_key):
            yield RankedDate(date=day, votes=votes)
