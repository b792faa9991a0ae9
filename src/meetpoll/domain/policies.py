"""Policy definitions for the date selection rules.

This module contains the tunable parts of the selection heuristic that are
not user settings: how far the shortfall repair may search and how the core
date subset is sized. Policies are kept separate from the scheduling stages
to allow independent testing and easy modification.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass


class RepairPolicy(ABC):
    """Abstract base class for shortfall repair bounds."""

    @abstractmethod
    def max_extra_candidates(self) -> int:
        """Maximum number of additional valid dates the repair may consider."""
        pass


class CoreDatePolicy(ABC):
    """Abstract base class for core date sizing."""

    @abstractmethod
    def core_count(self, selected_count: int) -> int:
        """Get how many of the selected dates are flagged as core dates.

        Args:
            selected_count: Number of finally selected dates.

        Returns:
            Number of core dates (0 only when nothing was selected).
        """
        pass


@dataclass
class DefaultRepairPolicy(RepairPolicy):
    """Default repair policy.

    The repair phase looks at no more than 20 extra candidates, which keeps
    its work to a small constant multiple of the participant count.
    """

    candidate_cap: int = 20

    def max_extra_candidates(self) -> int:
        return self.candidate_cap


@dataclass
class DefaultCoreDatePolicy(CoreDatePolicy):
    """Default core date policy.

    Flags a quarter of the selected dates, rounded up, and at least one
    whenever anything was selected.
    """

    core_fraction: float = 0.25

    def core_count(self, selected_count: int) -> int:
        if selected_count <= 0:
            return 0
        return max(1, math.ceil(self.core_fraction * selected_count))
