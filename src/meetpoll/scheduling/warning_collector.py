"""Accumulation of human-readable diagnostics."""

from dataclasses import dataclass, field


@dataclass
class WarningCollector:
    """Collects warnings in the order they were raised.

    Duplicates are kept; each stage reports what it saw.
    """

    messages: list[str] = field(default_factory=list)

    def add(self, message: str) -> None:
        self.messages.append(message)

    def to_list(self) -> list[str]:
        """Snapshot of the warnings collected so far."""
        return list(self.messages)

    def __len__(self) -> int:
        return len(self.messages)
