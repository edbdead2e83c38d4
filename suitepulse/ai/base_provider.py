"""SuitePulse — Abstract AI Provider."""

from abc import ABC, abstractmethod
from typing import Optional


class AIProvider(ABC):
    """Abstract base for AI narrative generation.

    Providers consume a MetricsSnapshot as a dict and produce a short
    human-readable briefing. The service works without AI.
    """

    @abstractmethod
    async def generate_summary(
        self, snapshot_json: dict, question: Optional[str] = None
    ) -> str:
        """Generate a narrative from a unified metrics snapshot.

        Args:
            snapshot_json: The MetricsSnapshot as a dict.
            question: Optional question to answer from the data instead of
                      producing a general briefing.
        """
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this provider is configured and ready."""
        ...
