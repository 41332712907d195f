"""Abstract base class for roster sources."""

from abc import ABC, abstractmethod

from src.core.schemas import ProfessionalRecord


class RosterSource(ABC):
    """Read-only supplier of the professionals a search runs over."""

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Unique identifier for this source (e.g. 'json')."""

    @abstractmethod
    async def load(self) -> list[ProfessionalRecord]:
        """Return the current roster snapshot."""
