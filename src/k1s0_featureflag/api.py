"""FlagApi abstract base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from .models import FlagDefinition, FlagValue


class FlagApi(ABC):
    """Remote flag service: definition listing and server-side decisions."""

    @abstractmethod
    def fetch_flag_definitions(self) -> list[FlagDefinition]:
        """Fetch every flag definition, active or not, in server order."""
        ...

    @abstractmethod
    def decide(
        self,
        distinct_id: str,
        groups: Mapping[str, str] | None = None,
    ) -> dict[str, FlagValue]:
        """Ask the server to compute all flags for a subject."""
        ...

    def close(self) -> None:
        """Release transport resources."""
