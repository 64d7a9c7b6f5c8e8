from abc import ABC, abstractmethod
from typing import List, Optional

from encounter_engine.domain.models.encounter import Encounter


class EncounterTableRepository(ABC):
    @abstractmethod
    def list_for_location(self, location: str) -> Optional[List[Encounter]]:
        """Return the registered list, or None when the location has no table."""
        raise NotImplementedError

    @abstractmethod
    def set_location(self, location: str, encounters: List[Encounter]) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_locations(self) -> List[str]:
        raise NotImplementedError


class EnvironmentalEventRepository(ABC):
    @abstractmethod
    def list_for_tag(self, location_tag: str) -> List[Encounter]:
        raise NotImplementedError
