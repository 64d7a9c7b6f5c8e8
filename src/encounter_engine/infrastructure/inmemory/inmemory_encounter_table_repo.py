from __future__ import annotations

from typing import Dict, List, Optional

from encounter_engine.domain.models.encounter import (
    EffectKind,
    Encounter,
    EncounterEffect,
    EncounterKind,
    EncounterOutcome,
)
from encounter_engine.domain.repositories import EncounterTableRepository


def default_forest_encounters() -> List[Encounter]:
    return [
        Encounter(
            id="wolf_pack",
            kind=EncounterKind.COMBAT,
            name="Wolf Pack",
            description="A pack of hungry wolves blocks your path",
            probability=0.3,
            outcomes=[
                EncounterOutcome(
                    id="victory",
                    description="You defeat the wolves",
                    probability=0.7,
                    effects=[
                        EncounterEffect(kind=EffectKind.EXPERIENCE, value=50),
                        EncounterEffect(kind=EffectKind.ITEM, value="wolf_pelt"),
                    ],
                )
            ],
        ),
        Encounter(
            id="mysterious_shrine",
            kind=EncounterKind.EVENT,
            name="Mysterious Shrine",
            description="You discover an ancient shrine",
            probability=0.1,
            outcomes=[
                EncounterOutcome(
                    id="pray",
                    description="You pray at the shrine",
                    probability=1.0,
                    effects=[EncounterEffect(kind=EffectKind.STAT, value=1, target="heart")],
                )
            ],
        ),
    ]


class InMemoryEncounterTableRepository(EncounterTableRepository):
    def __init__(self, tables: Optional[Dict[str, List[Encounter]]] = None) -> None:
        if tables is not None:
            self._tables = {key: list(rows) for key, rows in tables.items()}
            return

        forest = default_forest_encounters()
        self._tables = {
            "enchanted_forest": forest,
            "forest-north": list(forest),
        }

    def list_for_location(self, location: str) -> Optional[List[Encounter]]:
        rows = self._tables.get(location)
        if rows is None:
            return None
        return list(rows)

    def set_location(self, location: str, encounters: List[Encounter]) -> None:
        self._tables[location] = list(encounters)

    def list_locations(self) -> List[str]:
        return list(self._tables.keys())
