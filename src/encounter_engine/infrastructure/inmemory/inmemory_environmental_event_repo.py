from __future__ import annotations

from typing import Dict, List, Optional

from encounter_engine.domain.models.encounter import (
    EffectKind,
    Encounter,
    EncounterEffect,
    EncounterKind,
    EncounterOutcome,
)
from encounter_engine.domain.repositories import EnvironmentalEventRepository


class InMemoryEnvironmentalEventRepository(EnvironmentalEventRepository):
    def __init__(self, events: Optional[Dict[str, List[Encounter]]] = None) -> None:
        if events is not None:
            self._events = {key: list(rows) for key, rows in events.items()}
            return

        self._events = {
            "forest": [
                Encounter(
                    id="falling_tree",
                    kind=EncounterKind.TRAP,
                    name="Falling Tree",
                    description="A large tree begins to fall toward you!",
                    probability=0.05,
                    outcomes=[
                        EncounterOutcome(
                            id="dodge_success",
                            description="You successfully dodge the falling tree",
                            probability=0.8,
                            effects=[EncounterEffect(kind=EffectKind.EXPERIENCE, value=10)],
                        ),
                        EncounterOutcome(
                            id="dodge_fail",
                            description="The tree clips you as it falls",
                            probability=0.2,
                            effects=[EncounterEffect(kind=EffectKind.HEALTH, value=-10)],
                        ),
                    ],
                )
            ]
        }

    def list_for_tag(self, location_tag: str) -> List[Encounter]:
        return list(self._events.get(location_tag, []))
