from dataclasses import dataclass, field
from typing import List, Optional

from encounter_engine.domain.models.character import Character
from encounter_engine.domain.models.encounter import Encounter, EncounterEffect, EncounterOutcome
from encounter_engine.domain.models.npc import NPC


@dataclass
class EncounterResolution:
    encounter: Encounter
    outcome: Optional[EncounterOutcome]
    character: Character
    effects: List[EncounterEffect] = field(default_factory=list)


@dataclass
class DialogueResult:
    character: Character
    npc: NPC
    effects: List[EncounterEffect] = field(default_factory=list)


@dataclass
class EncounterFrequencyRow:
    encounter_id: str
    name: str
    kind: str
    hits: int
    share: float
