from dataclasses import dataclass
from typing import Union


@dataclass
class EncounterTriggered:
    encounter_id: str
    location: str
    triggered_at: float
    cooldown_until: float


@dataclass
class EnvironmentalEventTriggered:
    encounter_id: str
    location_tag: str


@dataclass
class EncounterCooldownCleared:
    encounter_id: str


@dataclass
class EncounterOutcomeResolved:
    encounter_id: str
    outcome_id: str
    effect_count: int


@dataclass
class DialogueChoiceProcessed:
    npc_id: str
    choice_text: str
    relationship_before: int
    relationship_after: int


EngineEvent = Union[
    EncounterTriggered,
    EnvironmentalEventTriggered,
    EncounterCooldownCleared,
    EncounterOutcomeResolved,
    DialogueChoiceProcessed,
]
