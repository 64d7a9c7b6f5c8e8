from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from encounter_engine.domain.models.character import Character


class EncounterKind(str, Enum):
    COMBAT = "combat"
    DIALOGUE = "dialogue"
    EVENT = "event"
    TREASURE = "treasure"
    TRAP = "trap"


class EffectKind(str, Enum):
    HEALTH = "health"
    MANA = "mana"
    EXPERIENCE = "experience"
    ITEM = "item"
    GOLD = "gold"
    REPUTATION = "reputation"
    QUEST = "quest"
    STAT = "stat"


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    GREATER = "greater"
    LESS = "less"
    CONTAINS = "contains"


class TimeOfDay(str, Enum):
    DAY = "day"
    NIGHT = "night"
    DAWN = "dawn"
    DUSK = "dusk"


EffectValue = Union[int, float, str]


@dataclass(frozen=True)
class EncounterEffect:
    kind: EffectKind
    value: EffectValue
    target: Optional[str] = None


@dataclass(frozen=True)
class EncounterOutcome:
    id: str
    description: str
    probability: float
    effects: List[EncounterEffect] = field(default_factory=list)
    requirements: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class EncounterRequirements:
    level: Optional[int] = None
    stats: Dict[str, int] = field(default_factory=dict)
    items: List[str] = field(default_factory=list)
    quests: List[str] = field(default_factory=list)


# Condition variants. ``operator`` may hold a raw string so that content
# authored with an unknown operator still loads; unknown operators pass.


@dataclass(frozen=True)
class LocationCondition:
    value: object
    operator: ConditionOperator | str = ConditionOperator.EQUALS
    kind: str = field(default="location", init=False)


@dataclass(frozen=True)
class TimeCondition:
    value: object
    operator: ConditionOperator | str = ConditionOperator.EQUALS
    kind: str = field(default="time", init=False)


@dataclass(frozen=True)
class WeatherCondition:
    value: object
    operator: ConditionOperator | str = ConditionOperator.EQUALS
    kind: str = field(default="weather", init=False)


@dataclass(frozen=True)
class CharacterStateCondition:
    """Compare ``character.stats[stat]`` against ``value``.

    A condition without a ``stat`` carries no comparable shape and always
    passes.
    """

    stat: Optional[str] = None
    value: object = None
    operator: ConditionOperator | str = ConditionOperator.EQUALS
    kind: str = field(default="character_state", init=False)


@dataclass(frozen=True)
class RandomCondition:
    chance: float
    kind: str = field(default="random", init=False)


EncounterCondition = Union[
    LocationCondition,
    TimeCondition,
    WeatherCondition,
    CharacterStateCondition,
    RandomCondition,
]


@dataclass(frozen=True)
class Encounter:
    id: str
    kind: EncounterKind
    name: str
    description: str
    probability: float
    outcomes: List[EncounterOutcome] = field(default_factory=list)
    conditions: List[EncounterCondition] = field(default_factory=list)
    requirements: Optional[EncounterRequirements] = None

    def outcome(self, outcome_id: str) -> Optional[EncounterOutcome]:
        for row in self.outcomes:
            if row.id == outcome_id:
                return row
        return None


@dataclass
class EncounterContext:
    location: str
    time: TimeOfDay | str
    character: Character
    weather: Optional[str] = None
    recent_encounters: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LootDrop:
    item_id: str
    probability: float


@dataclass
class Enemy:
    id: str
    name: str
    level: int
    health: int
    max_health: int
    mana: int = 0
    max_mana: int = 0
    stats: Dict[str, int] = field(default_factory=dict)
    abilities: List[str] = field(default_factory=list)
    loot: List[LootDrop] = field(default_factory=list)
    experience: int = 0
