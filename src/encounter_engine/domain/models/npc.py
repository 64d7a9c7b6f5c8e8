from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional

from encounter_engine.domain.models.character import AlignmentShift
from encounter_engine.domain.models.encounter import EncounterEffect


RELATIONSHIP_MIN = -100
RELATIONSHIP_MAX = 100


def clamp_relationship(value: float) -> int:
    return int(max(RELATIONSHIP_MIN, min(RELATIONSHIP_MAX, value)))


@dataclass(frozen=True)
class DialogueOption:
    text: str
    next_node_id: Optional[str] = None
    requirements: List[str] = field(default_factory=list)
    effects: List[EncounterEffect] = field(default_factory=list)
    moral_alignment: Optional[AlignmentShift] = None


@dataclass(frozen=True)
class DialogueNode:
    id: str
    speaker: str
    text: str
    options: List[DialogueOption] = field(default_factory=list)
    conditions: List[str] = field(default_factory=list)


@dataclass
class NPC:
    id: str
    name: str
    description: str = ""
    personality: List[str] = field(default_factory=list)
    faction: Optional[str] = None
    quest_giver: bool = False
    merchant: bool = False
    dialogue: List[DialogueNode] = field(default_factory=list)
    relationship: int = 0

    def __post_init__(self) -> None:
        self.relationship = clamp_relationship(self.relationship)

    def with_relationship(self, relationship: float) -> NPC:
        return replace(
            self,
            personality=list(self.personality),
            dialogue=list(self.dialogue),
            relationship=clamp_relationship(relationship),
        )
