from __future__ import annotations

import logging
import math
from typing import List, Optional

from encounter_engine.application.dtos import DialogueResult
from encounter_engine.application.services.effect_applier import apply_encounter_effects
from encounter_engine.application.services.event_bus import EventBus
from encounter_engine.domain.events import DialogueChoiceProcessed
from encounter_engine.domain.models.character import ALIGNMENT_AXES, Character
from encounter_engine.domain.models.encounter import Encounter
from encounter_engine.domain.models.npc import NPC, DialogueNode, DialogueOption
from encounter_engine.domain.services.prerequisites import prerequisites_met


# Relationship points per alignment point on an axis named in the NPC personality.
_RELATIONSHIP_AXIS_MULTIPLIER = 2


class DialogueStepper:
    def __init__(self, event_bus: EventBus | None = None) -> None:
        self.event_bus = event_bus
        self._logger = logging.getLogger(__name__)

    def present_dialogue_tree(self, encounter: Optional[Encounter], npc: NPC) -> Optional[DialogueNode]:
        """Return the entry node of ``npc``'s dialogue.

        ``encounter`` is accepted so callers can pass the triggering encounter;
        the entry node does not depend on it yet.
        """

        if not npc.dialogue:
            return None
        return npc.dialogue[0]

    @staticmethod
    def find_node(npc: NPC, node_id: Optional[str]) -> Optional[DialogueNode]:
        if not node_id:
            return None
        for node in npc.dialogue:
            if node.id == node_id:
                return node
        return None

    @staticmethod
    def available_dialogue_options(node: DialogueNode, character: Character) -> List[DialogueOption]:
        return [option for option in node.options if prerequisites_met(option.requirements, character)]

    def process_dialogue_choice(self, choice: DialogueOption, character: Character, npc: NPC) -> DialogueResult:
        updated_character, effects = apply_encounter_effects(choice.effects, character)

        if choice.moral_alignment is not None:
            updated_character.moral_alignment = updated_character.moral_alignment.shifted(choice.moral_alignment)

        change = self.calculate_relationship_change(choice, npc)
        updated_npc = self.update_npc_relationship(npc, change)

        self._logger.debug(
            "Dialogue choice processed",
            extra={
                "npc_id": npc.id,
                "relationship_delta": change,
                "relationship_after": updated_npc.relationship,
            },
        )
        if self.event_bus is not None:
            self.event_bus.publish(
                DialogueChoiceProcessed(
                    npc_id=npc.id,
                    choice_text=choice.text,
                    relationship_before=npc.relationship,
                    relationship_after=updated_npc.relationship,
                )
            )
        return DialogueResult(character=updated_character, npc=updated_npc, effects=effects)

    @staticmethod
    def calculate_relationship_change(choice: DialogueOption, npc: NPC) -> int:
        if choice.moral_alignment is None:
            return 0

        personality = set(npc.personality)
        change = 0
        for axis, value in choice.moral_alignment.present_axes().items():
            if axis in ALIGNMENT_AXES and axis in personality and value:
                change += value * _RELATIONSHIP_AXIS_MULTIPLIER
        return math.floor(change)

    @staticmethod
    def update_npc_relationship(npc: NPC, delta: float) -> NPC:
        return npc.with_relationship(npc.relationship + delta)
