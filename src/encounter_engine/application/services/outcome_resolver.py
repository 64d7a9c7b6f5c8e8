from __future__ import annotations

import logging
import random
from typing import Optional

from encounter_engine.application.dtos import EncounterResolution
from encounter_engine.application.services.effect_applier import apply_encounter_effects
from encounter_engine.application.services.encounter_selector import weighted_walk
from encounter_engine.application.services.event_bus import EventBus
from encounter_engine.domain.events import EncounterOutcomeResolved
from encounter_engine.domain.models.character import Character
from encounter_engine.domain.models.encounter import Encounter, EncounterOutcome
from encounter_engine.domain.services.prerequisites import prerequisites_met


class OutcomeResolver:
    """Resolve a selected encounter into one of its outcomes and apply the effects."""

    def __init__(self, rng: random.Random | None = None, event_bus: EventBus | None = None) -> None:
        self.rng = rng or random.Random()
        self.event_bus = event_bus
        self._logger = logging.getLogger(__name__)

    def choose_outcome(self, encounter: Encounter, character: Character) -> Optional[EncounterOutcome]:
        eligible = [
            outcome for outcome in encounter.outcomes if prerequisites_met(outcome.requirements, character)
        ]
        if not eligible:
            return None
        weights = [outcome.probability for outcome in eligible]
        draw = self.rng.random() * sum(weights)
        return weighted_walk(eligible, weights, draw)

    def process_encounter_outcome(
        self,
        encounter: Encounter,
        character: Character,
        outcome_id: str | None = None,
    ) -> EncounterResolution:
        if outcome_id is not None:
            outcome = encounter.outcome(outcome_id)
        else:
            outcome = self.choose_outcome(encounter, character)

        if outcome is None:
            self._logger.debug(
                "Encounter resolved without an outcome",
                extra={"encounter_id": encounter.id, "outcome_id": outcome_id},
            )
            return EncounterResolution(encounter=encounter, outcome=None, character=character.snapshot())

        updated, effects = apply_encounter_effects(outcome.effects, character)
        if self.event_bus is not None:
            self.event_bus.publish(
                EncounterOutcomeResolved(
                    encounter_id=encounter.id,
                    outcome_id=outcome.id,
                    effect_count=len(effects),
                )
            )
        return EncounterResolution(encounter=encounter, outcome=outcome, character=updated, effects=effects)
