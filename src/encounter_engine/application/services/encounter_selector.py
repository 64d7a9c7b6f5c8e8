from __future__ import annotations

import logging
import random
import time
from typing import Callable, Dict, List, Optional, Sequence

from encounter_engine.application.services.event_bus import EventBus
from encounter_engine.domain.events import (
    EncounterCooldownCleared,
    EncounterTriggered,
    EnvironmentalEventTriggered,
)
from encounter_engine.domain.models.character import Character
from encounter_engine.domain.models.encounter import (
    CharacterStateCondition,
    ConditionOperator,
    Encounter,
    EncounterCondition,
    EncounterContext,
    Enemy,
    LocationCondition,
    LootDrop,
    RandomCondition,
    TimeCondition,
    WeatherCondition,
)
from encounter_engine.domain.repositories import EncounterTableRepository, EnvironmentalEventRepository


DEFAULT_COOLDOWN_SECONDS = 5 * 60


def weighted_walk(rows: Sequence, weights: Sequence[float], draw: float):
    """Pick the first row at which ``draw`` minus the running weight reaches zero.

    ``draw`` is expected in ``[0, sum(weights))``. Rounding can leave a tiny
    positive remainder after the last row; the last row is picked then.
    """

    if not rows:
        return None
    remaining = draw
    for row, weight in zip(rows, weights):
        remaining -= weight
        if remaining <= 0:
            return row
    return rows[-1]


class EncounterSelector:
    def __init__(
        self,
        table_repo: EncounterTableRepository,
        environmental_repo: EnvironmentalEventRepository,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], float] | None = None,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        event_bus: EventBus | None = None,
    ) -> None:
        self.table_repo = table_repo
        self.environmental_repo = environmental_repo
        self.rng = rng or random.Random()
        self.clock = clock or time.time
        self.cooldown_seconds = float(cooldown_seconds)
        self.event_bus = event_bus
        self._history: Dict[str, float] = {}
        self._cooldowns: Dict[str, float] = {}
        self._logger = logging.getLogger(__name__)

    def generate_random_encounter(self, location: str, context: EncounterContext) -> Optional[Encounter]:
        encounters = self.table_repo.list_for_location(location)
        if encounters is None:
            return None

        eligible = [
            encounter
            for encounter in encounters
            if self.meets_requirements(encounter, context)
            and self.meets_conditions(encounter, context)
            and not self.is_on_cooldown(encounter.id)
        ]
        if not eligible:
            self._logger.debug("No eligible encounters", extra={"location": location})
            return None

        weights = [encounter.probability for encounter in eligible]
        draw = self.rng.random() * sum(weights)
        chosen = weighted_walk(eligible, weights, draw)
        self._record_encounter(chosen.id, location)
        return chosen

    def meets_requirements(self, encounter: Encounter, context: EncounterContext) -> bool:
        requirements = encounter.requirements
        if requirements is None:
            return True
        character = context.character

        if requirements.level and character.level < requirements.level:
            return False
        for stat, floor in requirements.stats.items():
            current = character.stats.get(stat)
            if not current:
                return False
            try:
                below_floor = current < floor
            except TypeError:
                # Floors that cannot be compared do not gate the encounter.
                self._logger.debug(
                    "Ignoring incomparable stat floor",
                    extra={"encounter_id": encounter.id, "stat": stat, "floor": floor},
                )
                continue
            if below_floor:
                return False
        for item_id in requirements.items:
            if item_id not in character.inventory:
                return False
        for quest_id in requirements.quests:
            if not character.has_quest(quest_id):
                return False
        return True

    def meets_conditions(self, encounter: Encounter, context: EncounterContext) -> bool:
        return all(self._condition_holds(condition, context) for condition in encounter.conditions)

    def _condition_holds(self, condition: EncounterCondition, context: EncounterContext) -> bool:
        if isinstance(condition, LocationCondition):
            return self.check_condition(context.location, condition.value, condition.operator)
        if isinstance(condition, TimeCondition):
            return self.check_condition(context.time, condition.value, condition.operator)
        if isinstance(condition, WeatherCondition):
            return self.check_condition(context.weather, condition.value, condition.operator)
        if isinstance(condition, CharacterStateCondition):
            return self._character_state_holds(context.character, condition)
        if isinstance(condition, RandomCondition):
            return self.rng.random() < condition.chance
        return True

    def _character_state_holds(self, character: Character, condition: CharacterStateCondition) -> bool:
        if not condition.stat:
            return True
        return self.check_condition(character.stats.get(condition.stat), condition.value, condition.operator)

    @staticmethod
    def check_condition(actual: object, expected: object, operator: ConditionOperator | str | None) -> bool:
        op = str(getattr(operator, "value", operator) or ConditionOperator.EQUALS.value)
        if op == ConditionOperator.EQUALS.value:
            if isinstance(actual, bool) or isinstance(expected, bool):
                return type(actual) is type(expected) and actual == expected
            return actual == expected
        if op in (ConditionOperator.GREATER.value, ConditionOperator.LESS.value):
            try:
                if op == ConditionOperator.GREATER.value:
                    return bool(actual > expected)
                return bool(actual < expected)
            except TypeError:
                return False
        if op == ConditionOperator.CONTAINS.value:
            if isinstance(actual, (list, tuple)):
                return expected in actual
            return False
        return True

    def _record_encounter(self, encounter_id: str, location: str) -> None:
        now = self.clock()
        cooldown_until = now + self.cooldown_seconds
        self._history[encounter_id] = now
        self._cooldowns[encounter_id] = cooldown_until
        self._logger.debug(
            "Encounter triggered",
            extra={"encounter_id": encounter_id, "location": location, "cooldown_until": cooldown_until},
        )
        if self.event_bus is not None:
            self.event_bus.publish(
                EncounterTriggered(
                    encounter_id=encounter_id,
                    location=location,
                    triggered_at=now,
                    cooldown_until=cooldown_until,
                )
            )

    def is_on_cooldown(self, encounter_id: str) -> bool:
        cooldown_until = self._cooldowns.get(encounter_id)
        if cooldown_until is None:
            return False
        return self.clock() < cooldown_until

    def trigger_environmental_event(self, location_tag: str, context: EncounterContext) -> Optional[Encounter]:
        events = self.environmental_repo.list_for_tag(location_tag)
        if not events:
            return None

        candidate = events[self.rng.randrange(len(events))]
        if self.rng.random() >= candidate.probability:
            return None

        if self.event_bus is not None:
            self.event_bus.publish(EnvironmentalEventTriggered(encounter_id=candidate.id, location_tag=location_tag))
        return candidate

    def initiate_combat_encounter(self, encounter: Encounter, context: EncounterContext) -> List[Enemy]:
        base_level = int(context.character.level)
        if encounter.id != "wolf_pack":
            return []

        pack_size = max(1, base_level // 2 + 1)
        return [self._build_wolf(index, base_level) for index in range(pack_size)]

    def _build_wolf(self, index: int, base_level: int) -> Enemy:
        health = 30 + base_level * 5
        return Enemy(
            id=f"wolf_{index}",
            name="Wolf",
            level=max(1, base_level + self.rng.randint(-1, 1)),
            health=health,
            max_health=health,
            mana=0,
            max_mana=0,
            stats={
                "body": 8 + base_level,
                "mind": 6 + base_level // 2,
                "heart": 4 + base_level // 3,
            },
            abilities=["bite", "howl"],
            loot=[
                LootDrop(item_id="wolf_pelt", probability=0.7),
                LootDrop(item_id="wolf_fang", probability=0.3),
            ],
            experience=25 + base_level * 5,
        )

    def get_encounter_history(self) -> Dict[str, float]:
        return dict(self._history)

    def clear_encounter_cooldown(self, encounter_id: str) -> None:
        removed = self._cooldowns.pop(encounter_id, None)
        if removed is not None and self.event_bus is not None:
            self.event_bus.publish(EncounterCooldownCleared(encounter_id=encounter_id))

    def sweep_expired_cooldowns(self) -> int:
        """Drop cooldown entries whose expiry has passed; returns how many went."""

        now = self.clock()
        expired = [encounter_id for encounter_id, until in self._cooldowns.items() if until <= now]
        for encounter_id in expired:
            del self._cooldowns[encounter_id]
        if expired:
            self._logger.debug("Swept expired cooldowns", extra={"count": len(expired)})
        return len(expired)

    def add_location_encounters(self, location: str, encounters: List[Encounter]) -> None:
        self.table_repo.set_location(location, list(encounters))
