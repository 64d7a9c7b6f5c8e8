from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from encounter_engine.domain.models.character import Character
from encounter_engine.domain.models.encounter import EffectKind, EncounterEffect


logger = logging.getLogger(__name__)

# Forwarded to the progression collaborator untouched.
DEFERRED_EFFECT_KINDS = (EffectKind.EXPERIENCE, EffectKind.GOLD, EffectKind.QUEST)


def _numeric(value) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        parsed = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    return int(parsed) if parsed.is_integer() else parsed


def _clamped(current: float, delta: float, ceiling: float) -> float:
    return max(0, min(ceiling, current + delta))


def apply_encounter_effect(effect: EncounterEffect, character: Character) -> Character:
    """Return a new character snapshot with ``effect`` applied.

    The passed character is left untouched. Unknown stat or faction targets
    and non-numeric amounts are no-ops rather than errors.
    """

    updated = character.snapshot()
    kind = effect.kind

    if kind in DEFERRED_EFFECT_KINDS:
        return updated

    if kind == EffectKind.ITEM:
        item_id = str(effect.value)
        if item_id not in updated.inventory:
            updated.inventory.append(item_id)
        return updated

    amount = _numeric(effect.value)
    if amount is None:
        logger.debug(
            "Ignoring effect with non-numeric value",
            extra={"effect_kind": str(kind), "effect_value": effect.value},
        )
        return updated

    if kind == EffectKind.HEALTH:
        updated.health = _clamped(updated.health, amount, updated.max_health)
    elif kind == EffectKind.MANA:
        updated.mana = _clamped(updated.mana, amount, updated.max_mana)
    elif kind == EffectKind.STAT:
        if effect.target and effect.target in updated.stats:
            updated.stats[effect.target] += amount
    elif kind == EffectKind.REPUTATION:
        if effect.target and effect.target in updated.reputation:
            updated.reputation[effect.target] += amount
    return updated


def apply_encounter_effects(
    effects: Iterable[EncounterEffect],
    character: Character,
) -> Tuple[Character, List[EncounterEffect]]:
    applied: List[EncounterEffect] = []
    current = character.snapshot()
    for effect in effects:
        current = apply_encounter_effect(effect, current)
        applied.append(effect)
    return current, applied
