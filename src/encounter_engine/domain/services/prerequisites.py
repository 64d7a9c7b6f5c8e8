"""Prerequisite tokens gating dialogue options and encounter outcomes.

Recognised forms::

    quest_completed:<quest_id>
    quest_active:<quest_id>
    quest:<quest_id>          active or completed
    item:<item_id>
    level:<n>
    <stat>_<n>                e.g. ``intelligence_10``

Anything else is treated as satisfied.
"""

from __future__ import annotations

import re
from typing import Iterable

from encounter_engine.domain.models.character import Character


_STAT_FLOOR_PATTERN = re.compile(r"^(?P<stat>[a-z][a-z0-9_]*?)_(?P<floor>-?\d+)$")


def _to_int(raw: str) -> int | None:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def prerequisite_met(token: str, character: Character) -> bool:
    text = str(token or "").strip()
    if not text:
        return True

    if ":" in text:
        prefix, _, value = text.partition(":")
        prefix = prefix.strip().lower()
        value = value.strip()
        if prefix == "quest_completed":
            return value in character.completed_quests
        if prefix == "quest_active":
            return value in character.active_quests
        if prefix == "quest":
            return character.has_quest(value)
        if prefix == "item":
            return value in character.inventory
        if prefix == "level":
            required = _to_int(value)
            return required is None or character.level >= required
        return True

    match = _STAT_FLOOR_PATTERN.match(text.lower())
    if match:
        floor = int(match.group("floor"))
        return character.stats.get(match.group("stat"), 0) >= floor
    return True


def prerequisites_met(tokens: Iterable[str], character: Character) -> bool:
    return all(prerequisite_met(token, character) for token in tokens)
