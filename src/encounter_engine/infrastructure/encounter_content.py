"""Load and validate authored encounter tables.

Usage examples:
    python -m encounter_engine.infrastructure.encounter_content --path data/encounters.json

Expected shape::

    {"locations": {"<location key>": [<encounter>, ...]}}
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List, Sequence

from encounter_engine.domain.models.encounter import (
    CharacterStateCondition,
    ConditionOperator,
    EffectKind,
    Encounter,
    EncounterCondition,
    EncounterEffect,
    EncounterKind,
    EncounterOutcome,
    EncounterRequirements,
    LocationCondition,
    RandomCondition,
    TimeCondition,
    WeatherCondition,
)


logger = logging.getLogger(__name__)

_ENCOUNTER_KINDS = {item.value for item in EncounterKind}
_EFFECT_KINDS = {item.value for item in EffectKind}
_CONDITION_KINDS = ("location", "time", "weather", "character_state", "random")
_OPERATORS = {item.value for item in ConditionOperator}


class EncounterContentError(ValueError):
    """Raised when an encounter table file cannot be read or fails validation."""

    def __init__(self, source: str, errors: List[str]) -> None:
        self.source = source
        self.errors = list(errors)
        super().__init__(f"{source}: {len(self.errors)} content error(s); first: {self.errors[0] if self.errors else '-'}")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_effects(owner: str, effects: object, errors: List[str]) -> None:
    if not isinstance(effects, list):
        errors.append(f"{owner} must be a list")
        return
    for index, effect in enumerate(effects):
        prefix = f"{owner}[{index}]"
        if not isinstance(effect, dict):
            errors.append(f"{prefix} must be an object")
            continue
        kind = str(effect.get("type", "")).strip().lower()
        if kind not in _EFFECT_KINDS:
            errors.append(f"{prefix}.type must be one of {'|'.join(sorted(_EFFECT_KINDS))}")
        value = effect.get("value")
        if not (_is_number(value) or isinstance(value, str)):
            errors.append(f"{prefix}.value must be a number or string")
        target = effect.get("target")
        if target is not None and not isinstance(target, str):
            errors.append(f"{prefix}.target must be a string when provided")


def _validate_encounter(prefix: str, row: object, errors: List[str]) -> None:
    if not isinstance(row, dict):
        errors.append(f"{prefix} must be an object")
        return
    if not str(row.get("id", "")).strip():
        errors.append(f"{prefix}.id is required")
    kind = str(row.get("type", "")).strip().lower()
    if kind not in _ENCOUNTER_KINDS:
        errors.append(f"{prefix}.type must be one of {'|'.join(sorted(_ENCOUNTER_KINDS))}")
    if not _is_number(row.get("probability")):
        errors.append(f"{prefix}.probability must be a number")

    conditions = row.get("conditions", [])
    if not isinstance(conditions, list):
        errors.append(f"{prefix}.conditions must be a list")
    else:
        for index, condition in enumerate(conditions):
            condition_prefix = f"{prefix}.conditions[{index}]"
            if not isinstance(condition, dict):
                errors.append(f"{condition_prefix} must be an object")
                continue
            condition_kind = str(condition.get("type", "")).strip().lower()
            if condition_kind not in _CONDITION_KINDS:
                errors.append(f"{condition_prefix}.type must be one of {'|'.join(_CONDITION_KINDS)}")
            if condition_kind == "random" and not _is_number(condition.get("value")):
                errors.append(f"{condition_prefix}.value must be a number for random conditions")

    requirements = row.get("requirements")
    if requirements is not None:
        if not isinstance(requirements, dict):
            errors.append(f"{prefix}.requirements must be an object")
        else:
            if "level" in requirements and not _is_number(requirements.get("level")):
                errors.append(f"{prefix}.requirements.level must be a number")
            stats = requirements.get("stats", {})
            if not isinstance(stats, dict):
                errors.append(f"{prefix}.requirements.stats must be an object")
            else:
                for stat, floor in stats.items():
                    if not _is_number(floor):
                        errors.append(f"{prefix}.requirements.stats.{stat} must be a number")
            for key in ("items", "quests"):
                if not isinstance(requirements.get(key, []), list):
                    errors.append(f"{prefix}.requirements.{key} must be a list")

    outcomes = row.get("outcomes", [])
    if not isinstance(outcomes, list):
        errors.append(f"{prefix}.outcomes must be a list")
        return
    for index, outcome in enumerate(outcomes):
        outcome_prefix = f"{prefix}.outcomes[{index}]"
        if not isinstance(outcome, dict):
            errors.append(f"{outcome_prefix} must be an object")
            continue
        if not str(outcome.get("id", "")).strip():
            errors.append(f"{outcome_prefix}.id is required")
        if not _is_number(outcome.get("probability")):
            errors.append(f"{outcome_prefix}.probability must be a number")
        if not isinstance(outcome.get("requirements", []), list):
            errors.append(f"{outcome_prefix}.requirements must be a list")
        _validate_effects(f"{outcome_prefix}.effects", outcome.get("effects", []), errors)


def validate_encounter_content(payload: object) -> List[str]:
    if not isinstance(payload, dict):
        return ["payload must be an object"]
    locations = payload.get("locations")
    if not isinstance(locations, dict):
        return ["payload.locations must be an object"]

    errors: List[str] = []
    for location, rows in locations.items():
        location_key = str(location or "").strip()
        if not location_key:
            errors.append("location key cannot be empty")
            continue
        if not isinstance(rows, list):
            errors.append(f"locations.{location_key} must be a list")
            continue
        for index, row in enumerate(rows):
            _validate_encounter(f"locations.{location_key}[{index}]", row, errors)
    return errors


def _operator(raw: object) -> ConditionOperator | str:
    text = str(raw or ConditionOperator.EQUALS.value).strip().lower()
    if text in _OPERATORS:
        return ConditionOperator(text)
    return text


def parse_condition(row: Dict) -> EncounterCondition:
    kind = str(row.get("type", "")).strip().lower()
    value = row.get("value")
    operator = _operator(row.get("operator"))
    if kind == "location":
        return LocationCondition(value=value, operator=operator)
    if kind == "time":
        return TimeCondition(value=value, operator=operator)
    if kind == "weather":
        return WeatherCondition(value=value, operator=operator)
    if kind == "random":
        return RandomCondition(chance=float(value))
    if isinstance(value, dict) and value.get("stat"):
        return CharacterStateCondition(stat=str(value["stat"]), value=value.get("value"), operator=operator)
    # Shapeless character_state values carry nothing to compare.
    return CharacterStateCondition(operator=operator)


def parse_effect(row: Dict) -> EncounterEffect:
    return EncounterEffect(
        kind=EffectKind(str(row["type"]).strip().lower()),
        value=row.get("value"),
        target=row.get("target"),
    )


def parse_encounter(row: Dict) -> Encounter:
    requirements = None
    raw_requirements = row.get("requirements")
    if isinstance(raw_requirements, dict):
        level = raw_requirements.get("level")
        requirements = EncounterRequirements(
            level=int(level) if level is not None else None,
            stats={str(key): value for key, value in (raw_requirements.get("stats") or {}).items()},
            items=[str(item) for item in raw_requirements.get("items") or []],
            quests=[str(quest) for quest in raw_requirements.get("quests") or []],
        )

    outcomes = [
        EncounterOutcome(
            id=str(outcome["id"]),
            description=str(outcome.get("description", "")),
            probability=float(outcome["probability"]),
            effects=[parse_effect(effect) for effect in outcome.get("effects") or []],
            requirements=[str(token) for token in outcome.get("requirements") or []],
        )
        for outcome in row.get("outcomes") or []
    ]
    return Encounter(
        id=str(row["id"]),
        kind=EncounterKind(str(row["type"]).strip().lower()),
        name=str(row.get("name", row["id"])),
        description=str(row.get("description", "")),
        probability=float(row["probability"]),
        outcomes=outcomes,
        conditions=[parse_condition(condition) for condition in row.get("conditions") or []],
        requirements=requirements,
    )


def parse_encounter_table(payload: object, *, source: str = "<payload>") -> Dict[str, List[Encounter]]:
    errors = validate_encounter_content(payload)
    if errors:
        raise EncounterContentError(source, errors)
    return {
        str(location): [parse_encounter(row) for row in rows]
        for location, rows in payload["locations"].items()
    }


def load_encounter_table(path: str | Path) -> Dict[str, List[Encounter]]:
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise EncounterContentError(str(source), [f"File not found: {source}"]) from exc
    except json.JSONDecodeError as exc:
        raise EncounterContentError(str(source), [f"Invalid JSON: {exc}"]) from exc

    table = parse_encounter_table(payload, source=str(source))
    logger.info(
        "Loaded encounter table",
        extra={"source": str(source), "locations": len(table)},
    )
    return table


def validate_encounter_file(path: str | Path) -> List[str]:
    try:
        load_encounter_table(path)
    except EncounterContentError as exc:
        return exc.errors
    return []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate encounter table JSON")
    parser.add_argument("--path", required=True, help="Path to encounter table JSON file")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    errors = validate_encounter_file(args.path)
    if errors:
        print(f"Encounter content invalid ({len(errors)} errors):")
        for message in errors:
            print(f"- {message}")
        return 1

    print("Encounter content valid.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
