import logging
import os
import random
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from encounter_engine.application.services.dialogue_stepper import DialogueStepper
from encounter_engine.application.services.encounter_selector import DEFAULT_COOLDOWN_SECONDS, EncounterSelector
from encounter_engine.application.services.event_bus import EventBus
from encounter_engine.application.services.outcome_resolver import OutcomeResolver
from encounter_engine.infrastructure.encounter_content import load_encounter_table
from encounter_engine.infrastructure.inmemory.inmemory_encounter_table_repo import InMemoryEncounterTableRepository
from encounter_engine.infrastructure.inmemory.inmemory_environmental_event_repo import (
    InMemoryEnvironmentalEventRepository,
)


logger = logging.getLogger(__name__)


@dataclass
class EncounterSettings:
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS
    rng_seed: Optional[int] = None
    table_path: Optional[str] = None
    log_level: str = "WARNING"


@dataclass
class EncounterEngine:
    """One game session's worth of encounter collaborators sharing a bus."""

    settings: EncounterSettings
    event_bus: EventBus
    selector: EncounterSelector
    dialogue: DialogueStepper
    outcomes: OutcomeResolver


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, raw)
        return None


def load_settings() -> EncounterSettings:
    load_dotenv()
    cooldown = _env_float("ENCOUNTER_COOLDOWN_SECONDS", float(DEFAULT_COOLDOWN_SECONDS))
    if cooldown < 0:
        logger.warning("ENCOUNTER_COOLDOWN_SECONDS cannot be negative; using %s", DEFAULT_COOLDOWN_SECONDS)
        cooldown = float(DEFAULT_COOLDOWN_SECONDS)
    return EncounterSettings(
        cooldown_seconds=cooldown,
        rng_seed=_env_int("ENCOUNTER_RNG_SEED"),
        table_path=os.getenv("ENCOUNTER_TABLE_PATH", "").strip() or None,
        log_level=os.getenv("ENCOUNTER_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
    )


def configure_logging(settings: EncounterSettings) -> None:
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.getLogger("encounter_engine").setLevel(level)


def _build_rng(settings: EncounterSettings, offset: int = 0) -> random.Random:
    if settings.rng_seed is None:
        return random.Random()
    return random.Random(settings.rng_seed + offset)


def create_encounter_selector(
    settings: EncounterSettings | None = None,
    event_bus: EventBus | None = None,
) -> EncounterSelector:
    settings = settings or load_settings()
    selector = EncounterSelector(
        InMemoryEncounterTableRepository(),
        InMemoryEnvironmentalEventRepository(),
        rng=_build_rng(settings),
        cooldown_seconds=settings.cooldown_seconds,
        event_bus=event_bus,
    )
    if settings.table_path:
        for location, encounters in load_encounter_table(settings.table_path).items():
            selector.add_location_encounters(location, encounters)
    return selector


def create_dialogue_stepper(event_bus: EventBus | None = None) -> DialogueStepper:
    return DialogueStepper(event_bus=event_bus)


def create_outcome_resolver(
    settings: EncounterSettings | None = None,
    event_bus: EventBus | None = None,
) -> OutcomeResolver:
    settings = settings or load_settings()
    return OutcomeResolver(rng=_build_rng(settings, offset=1), event_bus=event_bus)


def create_encounter_engine(settings: EncounterSettings | None = None) -> EncounterEngine:
    settings = settings or load_settings()
    configure_logging(settings)
    event_bus = EventBus()
    return EncounterEngine(
        settings=settings,
        event_bus=event_bus,
        selector=create_encounter_selector(settings, event_bus),
        dialogue=create_dialogue_stepper(event_bus),
        outcomes=create_outcome_resolver(settings, event_bus),
    )
