from __future__ import annotations

import random
from collections import Counter
from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from encounter_engine.application.dtos import EncounterFrequencyRow
from encounter_engine.application.services.encounter_selector import EncounterSelector
from encounter_engine.domain.models.character import Character
from encounter_engine.domain.models.encounter import EncounterContext, TimeOfDay
from encounter_engine.domain.repositories import EncounterTableRepository
from encounter_engine.infrastructure.inmemory.inmemory_environmental_event_repo import (
    InMemoryEnvironmentalEventRepository,
)


_BORDER_REPORT = "yellow"


def _ornate_title(title: str) -> str:
    return f"[bold yellow]{title}[/bold yellow]"


def simulate_location(
    table_repo: EncounterTableRepository,
    location: str,
    *,
    rolls: int,
    seed: int,
    level: int = 1,
    time_of_day: TimeOfDay | str = TimeOfDay.DAY,
    weather: str | None = None,
) -> tuple[List[EncounterFrequencyRow], int]:
    """Roll ``location`` repeatedly with cooldowns disabled.

    Returns one row per encounter in table order plus the number of empty rolls.
    """

    selector = EncounterSelector(
        table_repo,
        InMemoryEnvironmentalEventRepository({}),
        rng=random.Random(seed),
        cooldown_seconds=0,
    )
    context = EncounterContext(
        location=location,
        time=time_of_day,
        weather=weather,
        character=Character(level=level),
    )
    hits: Counter[str] = Counter()
    misses = 0
    for _ in range(max(0, int(rolls))):
        encounter = selector.generate_random_encounter(location, context)
        if encounter is None:
            misses += 1
            continue
        hits[encounter.id] += 1

    total = max(1, int(rolls))
    rows = [
        EncounterFrequencyRow(
            encounter_id=encounter.id,
            name=encounter.name,
            kind=str(getattr(encounter.kind, "value", encounter.kind)),
            hits=hits.get(encounter.id, 0),
            share=hits.get(encounter.id, 0) / total,
        )
        for encounter in table_repo.list_for_location(location) or []
    ]
    return rows, misses


def render_report(console: Console, location: str, rows: List[EncounterFrequencyRow], misses: int) -> None:
    if not rows:
        console.print(
            Panel.fit(
                f"No encounter table registered for [bold]{location}[/bold].",
                title=_ornate_title("Encounter Table"),
                border_style=_BORDER_REPORT,
            )
        )
        return

    table = Table(show_header=True, header_style="bold yellow")
    table.add_column("Encounter")
    table.add_column("Kind")
    table.add_column("Hits", justify="right")
    table.add_column("Share", justify="right")
    for row in rows:
        table.add_row(row.name, row.kind, str(row.hits), f"{row.share:.1%}")
    if misses:
        table.add_row("[dim]nothing[/dim]", "-", str(misses), "-")
    console.print(
        Panel.fit(
            table,
            title=_ornate_title(f"Encounter Table: {location}"),
            subtitle="[dim]Cooldowns disabled for sampling[/dim]",
            subtitle_align="left",
            border_style=_BORDER_REPORT,
        )
    )
