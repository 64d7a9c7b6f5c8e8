import argparse
from typing import Sequence

from rich.console import Console

from encounter_engine.bootstrap import configure_logging, load_settings
from encounter_engine.infrastructure.encounter_content import EncounterContentError, load_encounter_table
from encounter_engine.infrastructure.inmemory.inmemory_encounter_table_repo import InMemoryEncounterTableRepository
from encounter_engine.presentation.table_report import render_report, simulate_location


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sample a location's encounter table and print hit frequencies")
    parser.add_argument("location", help="Location key, e.g. enchanted_forest")
    parser.add_argument("--rolls", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=None, help="Defaults to ENCOUNTER_RNG_SEED, then 0")
    parser.add_argument("--level", type=int, default=1)
    parser.add_argument("--time", default="day", choices=["day", "night", "dawn", "dusk"])
    parser.add_argument("--weather", default=None)
    return parser


def main(argv: Sequence[str] | None = None, console: Console | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    console = console or Console()
    settings = load_settings()
    configure_logging(settings)

    table_repo = InMemoryEncounterTableRepository()
    if settings.table_path:
        try:
            for location, encounters in load_encounter_table(settings.table_path).items():
                table_repo.set_location(location, encounters)
        except EncounterContentError as exc:
            console.print(f"[red]Encounter content invalid:[/red] {exc}")
            return 1

    seed = args.seed if args.seed is not None else (settings.rng_seed or 0)
    rows, misses = simulate_location(
        table_repo,
        args.location,
        rolls=args.rolls,
        seed=seed,
        level=args.level,
        time_of_day=args.time,
        weather=args.weather,
    )
    render_report(console, args.location, rows, misses)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
