import os
import sys
from pathlib import Path
import unittest
from unittest import mock

from rich.console import Console

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from encounter_engine.__main__ import main
from encounter_engine.domain.models.encounter import Encounter, EncounterKind, TimeCondition
from encounter_engine.infrastructure.inmemory.inmemory_encounter_table_repo import InMemoryEncounterTableRepository
from encounter_engine.presentation.table_report import render_report, simulate_location


def _recording_console() -> Console:
    return Console(record=True, width=100, force_terminal=False, color_system=None)


class SimulateLocationTests(unittest.TestCase):
    def test_default_forest_split_follows_weights(self) -> None:
        rows, misses = simulate_location(InMemoryEncounterTableRepository(), "enchanted_forest", rolls=2000, seed=4)

        self.assertEqual(0, misses)
        self.assertEqual(["wolf_pack", "mysterious_shrine"], [row.encounter_id for row in rows])
        self.assertEqual(2000, sum(row.hits for row in rows))
        self.assertAlmostEqual(0.75, rows[0].share, delta=0.05)
        self.assertEqual("combat", rows[0].kind)

    def test_conditions_apply_during_sampling(self) -> None:
        repo = InMemoryEncounterTableRepository(
            {
                "graveyard": [
                    Encounter(
                        id="ghost_sighting",
                        kind=EncounterKind.EVENT,
                        name="Ghost Sighting",
                        description="A spectral figure appears",
                        probability=0.2,
                        conditions=[TimeCondition("night")],
                    )
                ]
            }
        )

        day_rows, day_misses = simulate_location(repo, "graveyard", rolls=10, seed=1, time_of_day="day")
        night_rows, night_misses = simulate_location(repo, "graveyard", rolls=10, seed=1, time_of_day="night")

        self.assertEqual((0, 10), (day_rows[0].hits, day_misses))
        self.assertEqual((10, 0), (night_rows[0].hits, night_misses))

    def test_unknown_location_has_no_rows(self) -> None:
        rows, misses = simulate_location(InMemoryEncounterTableRepository(), "nowhere", rolls=5, seed=1)

        self.assertEqual([], rows)
        self.assertEqual(5, misses)


class RenderReportTests(unittest.TestCase):
    def test_report_lists_each_encounter(self) -> None:
        console = _recording_console()
        rows, misses = simulate_location(InMemoryEncounterTableRepository(), "forest-north", rolls=50, seed=2)

        render_report(console, "forest-north", rows, misses)

        text = console.export_text()
        self.assertIn("Encounter Table: forest-north", text)
        self.assertIn("Wolf Pack", text)
        self.assertIn("Mysterious Shrine", text)

    def test_main_reports_unknown_location(self) -> None:
        console = _recording_console()
        env = {"ENCOUNTER_TABLE_PATH": "", "ENCOUNTER_RNG_SEED": "", "ENCOUNTER_LOG_LEVEL": ""}
        with mock.patch.dict(os.environ, env, clear=False):
            exit_code = main(["swamp", "--rolls", "10"], console=console)

        self.assertEqual(0, exit_code)
        self.assertIn("No encounter table registered", console.export_text())

    def test_main_rejects_invalid_table_file(self) -> None:
        console = _recording_console()
        env = {"ENCOUNTER_TABLE_PATH": "/nonexistent/encounters.json", "ENCOUNTER_RNG_SEED": ""}
        with mock.patch.dict(os.environ, env, clear=False):
            exit_code = main(["enchanted_forest"], console=console)

        self.assertEqual(1, exit_code)
        self.assertIn("Encounter content invalid", console.export_text())


if __name__ == "__main__":
    unittest.main()
