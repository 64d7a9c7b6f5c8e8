import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


_ENCOUNTER_ENV_KEYS = (
    "ENCOUNTER_COOLDOWN_SECONDS",
    "ENCOUNTER_RNG_SEED",
    "ENCOUNTER_TABLE_PATH",
    "ENCOUNTER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_encounter_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENCOUNTER_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("encounter_engine.bootstrap.load_dotenv", lambda *_args, **_kwargs: False)
