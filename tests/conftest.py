from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from journey_core.config import JourneyConfig, default_journey_config
from journey_sim.logging.config import HANDLER_NAME
from journey_sim.sink import RecordingSink


@pytest.fixture(autouse=True)
def _restore_journey_loggers():
    """Undo handlers installed by ``setup_logging`` so caplog keeps working."""

    yield
    for name in ("journey_sim", "journey_core"):
        target = logging.getLogger(name)
        for handler in list(target.handlers):
            if handler.get_name() == HANDLER_NAME:
                target.removeHandler(handler)
                handler.close()
        target.propagate = True
        target.setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def journey_config() -> JourneyConfig:
    """The bundled three-leg journey."""

    return default_journey_config()


@pytest.fixture
def recording_sink(journey_config: JourneyConfig) -> RecordingSink:
    return RecordingSink(journey_config.segment_count + 1)


@pytest.fixture
def cli_workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run CLI tests from an empty directory without project overrides."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("JOURNEY_SIM_CONFIG", raising=False)
    return tmp_path
