from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "scrappey"


@pytest.fixture
def scrappey_fixture() -> Callable[[str], Dict[str, Any]]:
    def _load(name: str) -> Dict[str, Any]:
        return json.loads((FIXTURES / name).read_text(encoding="utf-8"))

    return _load


@pytest.fixture
def fixture_path() -> Callable[[str], str]:
    return lambda name: str(FIXTURES / name)


@pytest.fixture(autouse=True)
def _clean_scrappey_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # A developer's .env must not leak into tests.
    for name in (
        "SCRAPPEY_API_ENDPOINT",
        "SCRAPPEY_DEFAULT_TIMEOUT_MS",
        "SCRAPPEY_API_KEY",
        "SCRAPPEY_INPUT_PATH",
        "SCRAPPEY_DATASET_PATH",
        "SCRAPPEY_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
