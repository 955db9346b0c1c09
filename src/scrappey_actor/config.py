"""
Environment-driven settings.

Nothing here reads `.env` itself; the CLI calls `load_dotenv` before
`load_settings`, so tests can build settings from a clean environment.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

SCRAPPEY_API_ENDPOINT = "https://publisher.scrappey.com/api/v1"
DEFAULT_TIMEOUT_MS = 300_000  # 5 minutes
DEFAULT_INPUT_PATH = "storage/key_value_stores/default/INPUT.json"
DEFAULT_DATASET_PATH = "storage/datasets/default/items.jsonl"


def str_env(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def positive_int_env(name: str, default: int) -> int:
    """Integer setting; unset, malformed, zero or negative values fall back to `default`."""
    raw = str_env(name)
    if raw is None or not raw.lstrip("+").isdigit():
        return default
    return int(raw) or default


@dataclass(frozen=True)
class Settings:
    api_endpoint: str = SCRAPPEY_API_ENDPOINT
    default_timeout_ms: int = DEFAULT_TIMEOUT_MS
    api_key: Optional[str] = None
    input_path: str = DEFAULT_INPUT_PATH
    dataset_path: str = DEFAULT_DATASET_PATH
    log_level: str = "INFO"


def load_settings() -> Settings:
    return Settings(
        api_endpoint=str_env("SCRAPPEY_API_ENDPOINT", SCRAPPEY_API_ENDPOINT) or SCRAPPEY_API_ENDPOINT,
        default_timeout_ms=positive_int_env("SCRAPPEY_DEFAULT_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
        api_key=str_env("SCRAPPEY_API_KEY"),
        input_path=str_env("SCRAPPEY_INPUT_PATH", DEFAULT_INPUT_PATH) or DEFAULT_INPUT_PATH,
        dataset_path=str_env("SCRAPPEY_DATASET_PATH", DEFAULT_DATASET_PATH) or DEFAULT_DATASET_PATH,
        log_level=str_env("SCRAPPEY_LOG_LEVEL", "INFO") or "INFO",
    )
