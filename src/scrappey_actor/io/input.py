# src/scrappey_actor/io/input.py
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from scrappey_actor.errors import MissingInputError
from scrappey_actor.models import ScrapeInput


def read_raw_input(path: str) -> Optional[Dict[str, Any]]:
    """
    Read the job input JSON. '-' reads stdin.
    Returns None when there is no input at all (missing or blank file),
    which validation later turns into MissingInputError.
    """
    if path == "-":
        text = sys.stdin.read()
    else:
        p = Path(path)
        if not p.exists():
            return None
        text = p.read_text(encoding="utf-8")

    if not text.strip():
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MissingInputError(f"Input is not valid JSON ({path}): {e}") from e
    if data is None:
        return None
    if not isinstance(data, dict):
        raise MissingInputError(f"Input must be a JSON object, got {type(data).__name__}")
    return data


def load_input(path: str, *, api_key: Optional[str] = None) -> Optional[ScrapeInput]:
    """
    Load the input file into a ScrapeInput.

    `api_key` (from --api-key or SCRAPPEY_API_KEY) is only used when the input
    itself has no `scrappeyApiKey`.
    """
    raw = read_raw_input(path)
    if raw is None:
        return None
    if api_key and not raw.get("scrappeyApiKey"):
        raw = {**raw, "scrappeyApiKey": api_key}
    return ScrapeInput.from_mapping(raw)
