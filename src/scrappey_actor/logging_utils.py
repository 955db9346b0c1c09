from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Field names whose values are never written to a log line.
SECRET_FIELDS = frozenset({"key", "api_key", "apikey", "scrappeyapikey"})
REDACTED = "***"
# `?key=...` / `&key=...` inside URLs or error text
_KEY_PARAM = re.compile(r"([?&]key=)[^&#\s]*", re.IGNORECASE)


def configure_logging(level: str = "INFO") -> None:
    """Root logger setup for the CLI; library code only ever calls getLogger."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=_LOG_FORMAT)
    # httpx logs every request URL at INFO, and ours carries the API key.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def redact(name: str, value: Any) -> Any:
    if name.lower() in SECRET_FIELDS and value is not None:
        return REDACTED
    if isinstance(value, str):
        return _KEY_PARAM.sub(rf"\g<1>{REDACTED}", value)
    return value


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """
    Log one job milestone as a single JSON line, e.g.
    {"event": "job_done", "session": "...", "status_code": 200}.
    API keys are masked, whether passed as a field or embedded in a URL.
    """
    payload: Dict[str, Any] = {"event": event}
    payload.update({name: redact(name, value) for name, value in fields.items()})
    logger.log(level, json.dumps(payload, ensure_ascii=True, sort_keys=True, default=str))
