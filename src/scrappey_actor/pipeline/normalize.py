# src/scrappey_actor/pipeline/normalize.py
"""
Convert Scrappey's raw API response into our flat OutputRecord.

Scrappey nests almost everything under `solution`, and any key can be missing.
This module flattens it and fills in defaults so every row has the same shape.
"""
import datetime as dt
from typing import Any, Callable, Mapping, Optional

from scrappey_actor.models import OutputRecord, ProviderResponse


def utc_timestamp(now: Optional[dt.datetime] = None) -> str:
    # e.g. "2025-09-26T07:20:13.123Z"
    now = now or dt.datetime.now(dt.timezone.utc)
    return now.astimezone(dt.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _get(obj: Mapping[str, Any], key: str, default: Any = None) -> Any:
    # Scrappey sometimes sends explicit nulls; treat them like missing keys.
    value = obj.get(key)
    return default if value is None else value


def normalize_response(
    url: str,
    cmd: str,
    response: ProviderResponse,
    *,
    clock: Callable[[], str] = utc_timestamp,
) -> OutputRecord:
    """
    Map a successful Scrappey response to an OutputRecord.

    Never fails on a well-formed success response: a missing (or null)
    `solution` is treated as `{}` and every field falls back to its default.
    """
    solution = response.get("solution") or {}
    if not isinstance(solution, Mapping):
        solution = {}

    return OutputRecord(
        url=url,
        cmd=cmd,
        verified=_get(solution, "verified", False),
        statusCode=_get(solution, "statusCode"),
        currentUrl=_get(solution, "currentUrl"),
        userAgent=_get(solution, "userAgent"),
        cookies=_get(solution, "cookies", []),
        cookieString=_get(solution, "cookieString"),
        responseHeaders=_get(solution, "responseHeaders"),
        requestHeaders=_get(solution, "requestHeaders"),
        # Scrappey calls the page HTML "response"
        html=_get(solution, "response"),
        innerText=_get(solution, "innerText"),
        ipInfo=_get(solution, "ipInfo"),
        # session + timing live on the envelope, not the solution
        session=_get(response, "session"),
        timeElapsed=_get(response, "timeElapsed"),
        screenshot=_get(solution, "screenshot"),
        screenshotUrl=_get(solution, "screenshotUrl"),
        videoUrl=_get(solution, "videoUrl"),
        javascriptReturn=_get(solution, "javascriptReturn"),
        detectedAntibotProviders=_get(solution, "detectedAntibotProviders"),
        localStorage=_get(solution, "localStorageData"),
        timestamp=clock(),
    )
