# src/scrappey_actor/clients/scrappey.py

"""
Plain-function client for the Scrappey API (no classes, no retries).

Design goals:
- Keep *all* HTTP details here so the rest of the code never worries about
  URLs, timeouts or httpx exceptions.
- Return the raw JSON envelope (dict); checking `data == "error"` and
  normalization happen elsewhere.
- Translate every httpx failure into our own TransportError / AuthError.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from scrappey_actor.config import DEFAULT_TIMEOUT_MS, SCRAPPEY_API_ENDPOINT
from scrappey_actor.errors import AuthError, TransportError

# Scrappey answers 401/403 when the key is wrong, expired or out of credits.
AUTH_STATUS_CODES = frozenset({401, 403})


def _default_headers() -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "User-Agent": "scrappey-actor/0.1",
    }


def timeout_seconds(timeout_ms: Optional[float]) -> float:
    """The input speaks milliseconds, httpx speaks seconds. 0/None -> default."""
    return float(timeout_ms or DEFAULT_TIMEOUT_MS) / 1000.0


def _post_json(
    url: str,
    params: Dict[str, str],
    body: Dict[str, Any],
    *,
    timeout_s: float,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Response:
    """
    Do exactly one HTTP POST. No retry: a failed call is final for the job.
    """
    with httpx.Client(timeout=timeout_s, headers=_default_headers(), transport=transport) as client:
        resp = client.post(url, params=params, json=body)
        resp.raise_for_status()  # raises httpx.HTTPStatusError for 4xx/5xx
        return resp


def scrappey_request(
    api_key: str,
    body: Dict[str, Any],
    *,
    timeout_ms: Optional[float] = None,
    endpoint: str = SCRAPPEY_API_ENDPOINT,
    transport: Optional[httpx.BaseTransport] = None,
) -> Dict[str, Any]:
    """
    Send one request body to Scrappey and return the raw JSON envelope.

    Arguments:
    - api_key: goes in the `key` query parameter, never in the body.
    - body: the request body from `pipeline.request.build_request_body`.
    - timeout_ms: overall timeout in milliseconds (default 300000).
    - endpoint: override for tests / self-hosted gateways.
    - transport: httpx transport override (tests use httpx.MockTransport).

    Raises:
    - AuthError for HTTP 401/403.
    - TransportError for any other HTTP status >= 400, network errors,
      timeouts, or a body that is not a JSON object.
    """
    try:
        resp = _post_json(
            endpoint,
            {"key": api_key},
            body,
            timeout_s=timeout_seconds(timeout_ms),
            transport=transport,
        )
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        if status in AUTH_STATUS_CODES:
            raise AuthError(status) from e
        # Build the message ourselves: httpx's includes the URL, and with it the key.
        raise TransportError(
            f"Scrappey API request failed: HTTP {status}",
            status_code=status,
            response_text=e.response.text[:500],
        ) from e
    except httpx.TimeoutException as e:
        raise TransportError(f"Scrappey API request timed out after {timeout_seconds(timeout_ms):g}s") from e
    except httpx.HTTPError as e:
        raise TransportError(f"Scrappey API request failed: {type(e).__name__}: {e}") from e

    try:
        data = resp.json()
    except ValueError as e:
        raise TransportError("Scrappey API returned a non-JSON body", status_code=resp.status_code) from e
    if not isinstance(data, dict):
        raise TransportError("Scrappey API returned an unexpected JSON shape", status_code=resp.status_code)
    return data
