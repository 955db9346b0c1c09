"""
One scrape job, start to finish:

    validate -> normalize command -> build body -> POST to Scrappey
             -> check `data == "error"` -> normalize output -> push to dataset

Every failure is terminal for the job: it is logged, then re-raised to the
caller (the CLI turns it into a non-zero exit code).
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from scrappey_actor.clients.scrappey import scrappey_request
from scrappey_actor.config import Settings
from scrappey_actor.errors import ProviderError, TransportError
from scrappey_actor.io.dataset import DatasetSink
from scrappey_actor.logging_utils import log_event
from scrappey_actor.models import OutputRecord, ProviderResponse, ScrapeInput
from scrappey_actor.pipeline.command import normalize_command
from scrappey_actor.pipeline.normalize import normalize_response
from scrappey_actor.pipeline.request import build_request_body, unknown_browser_actions
from scrappey_actor.pipeline.validate import validate_input

LOGGER = logging.getLogger("scrappey_actor.actor")


def check_provider_response(response: ProviderResponse) -> None:
    """Raise ProviderError if Scrappey's payload reports `data: "error"`."""
    if response.get("data") == "error":
        raise ProviderError(response.get("error"), response.get("info"))


def _antibot_providers(record: OutputRecord) -> list:
    detected = record.detectedAntibotProviders
    if not isinstance(detected, dict):
        return []
    return list(detected.get("providers") or [])


def run_job(
    job: Optional[ScrapeInput],
    *,
    sink: DatasetSink,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> OutputRecord:
    """
    Run a single job and push its OutputRecord to `sink`.

    `transport` is passed straight to httpx (tests use httpx.MockTransport).
    Returns the record that was pushed.
    """
    settings = settings or Settings()
    log_event(
        LOGGER,
        logging.INFO,
        "job_start",
        url=job.url if job is not None else None,
        cmd=job.cmd if job is not None else None,
    )
    stage = "validate"
    try:
        job = validate_input(job)

        cmd = normalize_command(job.cmd)
        if job.unknown_keys:
            log_event(LOGGER, logging.WARNING, "input_keys_ignored", keys=job.unknown_keys)
        unknown_actions = unknown_browser_actions(job.browser_actions)
        if unknown_actions:
            log_event(LOGGER, logging.WARNING, "browser_actions_unrecognized", types=unknown_actions)

        stage = "build"
        body = build_request_body(job)

        stage = "dispatch"
        timeout_ms = job.timeout or settings.default_timeout_ms
        log_event(LOGGER, logging.INFO, "job_request_sent", cmd=cmd, url=job.url, timeout_ms=timeout_ms)
        response = scrappey_request(
            job.api_key,
            body,
            timeout_ms=timeout_ms,
            endpoint=settings.api_endpoint,
            transport=transport,
        )
        check_provider_response(response)

        stage = "normalize"
        record = normalize_response(job.url, cmd, response)

        stage = "persist"
        sink.push(record)
    except Exception as e:
        fields = {"stage": stage, "error_type": type(e).__name__, "error": str(e)}
        if isinstance(e, TransportError):
            fields["status_code"] = e.status_code
            fields["response"] = e.response_text
        if isinstance(e, ProviderError):
            fields["code"] = e.code
            fields["info"] = e.info
        log_event(LOGGER, logging.ERROR, "job_failed", **fields)
        raise

    log_event(
        LOGGER,
        logging.INFO,
        "job_done",
        url=record.url,
        cmd=record.cmd,
        time_elapsed_ms=record.timeElapsed,
        status_code=record.statusCode,
        session=record.session,
        antibot_providers=_antibot_providers(record),
    )
    return record
