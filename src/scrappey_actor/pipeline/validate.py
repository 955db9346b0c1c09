# src/scrappey_actor/pipeline/validate.py
"""
Fail-fast checks on the job input, run before anything touches the network.

Order matters: missing input -> missing key -> missing url -> invalid url,
then the JSON type of every optional field.
"""
import re
from typing import Any, Optional
from urllib.parse import urlsplit

from scrappey_actor.errors import (
    InvalidFieldError,
    InvalidUrlError,
    MissingApiKeyError,
    MissingInputError,
    MissingUrlError,
)
from scrappey_actor.models import INPUT_KEYS, ScrapeInput
from scrappey_actor.pipeline.request import FIELD_RULES

# Schemes whose URLs must name a host ("file" is special but host-optional)
_HOST_SCHEMES = {"http", "https", "ws", "wss", "ftp"}

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):(.*)$", re.DOTALL)
# Browsers drop these anywhere in the string, and trim C0 controls + space at the ends.
_STRIPPED_ANYWHERE = re.compile(r"[\t\n\r]")
_TRIMMED = "".join(chr(i) for i in range(0x21))
_FORBIDDEN_HOST_CHARS = set(" <>^|%\"`{}")


def _valid_authority(authority: str) -> bool:
    hostport = authority.rpartition("@")[2]  # drop userinfo
    if not hostport:
        return False
    try:
        parts = urlsplit("//" + hostport)
        parts.port  # raises ValueError on a bad port
    except ValueError:
        return False
    if not parts.hostname:
        return False
    if hostport.startswith("["):
        return True  # IPv6 literal, brackets already checked by urlsplit
    return not any(ch in _FORBIDDEN_HOST_CHARS for ch in parts.hostname)


def is_valid_url(value: Any) -> bool:
    """
    True if `value` parses as an absolute URL the way a browser's URL parser
    would accept it: ends are trimmed, spaces in path/query are fine, and
    "https:example.com" means "https://example.com".
    """
    if not isinstance(value, str):
        return False
    value = _STRIPPED_ANYWHERE.sub("", value.strip(_TRIMMED))
    match = _SCHEME_RE.match(value)
    if match is None:
        return False

    scheme, rest = match.group(1).lower(), match.group(2)
    if scheme not in _HOST_SCHEMES:
        # mailto:, data:, file:, custom schemes: anything after the colon goes
        return True
    # Special schemes ignore any run of slashes before the host.
    authority = re.split(r"[/?#\\]", rest.lstrip("/\\"), maxsplit=1)[0]
    return _valid_authority(authority)


# field kind -> (accepted types, wording for the error)
_KIND_TYPES = {
    "text": ((str,), "a string"),
    "flag": ((bool,), "a boolean"),
    "list": ((list,), "a list"),
    "mapping": ((dict,), "an object"),
    "number": ((int, float), "a non-negative number"),
    "text_or_list": ((str, list), "a string or a list"),
}


def _check_kind(key: str, kind: str, value: Any) -> None:
    types, expected = _KIND_TYPES[kind]
    ok = isinstance(value, types)
    if kind == "number":
        # bool is an int subclass, and a negative timeout/retry count means nothing
        ok = ok and not isinstance(value, bool) and value >= 0
    if not ok:
        raise InvalidFieldError(key, expected, value)


def check_field_types(job: ScrapeInput) -> None:
    """Every present optional field must have the JSON type its kind expects."""
    if not isinstance(job.api_key, str):
        raise InvalidFieldError(INPUT_KEYS["api_key"], "a string", job.api_key)
    if job.cmd is not None:
        _check_kind(INPUT_KEYS["cmd"], "text", job.cmd)
    if job.post_data is not None and not isinstance(job.post_data, (dict, str)):
        raise InvalidFieldError(INPUT_KEYS["post_data"], "an object or a string", job.post_data)
    for rule in FIELD_RULES:
        value = getattr(job, rule.attr)
        if value is not None:
            _check_kind(rule.key, rule.kind, value)


def validate_input(job: Optional[ScrapeInput]) -> ScrapeInput:
    """Raise on the first problem; return the input unchanged when it is usable."""
    if job is None:
        raise MissingInputError()
    if not job.api_key:
        raise MissingApiKeyError()
    if not job.url:
        raise MissingUrlError()
    if not is_valid_url(job.url):
        raise InvalidUrlError(job.url)
    check_field_types(job)
    return job
