# src/scrappey_actor/pipeline/request.py
"""
Turn a validated ScrapeInput into the JSON body Scrappey expects.

Every optional field is listed once in FIELD_RULES: the attribute to read and
the kind of value it holds. The body key is the input key, and a key lands in
the body only when its value is non-empty:

- text:    "" and None are empty
- flag:    only True is sent (False is Scrappey's default anyway)
- list:    [] and None are empty
- mapping: {} and None are empty
- number:  0 and None are empty
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

from scrappey_actor.models import INPUT_KEYS, ScrapeInput
from scrappey_actor.pipeline.command import BODY_COMMANDS, normalize_command

# Browser action types we know about; others are forwarded but flagged.
KNOWN_BROWSER_ACTIONS = frozenset(
    {"click", "type", "wait", "scroll", "wait_for_selector", "execute_js", "solve_captcha"}
)


def _non_empty_text(value: Any) -> bool:
    return value is not None and value is not False and value != ""


def _is_true(value: Any) -> bool:
    return value is True


def _non_empty_collection(value: Any) -> bool:
    return value is not None and value is not False and len(value) > 0


def _non_zero(value: Any) -> bool:
    return value is not None and value is not False and value != 0


def _text_or_list(value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return _non_empty_text(value)


KINDS: Dict[str, Callable[[Any], bool]] = {
    "text": _non_empty_text,
    "flag": _is_true,
    "list": _non_empty_collection,
    "mapping": _non_empty_collection,
    "number": _non_zero,
    "text_or_list": _text_or_list,
}


@dataclass(frozen=True)
class FieldRule:
    attr: str
    kind: str

    @property
    def key(self) -> str:
        return INPUT_KEYS[self.attr]

    def include(self, value: Any) -> bool:
        return KINDS[self.kind](value)


# `cmd`, `url` and `postData` are handled separately in build_request_body.
FIELD_RULES: Tuple[FieldRule, ...] = (
    # request
    FieldRule("request_type", "text"),
    FieldRule("custom_headers", "mapping"),
    FieldRule("referer", "text"),
    # proxy
    FieldRule("proxy", "text"),
    FieldRule("proxy_country", "text"),
    FieldRule("no_proxy", "flag"),
    FieldRule("premium_proxy", "flag"),
    FieldRule("mobile_proxy", "flag"),
    # session
    FieldRule("session", "text"),
    FieldRule("close_after_use", "flag"),
    # browser
    FieldRule("browser_actions", "list"),
    FieldRule("user_agent", "text"),
    FieldRule("locales", "list"),
    # antibot
    FieldRule("cloudflare_bypass", "flag"),
    FieldRule("datadome_bypass", "flag"),
    FieldRule("kasada_bypass", "flag"),
    FieldRule("disable_anti_bot", "flag"),
    # captcha
    FieldRule("automatically_solve_captchas", "flag"),
    FieldRule("always_load", "list"),
    # response shaping
    FieldRule("screenshot", "flag"),
    FieldRule("screenshot_upload", "flag"),
    FieldRule("video", "flag"),
    FieldRule("css_selector", "text"),
    FieldRule("inner_text", "flag"),
    FieldRule("include_images", "flag"),
    FieldRule("include_links", "flag"),
    FieldRule("regex", "text_or_list"),
    FieldRule("filter", "list"),
    # cookies / storage
    FieldRule("cookies", "text"),
    FieldRule("cookiejar", "list"),
    FieldRule("local_storage", "mapping"),
    # advanced
    FieldRule("intercept_fetch_request", "text_or_list"),
    FieldRule("abort_on_detection", "list"),
    FieldRule("whitelisted_domains", "list"),
    FieldRule("black_listed_domains", "list"),
    FieldRule("full_page_load", "flag"),
    FieldRule("timeout", "number"),
    FieldRule("retries", "number"),
)


def unknown_browser_actions(actions: List[Dict[str, Any]] | None) -> List[str]:
    """Return the `type` of every action we don't recognize ("<missing>" if absent)."""
    out: List[str] = []
    for action in actions or []:
        action_type = action.get("type") if isinstance(action, dict) else None
        if not action_type:
            out.append("<missing>")
        elif action_type not in KNOWN_BROWSER_ACTIONS:
            out.append(str(action_type))
    return out


def build_request_body(job: ScrapeInput) -> Dict[str, Any]:
    """
    Build the Scrappey request body. Pure: the same input always yields the
    same body, and the input is not touched.
    """
    cmd = normalize_command(job.cmd)
    body: Dict[str, Any] = {"cmd": cmd, "url": job.url}

    # postData only makes sense for verbs that carry a body
    if cmd in BODY_COMMANDS and _non_empty_text(job.post_data):
        body["postData"] = job.post_data

    for rule in FIELD_RULES:
        value = getattr(job, rule.attr)
        if rule.include(value):
            body[rule.key] = value

    return body
