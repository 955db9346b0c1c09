# src/scrappey_actor/pipeline/command.py
from typing import Dict, Optional, Tuple

from scrappey_actor.errors import InvalidCommandError
from scrappey_actor.models import ScrappeyCommand

DEFAULT_COMMAND: ScrappeyCommand = "request.get"

SHORT_COMMANDS: Tuple[str, ...] = ("get", "post", "put", "delete", "patch")

# Short verbs and their fully-qualified forms both map to the full form.
COMMAND_MAP: Dict[str, ScrappeyCommand] = {
    **{short: f"request.{short}" for short in SHORT_COMMANDS},  # type: ignore[misc]
    **{f"request.{short}": f"request.{short}" for short in SHORT_COMMANDS},  # type: ignore[misc]
}

# Commands that carry a request body
BODY_COMMANDS = frozenset({"request.post", "request.put", "request.patch"})


def normalize_command(cmd: Optional[str] = None) -> ScrappeyCommand:
    """
    Map a user-supplied verb ("post", "POST", "request.post") to Scrappey's
    canonical command. Empty or missing -> "request.get".
    """
    if not cmd:
        return DEFAULT_COMMAND
    normalized = COMMAND_MAP.get(str(cmd).lower())
    if normalized is None:
        raise InvalidCommandError(str(cmd), SHORT_COMMANDS)
    return normalized
