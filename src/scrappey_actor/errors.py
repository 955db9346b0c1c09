from __future__ import annotations

from typing import Iterable, Optional

# Known Scrappey error codes; anything else is reported by code only.
PROVIDER_ERROR_CODES = {
    "CODE-0001": "Server capacity",
    "CODE-0002": "Cloudflare blocked",
    "CODE-0007": "Proxy error",
    "CODE-0010": "Datadome blocked",
    "CODE-0029": "Too many sessions",
}


class ScrappeyActorError(RuntimeError):
    pass


# ---- Local input errors (raised before any network call) ---------------------

class InputError(ScrappeyActorError):
    pass


class MissingInputError(InputError):
    def __init__(self, message: str = "Input is missing!") -> None:
        super().__init__(message)


class MissingApiKeyError(InputError):
    def __init__(self) -> None:
        super().__init__("Scrappey API key is required! Get one at https://scrappey.com")


class MissingUrlError(InputError):
    def __init__(self) -> None:
        super().__init__("Target URL is required!")


class InvalidUrlError(InputError):
    def __init__(self, url: object) -> None:
        super().__init__(f"Invalid URL format: {url}")
        self.url = url


class InvalidCommandError(InputError):
    def __init__(self, command: str, valid: Iterable[str]) -> None:
        super().__init__(f"Invalid command: {command}. Valid commands are: {', '.join(valid)}")
        self.command = command


class InvalidFieldError(InputError):
    def __init__(self, key: str, expected: str, value: object) -> None:
        super().__init__(f"Invalid value for {key}: expected {expected}, got {type(value).__name__}")
        self.key = key
        self.expected = expected


# ---- Remote errors -----------------------------------------------------------

class TransportError(ScrappeyActorError):
    def __init__(
        self, message: str, status_code: Optional[int] = None, response_text: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class AuthError(TransportError):
    def __init__(self, status_code: int) -> None:
        super().__init__("Invalid or expired Scrappey API key", status_code=status_code)


class ProviderError(ScrappeyActorError):
    """Scrappey answered, but its payload says `data: "error"`."""

    def __init__(self, code: Optional[str], info: Optional[str] = None) -> None:
        super().__init__(_provider_message(code, info))
        self.code = code
        self.info = info


def _provider_message(code: Optional[str], info: Optional[str]) -> str:
    if not code:
        msg = "Unknown Scrappey API error"
    else:
        msg = f"Scrappey Error: {code}"
        description = PROVIDER_ERROR_CODES.get(code)
        if description:
            msg += f" ({description})"
    if info:
        msg += f" (see {info})"
    return msg
