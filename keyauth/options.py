"""Configuration for the key authentication gate.

A ``KeyAuthConfig`` is built once per gate and never changes afterwards.
Every field has a default, so callers only name what they override:

    config = KeyAuthConfig(key_lookup="query:api_key", auth_scheme="")
    strict = config.replace(validator=static_keys({"k1", "k2"}))
"""

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from http import HTTPStatus

from .context import RequestContext
from .errors import InvalidKeyError, MissingOrMalformedKeyError
from .extractors import KeyLookup, parse_key_lookup

FilterHandler = Callable[[RequestContext], bool]
Validator = Callable[[RequestContext, str], bool]
SuccessHandler = Callable[[RequestContext], None]
ErrorHandler = Callable[[RequestContext, Exception | None], None]

DEFAULT_KEY_LOOKUP = "header:Authorization"
DEFAULT_AUTH_SCHEME = "Bearer"
DEFAULT_CONTEXT_KEY = "token"


def accept_any(ctx: RequestContext, key: str) -> bool:
    """Default validator: every extracted key is valid."""
    return True


def default_success_handler(ctx: RequestContext) -> None:
    """Continue to the next handler."""
    ctx.next()


def default_error_handler(ctx: RequestContext, error: Exception | None) -> None:
    """Abort with 400 for a missing key and 401 for everything else.

    ``error`` is None when the validator rejected the key without raising.
    """
    if isinstance(error, MissingOrMalformedKeyError):
        ctx.abort_with_msg(str(error), HTTPStatus.BAD_REQUEST)
        return
    message = str(error) if error is not None else InvalidKeyError.default_message
    ctx.abort_with_msg(message, HTTPStatus.UNAUTHORIZED)


@dataclass(frozen=True)
class KeyAuthConfig:
    """Key authentication settings.

    Attributes:
        key_lookup: Where to read the key, ``"<source>:<name>"``.
            Sources are header, query, form, param and cookie.
        auth_scheme: Prefix required before the key in header lookups.
            Empty means the whole header value is the key.
        context_key: Name the verified key is stored under.
        filter_handler: Returns True to skip authentication for a request.
        validator: Returns True to accept the key. May raise to reject
            it with a reason; the exception reaches ``error_handler``.
        success_handler: Runs after a key is accepted.
        error_handler: Runs when extraction or validation fails.
    """

    key_lookup: str = DEFAULT_KEY_LOOKUP
    auth_scheme: str = DEFAULT_AUTH_SCHEME
    context_key: str = DEFAULT_CONTEXT_KEY
    filter_handler: FilterHandler | None = None
    validator: Validator = accept_any
    success_handler: SuccessHandler = default_success_handler
    error_handler: ErrorHandler = default_error_handler
    lookup: KeyLookup = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Parse the key lookup so bad specifications fail at setup time."""
        object.__setattr__(self, "lookup", parse_key_lookup(self.key_lookup))

    def replace(self, **changes) -> "KeyAuthConfig":
        """Return a copy with the given fields overridden."""
        return dataclasses.replace(self, **changes)


__all__ = [
    "DEFAULT_AUTH_SCHEME",
    "DEFAULT_CONTEXT_KEY",
    "DEFAULT_KEY_LOOKUP",
    "ErrorHandler",
    "FilterHandler",
    "KeyAuthConfig",
    "SuccessHandler",
    "Validator",
    "accept_any",
    "default_error_handler",
    "default_success_handler",
]
