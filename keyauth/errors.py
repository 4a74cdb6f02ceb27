"""Key authentication exceptions."""


class KeyAuthError(Exception):
    """Base exception for all key authentication errors."""

    default_message = "key authentication failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingOrMalformedKeyError(KeyAuthError):
    """Raised when no key could be extracted from the request.

    Covers an absent or empty field as well as a header value that does not
    carry the configured auth scheme.
    """

    default_message = "missing or malformed API Key"


class InvalidKeyError(KeyAuthError):
    """Raised by validators to reject a key with a reason."""

    default_message = "invalid or expired API Key"


class KeyAuthConfigError(KeyAuthError, ValueError):
    """Raised when a gate is configured incorrectly."""

    default_message = "invalid key auth configuration"


class KeyLookupError(KeyAuthConfigError):
    """Raised when a key lookup specification cannot be parsed."""

    def __init__(self, lookup: str):
        self.lookup = lookup
        super().__init__(f"Key lookup must have the form '<source>:<name>', got {lookup!r}")
