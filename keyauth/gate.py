"""Key authentication gate.

The gate runs a fixed pipeline for every request:

1. Filter: a configured filter returning True skips authentication.
2. Extract: read the key from the configured request part.
3. Validate: hand the key to the validator.
4. Success: store the key under the context key, run the success handler.
5. Error: run the error handler with the failure.

Exactly one of the bypass continuation, the success handler or the error
handler runs per request. The gate keeps no per-request state, so one
instance serves any number of concurrent requests.

Usage:
    gate = KeyAuth(key_lookup="header:X-API-Key", auth_scheme="")
    gate(ctx)
"""

import logging

from .context import RequestContext
from .errors import MissingOrMalformedKeyError
from .extractors import Extractor, select_extractor
from .options import KeyAuthConfig

logger = logging.getLogger("keyauth.gate")


def _mask(key: str) -> str:
    """Shorten a key for log output."""
    return f"{key[:4]}..." if len(key) > 8 else "***"


class KeyAuth:
    """Callable key authentication gate.

    Configuration and extractor are resolved once in the constructor.
    A malformed key lookup raises ``KeyLookupError`` here, before any
    request is handled.
    """

    def __init__(self, config: KeyAuthConfig | None = None, **overrides):
        """Initialize the gate.

        Args:
            config: Base configuration (defaults if not provided)
            **overrides: ``KeyAuthConfig`` fields applied over ``config``
        """
        config = config or KeyAuthConfig()
        if overrides:
            config = config.replace(**overrides)
        self.config = config
        self.extractor: Extractor = select_extractor(config.lookup, config.auth_scheme)
        logger.info(f"Key auth installed: lookup={config.lookup}, scheme={config.auth_scheme!r}")

    def __call__(self, ctx: RequestContext) -> None:
        """Authenticate one request."""
        cfg = self.config

        if cfg.filter_handler is not None and cfg.filter_handler(ctx):
            logger.debug("Key auth skipped by filter")
            ctx.next()
            return

        try:
            key = self.extractor(ctx)
        except MissingOrMalformedKeyError as e:
            logger.debug(f"No key found via {cfg.lookup}")
            cfg.error_handler(ctx, e)
            return

        error: Exception | None = None
        try:
            valid = cfg.validator(ctx, key)
        except Exception as e:
            valid = False
            error = e

        if error is None and valid:
            ctx.set(cfg.context_key, key)
            logger.debug(f"Key accepted: {_mask(key)}")
            cfg.success_handler(ctx)
            return

        logger.debug(f"Key rejected: {_mask(key)} ({error or 'validator returned False'})")
        cfg.error_handler(ctx, error)


def key_auth(config: KeyAuthConfig | None = None, **overrides) -> KeyAuth:
    """Create a key authentication gate."""
    return KeyAuth(config, **overrides)


__all__ = ["KeyAuth", "key_auth"]
