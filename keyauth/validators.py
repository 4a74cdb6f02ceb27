"""Ready-made key validators."""

import secrets
from collections.abc import Iterable

from .context import RequestContext
from .options import Validator


def static_keys(keys: Iterable[str]) -> Validator:
    """Create a validator accepting any key from a fixed set.

    Keys are compared in constant time. Empty entries are ignored.

    Args:
        keys: The accepted keys.

    Returns:
        A validator for ``KeyAuthConfig.validator``.
    """
    accepted = tuple(k for k in keys if k)

    def validate(ctx: RequestContext, key: str) -> bool:
        # No early exit
        matched = False
        for candidate in accepted:
            if secrets.compare_digest(candidate.encode(), key.encode()):
                matched = True
        return matched

    return validate


__all__ = ["static_keys"]
