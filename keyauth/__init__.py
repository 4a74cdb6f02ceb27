"""KeyAuth - API key authentication gate for HTTP services."""

__version__ = "0.1.0"

from .context import RequestContext, SimpleRequestContext
from .errors import (
    InvalidKeyError,
    KeyAuthConfigError,
    KeyAuthError,
    KeyLookupError,
    MissingOrMalformedKeyError,
)
from .extractors import KeyLookup, LookupSource, parse_key_lookup, select_extractor
from .gate import KeyAuth, key_auth
from .options import KeyAuthConfig, default_error_handler, default_success_handler
from .validators import static_keys

__all__ = [
    "__version__",
    "InvalidKeyError",
    "KeyAuth",
    "KeyAuthConfig",
    "KeyAuthConfigError",
    "KeyAuthError",
    "KeyLookup",
    "KeyLookupError",
    "LookupSource",
    "MissingOrMalformedKeyError",
    "RequestContext",
    "SimpleRequestContext",
    "default_error_handler",
    "default_success_handler",
    "key_auth",
    "parse_key_lookup",
    "select_extractor",
    "static_keys",
]
