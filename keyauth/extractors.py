"""Key extractors.

A key lookup specification has the form ``"<source>:<name>"``:

- ``header:<name>`` - request header, with optional auth scheme prefix
- ``query:<name>`` - query string parameter
- ``form:<name>`` - form-encoded body field
- ``param:<name>`` - path parameter
- ``cookie:<name>`` - cookie

The specification is resolved once into an extractor, a plain function from
a ``RequestContext`` to the key. Extractors hold no state and can be shared
across requests and threads.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .context import RequestContext
from .errors import KeyLookupError, MissingOrMalformedKeyError

logger = logging.getLogger("keyauth.extractors")

Extractor = Callable[[RequestContext], str]


class LookupSource(str, Enum):
    """Request part a key is read from."""

    HEADER = "header"
    QUERY = "query"
    FORM = "form"
    PARAM = "param"
    COOKIE = "cookie"


@dataclass(frozen=True)
class KeyLookup:
    """Parsed key lookup specification."""

    source: LookupSource
    field_name: str

    def __str__(self) -> str:
        return f"{self.source.value}:{self.field_name}"


def parse_key_lookup(lookup: str) -> KeyLookup:
    """Parse a ``"<source>:<name>"`` lookup specification.

    Unknown sources fall back to header lookup.

    Raises:
        KeyLookupError: If the specification does not have exactly two parts.
    """
    parts = lookup.split(":")
    if len(parts) != 2:
        raise KeyLookupError(lookup)

    source_token, field_name = parts
    try:
        source = LookupSource(source_token)
    except ValueError:
        logger.warning(f"Unknown key lookup source {source_token!r}, using header lookup for {field_name!r}")
        source = LookupSource.HEADER

    return KeyLookup(source=source, field_name=field_name)


def key_from_header(header: str, auth_scheme: str) -> Extractor:
    """Extract the key from a request header.

    With a non-empty auth scheme the header must read ``"<scheme> <key>"``.
    Without one, the whole non-empty header value is the key.
    """
    prefix = f"{auth_scheme} " if auth_scheme else ""

    def extract(ctx: RequestContext) -> str:
        value = ctx.header(header)
        if not prefix:
            if value:
                return value
            raise MissingOrMalformedKeyError()
        if len(value) > len(prefix) and value.startswith(prefix):
            return value[len(prefix) :]
        raise MissingOrMalformedKeyError()

    return extract


def key_from_query(param: str) -> Extractor:
    """Extract the key from the query string."""

    def extract(ctx: RequestContext) -> str:
        key = ctx.query(param)
        if not key:
            raise MissingOrMalformedKeyError()
        return key

    return extract


def key_from_form(param: str) -> Extractor:
    """Extract the key from the form body."""

    def extract(ctx: RequestContext) -> str:
        key = ctx.form(param)
        if not key:
            raise MissingOrMalformedKeyError()
        return key

    return extract


def key_from_param(param: str) -> Extractor:
    """Extract the key from a path parameter."""

    def extract(ctx: RequestContext) -> str:
        key = ctx.param(param)
        if not key:
            raise MissingOrMalformedKeyError()
        return key

    return extract


def key_from_cookie(name: str) -> Extractor:
    """Extract the key from a cookie."""

    def extract(ctx: RequestContext) -> str:
        key = ctx.cookie(name)
        if not key:
            raise MissingOrMalformedKeyError()
        return key

    return extract


def select_extractor(lookup: KeyLookup, auth_scheme: str = "") -> Extractor:
    """Build the extractor for a parsed lookup.

    The auth scheme only applies to header lookups.
    """
    if lookup.source == LookupSource.QUERY:
        return key_from_query(lookup.field_name)
    if lookup.source == LookupSource.FORM:
        return key_from_form(lookup.field_name)
    if lookup.source == LookupSource.PARAM:
        return key_from_param(lookup.field_name)
    if lookup.source == LookupSource.COOKIE:
        return key_from_cookie(lookup.field_name)
    return key_from_header(lookup.field_name, auth_scheme)


__all__ = [
    "Extractor",
    "KeyLookup",
    "LookupSource",
    "key_from_cookie",
    "key_from_form",
    "key_from_header",
    "key_from_param",
    "key_from_query",
    "parse_key_lookup",
    "select_extractor",
]
