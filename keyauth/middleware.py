"""Starlette and FastAPI integration.

Two ways to install a gate:

- ``KeyAuthMiddleware`` runs before routing and protects the whole app.
- ``key_auth_dependency`` runs after routing, per route or router.

Usage:
    app.add_middleware(KeyAuthMiddleware, gate=KeyAuth(filter_handler=skip_paths("/health")))

    require_key = key_auth_dependency(KeyAuth(key_lookup="param:key"))

    @router.get("/items/{key}")
    async def read_items(token: str = Depends(require_key)):
        ...
"""

import logging
from typing import Any

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Host, Match, Mount

from .context import RequestContext
from .extractors import LookupSource
from .gate import KeyAuth
from .options import FilterHandler

logger = logging.getLogger("keyauth.middleware")

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class StarletteRequestContext(RequestContext):
    """Request context backed by a Starlette request.

    Annotations are stored on ``request.state``. An abort is recorded as a
    plain-text response for the host to return.
    """

    def __init__(
        self,
        request: Request,
        form_data: dict[str, str] | None = None,
        path_params: dict[str, str] | None = None,
    ):
        self.request = request
        self._form = form_data or {}
        self._path_params = path_params if path_params is not None else dict(request.path_params)
        self.continued = False
        self.abort_message: str | None = None
        self.response: Response | None = None

    @classmethod
    async def from_request(
        cls,
        request: Request,
        *,
        load_form: bool = False,
        match_routes: bool = False,
    ) -> "StarletteRequestContext":
        """Build a context, reading what the gate needs up front.

        Args:
            request: Incoming request
            load_form: Parse a form-encoded body
            match_routes: Resolve path parameters from the app's routes,
                for use before routing has run

        Returns:
            StarletteRequestContext
        """
        form_data: dict[str, str] = {}
        if load_form and _is_form_body(request):
            # Cache the body so downstream handlers can still read it
            await request.body()
            form = await request.form()
            form_data = {k: v for k, v in form.items() if isinstance(v, str)}

        path_params = _match_path_params(request) if match_routes else None
        return cls(request, form_data, path_params)

    @property
    def path(self) -> str:
        return self.request.url.path

    def header(self, name: str) -> str:
        return self.request.headers.get(name, "")

    def query(self, name: str) -> str:
        return self.request.query_params.get(name, "")

    def form(self, name: str) -> str:
        return self._form.get(name, "")

    def param(self, name: str) -> str:
        return str(self._path_params.get(name, ""))

    def cookie(self, name: str) -> str:
        return self.request.cookies.get(name, "")

    def set(self, key: str, value: Any) -> None:
        setattr(self.request.state, key, value)

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self.request.state, key, default)

    def next(self) -> None:
        self.continued = True

    def abort_with_msg(self, message: str, status_code: int) -> None:
        self.abort_message = message
        self.response = PlainTextResponse(message, status_code=int(status_code))

    @property
    def aborted(self) -> bool:
        return self.response is not None


def _is_form_body(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.startswith(FORM_CONTENT_TYPES)


def _match_path_params(request: Request) -> dict[str, Any]:
    """Find path parameters by matching the request against the app's routes."""
    if request.path_params:
        return dict(request.path_params)

    router = getattr(request.scope.get("app"), "router", None)
    return _match_routes(getattr(router, "routes", []), request.scope) or {}


def _match_routes(routes, scope: dict[str, Any]) -> dict[str, Any] | None:
    """Return the path params of the first full match, descending into mounts."""
    for route in routes:
        match, child_scope = route.matches(scope)
        if match != Match.FULL:
            continue

        path_params = dict(child_scope.get("path_params", {}))
        if isinstance(route, Mount | Host):
            nested = _match_routes(route.routes, {**scope, **child_scope})
            if nested is not None:
                return nested
        return path_params
    return None


class KeyAuthMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that authenticates every request with a gate."""

    def __init__(self, app, gate: KeyAuth | None = None, **overrides):
        """Initialize the middleware.

        Args:
            app: ASGI application
            gate: KeyAuth instance (created from ``overrides`` if not provided)
            **overrides: ``KeyAuthConfig`` fields for a new gate
        """
        super().__init__(app)
        self.gate = gate or KeyAuth(**overrides)

    async def dispatch(self, request: Request, call_next):
        """Authenticate the request, then pass it on or reject it.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response
        """
        source = self.gate.config.lookup.source
        ctx = await StarletteRequestContext.from_request(
            request,
            load_form=source == LookupSource.FORM,
            match_routes=source == LookupSource.PARAM,
        )

        self.gate(ctx)

        if ctx.response is not None:
            logger.info(f"Rejected {request.method} {request.url.path} with {ctx.response.status_code}")
            return ctx.response

        return await call_next(request)


def key_auth_dependency(gate: KeyAuth):
    """Create a FastAPI dependency that authenticates with a gate.

    An abort raises ``HTTPException`` with the error message as detail.

    Args:
        gate: The gate to run.

    Returns:
        A FastAPI dependency returning the verified key, or None when the
        filter skipped authentication.
    """

    async def authenticate(request: Request) -> str | None:
        ctx = await StarletteRequestContext.from_request(
            request,
            load_form=gate.config.lookup.source == LookupSource.FORM,
        )

        gate(ctx)

        if ctx.response is not None:
            raise HTTPException(
                status_code=ctx.response.status_code,
                detail=ctx.abort_message,
            )

        return ctx.get(gate.config.context_key)

    return authenticate


def skip_paths(*prefixes: str) -> FilterHandler:
    """Create a filter that skips authentication for path prefixes.

    A prefix matches the path itself and anything below it, so ``/health``
    exempts ``/health/live`` but not ``/healthz``.

    Args:
        *prefixes: Path prefixes exempt from authentication.

    Returns:
        A filter for ``KeyAuthConfig.filter_handler``.
    """
    bases = [prefix.rstrip("/") for prefix in prefixes]

    def is_exempt(ctx: StarletteRequestContext) -> bool:
        path = ctx.path
        return any(path == base or path.startswith(base + "/") for base in bases)

    return is_exempt


__all__ = [
    "KeyAuthMiddleware",
    "StarletteRequestContext",
    "key_auth_dependency",
    "skip_paths",
]
