"""Demo FastAPI application protected by key authentication."""

import logging

import uvicorn
from fastapi import FastAPI, Request

from . import __version__
from .config.settings import Settings, get_settings
from .gate import KeyAuth
from .middleware import KeyAuthMiddleware, skip_paths
from .options import accept_any
from .validators import static_keys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("keyauth")


def create_gate(settings: Settings) -> KeyAuth:
    """Build the gate described by the settings."""
    if not settings.api_keys:
        logger.warning("No KEYAUTH_API_KEYS configured, any well-formed key is accepted")

    return KeyAuth(
        key_lookup=settings.key_lookup,
        auth_scheme=settings.auth_scheme,
        context_key=settings.context_key,
        filter_handler=skip_paths(*settings.exempt_paths) if settings.exempt_paths else None,
        validator=static_keys(settings.api_keys) if settings.api_keys else accept_any,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the demo application."""
    settings = settings or get_settings()
    context_key = settings.context_key

    app = FastAPI(
        title="KeyAuth Demo",
        description="Key authentication gate in front of a FastAPI app",
        version=__version__,
    )
    app.add_middleware(KeyAuthMiddleware, gate=create_gate(settings))

    # Health check endpoint
    @app.get("/health")
    async def health():
        """Simple health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.get("/ping")
    async def ping(request: Request):
        """Echo the verified key."""
        return {"ping": getattr(request.state, context_key, None)}

    return app


app = create_app()


def run():
    """Run the application (entry point for CLI)."""
    settings = get_settings()

    logger.info(f"Starting server on {settings.api_host}:{settings.api_port}")

    uvicorn.run(
        "keyauth.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
