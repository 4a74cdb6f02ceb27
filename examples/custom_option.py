#!/usr/bin/env python3
"""Custom key auth configuration demo.

Reads the key from the ``token`` query parameter, validates it against a
fixed set, skips the health check and replaces the default error response.

Run: python examples/custom_option.py
Then: curl "http://127.0.0.1:8080/ping?token=demo-key"
"""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI, Request

from keyauth import InvalidKeyError, KeyAuth, RequestContext
from keyauth.middleware import KeyAuthMiddleware, skip_paths


def validate(ctx: RequestContext, key: str) -> bool:
    """Accept the demo key, reject revoked keys with a reason."""
    if key.startswith("revoked-"):
        raise InvalidKeyError("key has been revoked")
    return key == "demo-key"


def on_error(ctx: RequestContext, error: Exception | None) -> None:
    """Respond with one message for every failure."""
    ctx.abort_with_msg(f"access denied: {error or 'unknown key'}", 403)


gate = KeyAuth(
    key_lookup="query:token",
    auth_scheme="",
    context_key="token",
    filter_handler=skip_paths("/health"),
    validator=validate,
    error_handler=on_error,
)

app = FastAPI(title="KeyAuth custom options demo")
app.add_middleware(KeyAuthMiddleware, gate=gate)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ping")
async def ping(request: Request):
    return {"ping": request.state.token}


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8080)
