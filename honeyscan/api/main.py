"""ASGI app: ``uvicorn honeyscan.api.main:app``."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from honeyscan.api.errors import register_error_handlers
from honeyscan.api.middleware.request import REQUEST_ID_HEADER, RequestIDMiddleware
from honeyscan.api.routes import health, tokens
from honeyscan.chain.port import ChainAccessPort
from honeyscan.chain.rpc_client import JsonRpcChainClient
from honeyscan.core.config import APP_VERSION, Settings, get_settings
from honeyscan.core.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    setup_logging(env=settings.app_env, log_level=settings.effective_log_level)

    # Only close a client this app created; an injected port belongs to the caller.
    rpc_client: JsonRpcChainClient | None = None
    if app.state.chain is None:
        rpc_client = JsonRpcChainClient.from_settings(settings)
        app.state.chain = rpc_client

    logger.info("%s serving %s (%s)", settings.app_name, settings.chain_config.name, settings.app_env)
    try:
        yield
    finally:
        if rpc_client is not None:
            await rpc_client.aclose()
            app.state.chain = None


def create_app(
    chain: ChainAccessPort | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the API around ``chain``; a JSON-RPC client is opened at startup when it is None."""
    settings = settings or get_settings()
    expose_docs = settings.app_env != "production"

    app = FastAPI(
        title="honeyscan API",
        description="Heuristic honeypot risk analysis for ERC20 tokens on Base.",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if expose_docs else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if expose_docs else None,
    )
    app.state.settings = settings
    app.state.chain = chain

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_allowed_origins.split(",") if o.strip()],
        allow_methods=["GET"],
        allow_headers=[REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(tokens.router, prefix="/api/v1/tokens", tags=["tokens"])
    register_error_handlers(app)
    return app


app = create_app()
