"""Liveness (``/health``) and RPC readiness (``/health/ready``) probes."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from honeyscan.api.deps import get_chain
from honeyscan.chain.port import ChainAccessPort

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict:
    return {"status": "healthy", "service": request.app.state.settings.app_name}


@router.get("/health/ready")
async def readiness_check(
    request: Request,
    chain: ChainAccessPort = Depends(get_chain),
) -> JSONResponse:
    """503 unless the chain port can report the latest block height."""
    settings = request.app.state.settings
    started = time.perf_counter()

    try:
        rpc: dict = {"status": "up", "block_number": await chain.block_number()}
    except Exception as exc:
        logger.warning("Readiness probe could not reach the RPC: %s", exc)
        rpc = {"status": "down", "error": str(exc)}
    else:
        if getattr(chain, "rpc_url", None):
            rpc["url"] = chain.rpc_url

    ready = rpc["status"] == "up"
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "degraded",
            "service": settings.app_name,
            "chain": settings.chain,
            "checks": {"rpc": rpc},
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
        },
    )
