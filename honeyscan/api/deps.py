"""FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from honeyscan.chain.port import ChainAccessPort
from honeyscan.pipeline.orchestrator import TokenAnalyzer


def get_chain(request: Request) -> ChainAccessPort:
    """The process-wide chain port created in the app lifespan."""
    return request.app.state.chain


def get_analyzer(request: Request) -> TokenAnalyzer:
    return TokenAnalyzer(get_chain(request), request.app.state.settings.chain_config)
