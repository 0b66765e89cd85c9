"""Token analysis endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from honeyscan.api.deps import get_analyzer
from honeyscan.core.types import AnalysisResult, Finding, RiskLevel, TokenInfo
from honeyscan.pipeline.orchestrator import TokenAnalyzer

router = APIRouter()


class TokenAnalysisResponse(BaseModel):
    """Analysis result plus the derived display fields."""

    address: str
    token_info: TokenInfo | None = None
    findings: list[Finding]
    risk_score: int
    risk_level: RiskLevel
    risk_label: str
    display_score: int
    explorer_url: str

    @classmethod
    def from_result(cls, result: AnalysisResult, explorer_url: str) -> "TokenAnalysisResponse":
        return cls(
            address=result.address,
            token_info=result.token_info,
            findings=list(result.findings),
            risk_score=result.risk_score,
            risk_level=result.risk_level,
            risk_label=result.risk_level.label,
            display_score=result.display_score,
            explorer_url=explorer_url,
        )


@router.get("/{address}/analysis", response_model=TokenAnalysisResponse)
async def analyze_token(
    address: str,
    analyzer: TokenAnalyzer = Depends(get_analyzer),
) -> TokenAnalysisResponse:
    """Run the honeypot analysis for one token address.

    Fatal analysis errors are mapped by the registered error handlers:
    400 for a malformed address, 422 when no contract is deployed and 503
    when the chain cannot be reached.
    """
    result = await analyzer.analyze(address)
    return TokenAnalysisResponse.from_result(
        result, analyzer.chain_config.explorer_address_url(result.address)
    )
