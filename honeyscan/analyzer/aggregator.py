"""Risk aggregation — ordered findings and an unclamped running score."""

from __future__ import annotations

from honeyscan.core.types import (
    AnalysisResult,
    CheckResult,
    Finding,
    TokenInfo,
    classify,
)


class RiskAggregator:
    """Accumulate check results in execution order.

    The score is never clamped here; ``display_score`` on the final result
    does that for rendering only.
    """

    def __init__(self) -> None:
        self._findings: list[Finding] = []
        self._score = 0
        self._contributions: list[tuple[str, int]] = []

    @property
    def score(self) -> int:
        return self._score

    @property
    def findings(self) -> tuple[Finding, ...]:
        return tuple(self._findings)

    @property
    def contributions(self) -> list[tuple[str, int]]:
        """(check id, risk) per added result, in order."""
        return list(self._contributions)

    def add(self, result: CheckResult, source: str = "") -> None:
        self._findings.extend(result.findings)
        self._score += result.risk_contribution
        self._contributions.append((source, result.risk_contribution))

    def build(self, address: str, token_info: TokenInfo | None) -> AnalysisResult:
        return AnalysisResult(
            address=address,
            token_info=token_info,
            findings=tuple(self._findings),
            risk_score=self._score,
            risk_level=classify(self._score),
        )
