"""Shared enums and result types used across the analysis pipeline."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer


# ── Enums ────────────────────────────────────────────────────────────────────


class Severity(str, enum.Enum):
    """How a single finding should be read."""

    OK = "ok"
    WARNING = "warning"
    DANGER = "danger"


class RiskLevel(str, enum.Enum):
    """Discrete risk bucket derived from the accumulated score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} Risk"


# ── Thresholds ───────────────────────────────────────────────────────────────

HIGH_RISK_THRESHOLD = 60
MEDIUM_RISK_THRESHOLD = 30
DISPLAY_SCORE_MAX = 100


def classify(score: int) -> RiskLevel:
    """Map an unclamped risk score onto a risk level."""
    if score >= HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def display_score(score: int) -> int:
    """Clamp a score onto the 0–100 scale used for rendering."""
    return max(0, min(score, DISPLAY_SCORE_MAX))


# ── Schemas ──────────────────────────────────────────────────────────────────


class Finding(BaseModel):
    """One observation produced by a check."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    title: str
    description: str
    check: str = ""


class CheckResult(BaseModel):
    """Findings and risk contribution of one check invocation."""

    model_config = ConfigDict(frozen=True)

    findings: tuple[Finding, ...] = ()
    risk_contribution: int = Field(default=0, ge=0)


class TokenInfo(BaseModel):
    """ERC20 metadata read from the token contract."""

    model_config = ConfigDict(frozen=True)

    name: str
    symbol: str
    decimals: int = Field(ge=0, le=255)
    total_supply: int = Field(ge=0)

    @field_serializer("total_supply", when_used="json")
    def _supply_as_string(self, value: int) -> str:
        # uint256 values overflow JSON number precision in most clients
        return str(value)


class AnalysisResult(BaseModel):
    """Immutable outcome of analysing one token address."""

    model_config = ConfigDict(frozen=True)

    address: str
    token_info: TokenInfo | None = None
    findings: tuple[Finding, ...] = ()
    risk_score: int = Field(default=0, ge=0)
    risk_level: RiskLevel = RiskLevel.LOW

    @property
    def display_score(self) -> int:
        return display_score(self.risk_score)

    def findings_by_severity(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for finding in self.findings:
            counts[finding.severity.value] = counts.get(finding.severity.value, 0) + 1
        return counts
