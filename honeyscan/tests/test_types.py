"""Tests for honeyscan.core.types — enums, scoring and result models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from honeyscan.core.types import (
    AnalysisResult,
    CheckResult,
    Finding,
    RiskLevel,
    Severity,
    TokenInfo,
    classify,
    display_score,
)


# ── Classification ───────────────────────────────────────────────────────────


class TestClassify:
    """Risk level boundaries on the unclamped score."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, RiskLevel.LOW),
            (29, RiskLevel.LOW),
            (30, RiskLevel.MEDIUM),
            (59, RiskLevel.MEDIUM),
            (60, RiskLevel.HIGH),
            (150, RiskLevel.HIGH),
        ],
    )
    def test_boundaries(self, score, expected):
        assert classify(score) is expected

    def test_labels(self):
        assert RiskLevel.LOW.label == "Low Risk"
        assert RiskLevel.MEDIUM.label == "Medium Risk"
        assert RiskLevel.HIGH.label == "High Risk"


class TestDisplayScore:
    def test_clamps_above_100(self):
        assert display_score(130) == 100

    def test_passes_through_in_range(self):
        assert display_score(45) == 45
        assert display_score(0) == 0

    def test_result_property_does_not_change_level(self):
        result = AnalysisResult(address="0x" + "11" * 20, risk_score=130, risk_level=classify(130))
        assert result.display_score == 100
        assert result.risk_score == 130
        assert result.risk_level is RiskLevel.HIGH


# ── Models ───────────────────────────────────────────────────────────────────


class TestModels:
    def test_finding_is_frozen(self):
        finding = Finding(severity=Severity.OK, title="Valid Contract", description="ok")
        with pytest.raises(ValidationError):
            finding.title = "changed"

    def test_check_result_rejects_negative_risk(self):
        with pytest.raises(ValidationError):
            CheckResult(risk_contribution=-5)

    def test_token_info_decimals_range(self):
        with pytest.raises(ValidationError):
            TokenInfo(name="X", symbol="X", decimals=256, total_supply=1)

    def test_total_supply_serialised_as_string(self):
        supply = 2**255 + 1
        info = TokenInfo(name="Big", symbol="BIG", decimals=18, total_supply=supply)
        assert info.model_dump(mode="json")["total_supply"] == str(supply)
        assert info.model_dump()["total_supply"] == supply

    def test_findings_by_severity(self):
        result = AnalysisResult(
            address="0x" + "11" * 20,
            findings=(
                Finding(severity=Severity.OK, title="a", description=""),
                Finding(severity=Severity.WARNING, title="b", description=""),
                Finding(severity=Severity.OK, title="c", description=""),
            ),
        )
        assert result.findings_by_severity() == {"ok": 2, "warning": 1}
