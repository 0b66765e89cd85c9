"""Bytecode heuristics — textual opcode pattern counts over runtime code.

This is a scan of the hex text, not a disassembly: matches are counted
case-insensitively and without overlap, so an occurrence may straddle an
instruction boundary. The thresholds absorb most incidental matches.
"""

from __future__ import annotations

from honeyscan.analyzer.base_check import BaseCheck, CheckContext, strip_hex_prefix
from honeyscan.core.types import CheckResult, Finding, Severity

SELFDESTRUCT_PATTERN = "63ff"
DELEGATECALL_PATTERN = "f4"

SELFDESTRUCT_MIN_MATCHES = 3
DELEGATECALL_MAX_BENIGN = 10
MINIMAL_CODE_BYTES = 100
STANDARD_CODE_BYTES = 1000

SELFDESTRUCT_RISK = 15
DELEGATECALL_RISK = 5
MINIMAL_CODE_RISK = 5


def count_pattern(code_hex: str, pattern: str) -> int:
    """Count non-overlapping, case-insensitive occurrences of ``pattern``."""
    return code_hex.lower().count(pattern.lower())


class BytecodeHeuristicsCheck(BaseCheck):
    """Flag destructible, delegating or suspiciously small contracts."""

    CHECK_ID = "HP-BYTECODE"
    NAME = "Bytecode heuristics"
    DESCRIPTION = "SELFDESTRUCT / DELEGATECALL pattern counts and code length"

    async def run(self, context: CheckContext) -> CheckResult:
        return self.analyze(context.bytecode)

    def analyze(self, bytecode: str) -> CheckResult:
        """Pure function of the bytecode; each rule is independent."""
        code_hex = strip_hex_prefix(bytecode)
        findings: list[Finding] = []
        risk = 0

        if count_pattern(code_hex, SELFDESTRUCT_PATTERN) >= SELFDESTRUCT_MIN_MATCHES:
            findings.append(self._make_finding(
                Severity.DANGER,
                "SELFDESTRUCT Detected",
                "Contract contains SELFDESTRUCT opcode which can destroy the contract",
            ))
            risk += SELFDESTRUCT_RISK

        delegatecalls = count_pattern(code_hex, DELEGATECALL_PATTERN)
        if delegatecalls > DELEGATECALL_MAX_BENIGN:
            findings.append(self._make_finding(
                Severity.WARNING,
                "Multiple DELEGATECALL Found",
                "Contract uses DELEGATECALL extensively - may be a proxy pattern",
            ))
            risk += DELEGATECALL_RISK
        elif delegatecalls > 0:
            findings.append(self._make_finding(
                Severity.OK,
                "Proxy Pattern Detected",
                "Contract uses DELEGATECALL - likely an upgradeable proxy (common pattern)",
            ))

        code_length = len(code_hex) // 2
        if code_length < MINIMAL_CODE_BYTES:
            findings.append(self._make_finding(
                Severity.WARNING,
                "Minimal Contract",
                "Very small contract - likely a simple wrapper or proxy",
            ))
            risk += MINIMAL_CODE_RISK
        elif code_length > STANDARD_CODE_BYTES:
            findings.append(self._make_finding(
                Severity.OK,
                "Standard Contract Size",
                f"Contract size: {code_length} bytes - appears to be a full implementation",
            ))

        return self._result(findings, risk)
