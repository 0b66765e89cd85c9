"""Contract size check against the EIP-170 deployment limit."""

from __future__ import annotations

from honeyscan.analyzer.base_check import BaseCheck, CheckContext
from honeyscan.core.types import CheckResult, Severity

MAX_STANDARD_CODE_SIZE = 24576
LARGE_CONTRACT_RISK = 5


class ContractSizeCheck(BaseCheck):
    CHECK_ID = "HP-SIZE"
    NAME = "Contract size"
    DESCRIPTION = "Runtime code larger than the EIP-170 limit"

    async def run(self, context: CheckContext) -> CheckResult:
        size = context.code_size
        if size > MAX_STANDARD_CODE_SIZE:
            return self._result([self._make_finding(
                Severity.WARNING,
                "Large Contract",
                f"Contract size: {size} bytes. Unusually large contracts may hide malicious code.",
            )], LARGE_CONTRACT_RISK)
        return self._result([self._make_finding(
            Severity.OK,
            "Normal Contract Size",
            f"Contract size: {size} bytes",
        )], 0)
