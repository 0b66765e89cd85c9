"""Base check class — every step of the token analysis inherits from this."""

from __future__ import annotations

import abc
from dataclasses import dataclass

from honeyscan.core.types import CheckResult, Finding, Severity, TokenInfo


@dataclass
class CheckContext:
    """State shared by the checks of one analysis run.

    ``bytecode`` is filled in once the contract has been verified and
    ``token_info`` once the metadata read has succeeded.
    """

    address: str
    bytecode: str = ""
    token_info: TokenInfo | None = None

    @property
    def code_hex(self) -> str:
        """Bytecode without the ``0x`` prefix."""
        return strip_hex_prefix(self.bytecode)

    @property
    def code_size(self) -> int:
        """Size of the deployed code in bytes."""
        return len(self.code_hex) // 2


def strip_hex_prefix(value: str) -> str:
    return value[2:] if value[:2].lower() == "0x" else value


class BaseCheck(abc.ABC):
    """Abstract base class for all token checks.

    Check metadata:
        - CHECK_ID: Unique identifier (e.g., "HP-LIQ")
        - NAME: Human-readable check name
        - DESCRIPTION: What this check looks for
    """

    CHECK_ID: str = ""
    NAME: str = ""
    DESCRIPTION: str = ""

    @abc.abstractmethod
    async def run(self, context: CheckContext) -> CheckResult:
        """Run the check against the given context.

        Returns:
            CheckResult with this check's findings and risk contribution.
        """
        ...

    def _make_finding(self, severity: Severity, title: str, description: str) -> Finding:
        """Helper to create a Finding tagged with this check's id."""
        return Finding(
            severity=severity,
            title=title,
            description=description,
            check=self.CHECK_ID,
        )

    @staticmethod
    def _result(findings: list[Finding], risk: int) -> CheckResult:
        return CheckResult(findings=tuple(findings), risk_contribution=risk)
