"""Ownership classifier — Ownable / BEP20-style owner lookup."""

from __future__ import annotations

import logging

from honeyscan.analyzer.base_check import BaseCheck, CheckContext
from honeyscan.chain.abi import OWNABLE_GET_OWNER, OWNABLE_OWNER
from honeyscan.chain.port import ChainAccessPort, is_zero_address, short_address
from honeyscan.core.errors import ChainAccessError
from honeyscan.core.types import CheckResult, Finding, Severity

logger = logging.getLogger(__name__)


class OwnershipCheck(BaseCheck):
    """Report who controls the token. Having an owner is not penalised."""

    CHECK_ID = "HP-OWNER"
    NAME = "Ownership"
    DESCRIPTION = "owner() / getOwner() lookup and renouncement status"

    def __init__(self, chain: ChainAccessPort) -> None:
        self._chain = chain

    async def find_owner(self, token_address: str) -> str | None:
        """Return the owner address, or None when neither getter answers."""
        for function in (OWNABLE_OWNER, OWNABLE_GET_OWNER):
            try:
                return await self._chain.call_read(token_address, function)
            except ChainAccessError as exc:
                logger.debug(
                    "%s unavailable on %s: %s", function.signature, token_address, exc,
                    extra={"address": token_address, "check": self.CHECK_ID},
                )
        return None

    async def run(self, context: CheckContext) -> CheckResult:
        try:
            owner = await self.find_owner(context.address)
            finding = self._classify(owner)
        except Exception as exc:
            logger.exception(
                "Ownership check error on %s: %s", context.address, exc,
                extra={"address": context.address, "check": self.CHECK_ID},
            )
            finding = self._make_finding(
                Severity.WARNING,
                "Ownership Unverified",
                "Could not determine contract ownership",
            )
        return self._result([finding], 0)

    def _classify(self, owner: str | None) -> Finding:
        if not owner:
            return self._make_finding(
                Severity.OK,
                "No Owner Function",
                "Contract does not have owner functions",
            )
        if is_zero_address(owner):
            return self._make_finding(
                Severity.OK,
                "Ownership Renounced",
                "Contract ownership has been renounced",
            )
        return self._make_finding(
            Severity.OK,
            "Has Owner",
            f"Owner: {short_address(owner)} - Common for managed tokens",
        )
