"""ERC20 metadata read."""

from __future__ import annotations

import logging

from honeyscan.analyzer.base_check import BaseCheck, CheckContext
from honeyscan.chain.abi import ERC20_DECIMALS, ERC20_NAME, ERC20_SYMBOL, ERC20_TOTAL_SUPPLY
from honeyscan.chain.port import ChainAccessPort
from honeyscan.core.types import CheckResult, Severity, TokenInfo

logger = logging.getLogger(__name__)

NON_STANDARD_RISK = 5


class TokenMetadataCheck(BaseCheck):
    """Read name/symbol/decimals/totalSupply; missing ones mark the token non-standard."""

    CHECK_ID = "HP-ERC20"
    NAME = "ERC20 metadata"
    DESCRIPTION = "Standard ERC20 view functions"

    def __init__(self, chain: ChainAccessPort) -> None:
        self._chain = chain

    async def read_token_info(self, address: str) -> TokenInfo | None:
        """None when any of the four reads fails or returns an out-of-range value."""
        try:
            return TokenInfo(
                name=await self._chain.call_read(address, ERC20_NAME),
                symbol=await self._chain.call_read(address, ERC20_SYMBOL),
                decimals=await self._chain.call_read(address, ERC20_DECIMALS),
                total_supply=await self._chain.call_read(address, ERC20_TOTAL_SUPPLY),
            )
        except Exception as exc:
            logger.info(
                "Token metadata unavailable for %s: %s", address, exc,
                extra={"address": address, "check": self.CHECK_ID},
            )
            return None

    async def run(self, context: CheckContext) -> CheckResult:
        """Populates ``context.token_info`` on success."""
        context.token_info = await self.read_token_info(context.address)

        if context.token_info is None:
            return self._result([self._make_finding(
                Severity.WARNING,
                "Non-Standard Token",
                "Token does not fully implement ERC20 standard",
            )], NON_STANDARD_RISK)

        return self._result([self._make_finding(
            Severity.OK,
            "ERC20 Standard",
            "Token implements standard ERC20 functions",
        )], 0)
