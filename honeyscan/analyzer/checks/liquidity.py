"""Liquidity lookup and pool → user transfer simulation.

A buy on a Uniswap V2 pair ends with the pair calling ``transfer`` on the
token. Estimating gas for ``transfer(burn, 1 token)`` with the pair as
sender exercises that path without a signature: ``eth_estimateGas`` does not
authenticate ``from``. A revert while the pair actually holds tokens is the
strongest honeypot signal the pipeline has.

The reverse direction (user → pool, i.e. a sell) would need a funded holder
account and is not simulated.
"""

from __future__ import annotations

import logging

from honeyscan.analyzer.base_check import BaseCheck, CheckContext
from honeyscan.chain.abi import (
    ERC20_BALANCE_OF,
    ERC20_TRANSFER,
    FACTORY_GET_PAIR,
    PAIR_GET_RESERVES,
)
from honeyscan.chain.port import ChainAccessPort, TxRequest, is_zero_address, short_address
from honeyscan.core.chains import ChainConfig
from honeyscan.core.errors import ChainAccessError, EstimationFailed
from honeyscan.core.types import CheckResult, Finding, Severity

logger = logging.getLogger(__name__)

BURN_ADDRESS = "0x000000000000000000000000000000000000dEaD"
DEFAULT_DECIMALS = 18
UINT256_MAX = 2**256 - 1

NO_LIQUIDITY_RISK = 10
EMPTY_POOL_RISK = 10
BUY_BLOCKED_RISK = 50


class LiquidityCheck(BaseCheck):
    """Locate the token/WETH pair, inspect reserves and simulate a buy."""

    CHECK_ID = "HP-LIQUIDITY"
    NAME = "Liquidity & buy simulation"
    DESCRIPTION = "Pair lookup on the configured factory, reserve check, pool → user transfer"

    def __init__(self, chain: ChainAccessPort, chain_config: ChainConfig) -> None:
        self._chain = chain
        self._factory = chain_config.pair_factory_address
        self._counter_asset = chain_config.counter_asset_address

    async def run(self, context: CheckContext) -> CheckResult:
        decimals = context.token_info.decimals if context.token_info else DEFAULT_DECIMALS
        # (finding, risk) pairs; kept when a later step raises
        entries: list[tuple[Finding, int]] = []

        try:
            await self._inspect(context.address, decimals, entries)
        except Exception as exc:
            logger.warning(
                "Liquidity checking error on %s: %s", context.address, exc,
                exc_info=True,
                extra={"address": context.address, "check": self.CHECK_ID},
            )
            entries.append((self._make_finding(
                Severity.WARNING,
                "Liquidity Check Failed",
                "Could not verify liquidity pool.",
            ), 0))

        return self._result(
            [finding for finding, _ in entries],
            sum(risk for _, risk in entries),
        )

    async def _inspect(
        self, token: str, decimals: int, entries: list[tuple[Finding, int]]
    ) -> None:
        pair = await self._chain.call_read(
            self._factory, FACTORY_GET_PAIR, [token, self._counter_asset]
        )
        if is_zero_address(pair):
            entries.append((self._make_finding(
                Severity.WARNING,
                "No Liquidity Found",
                "No Uniswap V2 pair found. Token might not be trading yet.",
            ), NO_LIQUIDITY_RISK))
            return

        reserve0, reserve1, _ = await self._chain.call_read(pair, PAIR_GET_RESERVES)
        if reserve0 == 0 and reserve1 == 0:
            entries.append((self._make_finding(
                Severity.WARNING,
                "Empty Liquidity Pool",
                "Liquidity pair exists but is empty.",
            ), EMPTY_POOL_RISK))
        else:
            entries.append((self._make_finding(
                Severity.OK,
                "Liquidity Detected",
                f"Found valid liquidity pool at {short_address(pair)}",
            ), 0))

        finding = await self._simulate_buy(token, pair, decimals)
        if finding is not None:
            risk = BUY_BLOCKED_RISK if finding.severity == Severity.DANGER else 0
            entries.append((finding, risk))

    async def _simulate_buy(self, token: str, pair: str, decimals: int) -> Finding | None:
        """Estimate gas for pair → burn address; None means inconclusive."""
        amount = min(10 ** decimals, UINT256_MAX)
        data = ERC20_TRANSFER.encode_call([BURN_ADDRESS, amount])
        try:
            await self._chain.estimate_gas(TxRequest(to=token, from_=pair, data=data))
        except ChainAccessError as exc:
            reverted = isinstance(exc, EstimationFailed) and exc.reverted
            return await self._explain_failed_buy(token, pair, exc, reverted)

        return self._make_finding(
            Severity.OK,
            "Buy Simulation Passed",
            "Transfer from Liquidity Pool appears allowed.",
        )

    async def _explain_failed_buy(
        self, token: str, pair: str, exc: ChainAccessError, reverted: bool
    ) -> Finding | None:
        pair_balance = await self._chain.call_read(token, ERC20_BALANCE_OF, [pair])
        if pair_balance == 0:
            logger.info(
                "Buy simulation inconclusive for %s: pair holds no tokens", token,
                extra={"address": token, "check": self.CHECK_ID},
            )
            return None
        if not reverted:
            logger.info(
                "Buy simulation inconclusive for %s: %s", token, exc,
                extra={"address": token, "check": self.CHECK_ID},
            )
            return None
        return self._make_finding(
            Severity.DANGER,
            "Buy Simulation Failed",
            "Unable to transfer tokens from Liquidity Pool. Likely a Honeypot or Paused!",
        )
