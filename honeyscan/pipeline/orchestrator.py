"""Analysis orchestrator — runs the token checks in their fixed order."""

from __future__ import annotations

import logging
import re
import time

from eth_utils import to_checksum_address

from honeyscan.analyzer.aggregator import RiskAggregator
from honeyscan.analyzer.base_check import BaseCheck, CheckContext, strip_hex_prefix
from honeyscan.analyzer.checks import (
    BytecodeHeuristicsCheck,
    ContractSizeCheck,
    LiquidityCheck,
    OwnershipCheck,
    TokenMetadataCheck,
)
from honeyscan.chain.port import ChainAccessPort
from honeyscan.chain.rpc_client import JsonRpcChainClient
from honeyscan.core.chains import ChainConfig
from honeyscan.core.config import Settings, get_settings
from honeyscan.core.errors import (
    ChainAccessError,
    ChainUnavailableError,
    InvalidAddressError,
    NotAContractError,
)
from honeyscan.core.types import AnalysisResult, CheckResult, Finding, Severity

logger = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

CODE_CHECK_ID = "HP-CODE"


def normalize_address(address: str) -> str:
    """Accept any hex case, with or without ``0x``; return the checksum form."""
    candidate = address.strip()
    if candidate and not candidate.lower().startswith("0x"):
        candidate = "0x" + candidate
    if not _ADDRESS_RE.match(candidate):
        raise InvalidAddressError(address)
    return to_checksum_address(candidate)


class TokenAnalyzer:
    """Coordinates the honeypot analysis of one token address.

    Flow:
    1. CODE — fetch bytecode; no code is fatal
    2. ERC20 — metadata read (populates token info)
    3. BYTECODE — opcode pattern heuristics
    4. OWNER — ownership classification
    5. LIQUIDITY — pair lookup and buy simulation
    6. SIZE — contract size

    Only step 1 can fail the analysis; every later check turns its own
    failures into findings.
    """

    def __init__(self, chain: ChainAccessPort, chain_config: ChainConfig | None = None) -> None:
        self._chain = chain
        self._chain_config = chain_config or get_settings().chain_config
        self._checks: list[BaseCheck] = [
            TokenMetadataCheck(chain),
            BytecodeHeuristicsCheck(),
            OwnershipCheck(chain),
            LiquidityCheck(chain, self._chain_config),
            ContractSizeCheck(),
        ]

    @property
    def checks(self) -> list[BaseCheck]:
        return list(self._checks)

    @property
    def chain_config(self) -> ChainConfig:
        return self._chain_config

    async def analyze(self, address: str) -> AnalysisResult:
        """Run every check against ``address``.

        Raises:
            InvalidAddressError: the input is not a 20-byte hex address
            NotAContractError: no bytecode is deployed at the address
            ChainUnavailableError: the bytecode could not be read at all
        """
        start = time.monotonic()
        address = normalize_address(address)
        context = CheckContext(address=address)
        aggregator = RiskAggregator()

        context.bytecode = await self._fetch_bytecode(address)
        aggregator.add(
            CheckResult(findings=(Finding(
                severity=Severity.OK,
                title="Valid Contract",
                description="Address contains contract bytecode",
                check=CODE_CHECK_ID,
            ),)),
            CODE_CHECK_ID,
        )

        for check in self._checks:
            result = await check.run(context)
            logger.debug(
                "%s: %d finding(s), +%d risk", check.NAME, len(result.findings), result.risk_contribution,
                extra={"address": address, "check": check.CHECK_ID},
            )
            aggregator.add(result, check.CHECK_ID)

        analysis = aggregator.build(address, context.token_info)
        logger.info(
            "Analysed %s: score=%d level=%s",
            address, analysis.risk_score, analysis.risk_level.value,
            extra={"address": address, "duration_ms": round((time.monotonic() - start) * 1000, 1)},
        )
        return analysis

    async def _fetch_bytecode(self, address: str) -> str:
        try:
            code = await self._chain.get_bytecode(address)
        except ChainUnavailableError:
            raise
        except ChainAccessError as exc:
            raise ChainUnavailableError(f"Unable to read contract code: {exc}") from exc

        if not code or not strip_hex_prefix(code):
            raise NotAContractError(address)
        return code


async def analyze(
    address: str,
    chain: ChainAccessPort | None = None,
    settings: Settings | None = None,
) -> AnalysisResult:
    """Analyse one token; builds a JSON-RPC client from settings when ``chain`` is None."""
    settings = settings or get_settings()
    if chain is not None:
        return await TokenAnalyzer(chain, settings.chain_config).analyze(address)

    async with JsonRpcChainClient.from_settings(settings) as client:
        return await TokenAnalyzer(client, settings.chain_config).analyze(address)
