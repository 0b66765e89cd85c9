"""End-to-end tests for the analysis orchestrator against a fake chain."""

from __future__ import annotations

import pytest

from conftest import CLEAN_BYTECODE, OWNER, TOKEN, FakeChain
from honeyscan.chain.abi import (
    ERC20_BALANCE_OF,
    ERC20_DECIMALS,
    ERC20_NAME,
    FACTORY_GET_PAIR,
    OWNABLE_OWNER,
)
from honeyscan.chain.port import ZERO_ADDRESS
from honeyscan.core.errors import (
    AnalysisError,
    CallFailed,
    ChainUnavailableError,
    EstimationFailed,
    InvalidAddressError,
    NotAContractError,
    RpcError,
)
from honeyscan.core.types import RiskLevel, Severity
from honeyscan.pipeline.orchestrator import TokenAnalyzer, analyze, normalize_address


def _titles(result) -> list[str]:
    return [f.title for f in result.findings]


# ── Address normalisation ────────────────────────────────────────────────────


class TestNormalizeAddress:
    def test_adds_prefix_and_checksums(self):
        assert normalize_address(TOKEN[2:].lower()) == TOKEN

    def test_accepts_upper_case_hex(self):
        assert normalize_address("0x" + TOKEN[2:].upper()) == TOKEN

    @pytest.mark.parametrize("bad", ["", "0x", "0x1234", "0x" + "g" * 40, TOKEN + "00"])
    def test_rejects_malformed(self, bad):
        with pytest.raises(InvalidAddressError):
            normalize_address(bad)

    def test_invalid_address_is_analysis_error(self):
        assert issubclass(InvalidAddressError, AnalysisError)


# ── Scenarios ────────────────────────────────────────────────────────────────


class TestScenarios:
    @pytest.mark.asyncio
    async def test_no_code_is_fatal(self, fake_chain: FakeChain, base_config):
        with pytest.raises(NotAContractError, match="Address is not a contract"):
            await TokenAnalyzer(fake_chain, base_config).analyze(TOKEN)
        assert fake_chain.calls == [("get_bytecode", TOKEN)]

    @pytest.mark.asyncio
    async def test_clean_token_is_low_risk(self, healthy_chain, base_config):
        result = await TokenAnalyzer(healthy_chain, base_config).analyze(TOKEN)

        assert result.risk_score == 0
        assert result.risk_level is RiskLevel.LOW
        assert _titles(result) == [
            "Valid Contract",
            "ERC20 Standard",
            "Standard Contract Size",
            "Ownership Renounced",
            "Liquidity Detected",
            "Buy Simulation Passed",
            "Normal Contract Size",
        ]
        assert result.token_info is not None
        assert result.token_info.symbol == "USDC"
        assert result.token_info.decimals == 6

    @pytest.mark.asyncio
    async def test_blocked_buy_is_danger(self, healthy_chain, base_config):
        healthy_chain.gas = EstimationFailed("execution reverted", reverted=True)
        result = await TokenAnalyzer(healthy_chain, base_config).analyze(TOKEN)

        assert any(f.severity == Severity.DANGER for f in result.findings)
        assert result.risk_score == 50
        # Level follows the score alone: 50 on its own is still Medium
        assert result.risk_level is RiskLevel.MEDIUM

    @pytest.mark.asyncio
    async def test_blocked_buy_with_selfdestruct_is_high_risk(self, healthy_chain, base_config):
        healthy_chain.set_code(TOKEN, "0x" + "63ff" * 3 + "60" * 4994)
        healthy_chain.gas = EstimationFailed("execution reverted", reverted=True)
        result = await TokenAnalyzer(healthy_chain, base_config).analyze(TOKEN)

        assert result.risk_score == 65
        assert result.risk_level is RiskLevel.HIGH

    @pytest.mark.asyncio
    async def test_no_pair_skips_simulation(self, healthy_chain, base_config):
        healthy_chain.set_read(base_config.pair_factory_address, FACTORY_GET_PAIR, ZERO_ADDRESS)
        result = await TokenAnalyzer(healthy_chain, base_config).analyze(TOKEN)

        liquidity = [f for f in result.findings if f.check == "HP-LIQUIDITY"]
        assert [(f.title, f.severity) for f in liquidity] == [("No Liquidity Found", Severity.WARNING)]
        assert result.risk_score == 10
        assert not healthy_chain.called("estimate_gas")


# ── Aggregation ──────────────────────────────────────────────────────────────


class TestAggregation:
    @pytest.mark.asyncio
    async def test_score_is_additive_and_unclamped(self, fake_chain, base_config):
        # Non-standard (+5), SELFDESTRUCT (+15), DELEGATECALL (+5), minimal (+5),
        # no liquidity (+10)
        fake_chain.set_code(TOKEN, "0x" + "63ff" * 3 + "f4" * 11)
        fake_chain.set_read(base_config.pair_factory_address, FACTORY_GET_PAIR, ZERO_ADDRESS)
        result = await TokenAnalyzer(fake_chain, base_config).analyze(TOKEN)

        assert result.risk_score == 40
        assert result.risk_level is RiskLevel.MEDIUM
        assert result.token_info is None

    @pytest.mark.asyncio
    async def test_large_contract_warning(self, healthy_chain, base_config):
        healthy_chain.set_code(TOKEN, "0x" + "60" * 24577)
        result = await TokenAnalyzer(healthy_chain, base_config).analyze(TOKEN)

        assert _titles(result)[-1] == "Large Contract"
        assert result.risk_score == 5

    @pytest.mark.asyncio
    async def test_ownership_applied_once(self, healthy_chain, base_config):
        healthy_chain.set_read(TOKEN, OWNABLE_OWNER, OWNER)
        result = await TokenAnalyzer(healthy_chain, base_config).analyze(TOKEN)

        assert _titles(result).count("Has Owner") == 1
        assert result.risk_score == 0

    @pytest.mark.asyncio
    async def test_metadata_failure_is_non_standard(self, healthy_chain, base_config):
        healthy_chain.set_read(TOKEN, ERC20_NAME, CallFailed("name() reverted"))
        result = await TokenAnalyzer(healthy_chain, base_config).analyze(TOKEN)

        assert "Non-Standard Token" in _titles(result)
        assert result.token_info is None
        assert result.risk_score == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "function,value",
        [
            (ERC20_NAME, RuntimeError("node returned garbage")),
            (ERC20_NAME, TimeoutError()),
            (ERC20_DECIMALS, 300),
        ],
    )
    async def test_any_metadata_error_is_non_standard(self, healthy_chain, base_config, function, value):
        healthy_chain.set_read(TOKEN, function, value)
        result = await TokenAnalyzer(healthy_chain, base_config).analyze(TOKEN)

        assert "Non-Standard Token" in _titles(result)
        assert result.token_info is None
        assert result.risk_score == 5

    @pytest.mark.asyncio
    async def test_liquidity_failure_does_not_abort(self, healthy_chain, base_config):
        healthy_chain.set_read(TOKEN, ERC20_BALANCE_OF, CallFailed("reverted"))
        healthy_chain.gas = EstimationFailed("execution reverted", reverted=True)
        result = await TokenAnalyzer(healthy_chain, base_config).analyze(TOKEN)

        assert "Liquidity Check Failed" in _titles(result)
        assert _titles(result)[-1] == "Normal Contract Size"


# ── Fatal chain errors ───────────────────────────────────────────────────────


class TestChainErrors:
    @pytest.mark.asyncio
    async def test_unavailable_bytecode_read_is_fatal(self, fake_chain, base_config):
        fake_chain.set_code(TOKEN, ChainUnavailableError("All RPC endpoints failed."))
        with pytest.raises(ChainUnavailableError):
            await TokenAnalyzer(fake_chain, base_config).analyze(TOKEN)

    @pytest.mark.asyncio
    async def test_rpc_error_on_bytecode_read_is_wrapped(self, fake_chain, base_config):
        fake_chain.set_code(TOKEN, RpcError(-32000, "header not found"))
        with pytest.raises(ChainUnavailableError, match="header not found"):
            await TokenAnalyzer(fake_chain, base_config).analyze(TOKEN)

    @pytest.mark.asyncio
    async def test_module_level_analyze_uses_given_chain(self, healthy_chain, settings):
        result = await analyze(TOKEN[2:], chain=healthy_chain, settings=settings)
        assert result.address == TOKEN
        assert result.risk_level is RiskLevel.LOW
