"""Shared fixtures for the honeyscan test suite."""

from __future__ import annotations

from typing import Any, Sequence

import pytest

from honeyscan.chain.abi import (
    ERC20_BALANCE_OF,
    ERC20_DECIMALS,
    ERC20_NAME,
    ERC20_SYMBOL,
    ERC20_TOTAL_SUPPLY,
    FACTORY_GET_PAIR,
    OWNABLE_OWNER,
    PAIR_GET_RESERVES,
    ContractFunction,
)
from honeyscan.chain.port import ZERO_ADDRESS, ChainAccessPort, TxRequest
from honeyscan.core.chains import get_chain_config
from honeyscan.core.config import Settings
from honeyscan.core.errors import CallFailed

TOKEN = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
PAIR = "0x88A43bbDF9D098eEC7bCEda4e2494615dfD9bB9C"
OWNER = "0x1234567890AbcdEF1234567890aBcdef12345678"

# 5000 bytes, no SELFDESTRUCT or DELEGATECALL pattern
CLEAN_BYTECODE = "0x" + "60" * 5000


# ── Fake chain port ──────────────────────────────────────────────────────────


class FakeChain(ChainAccessPort):
    """In-memory chain port.

    Read results are keyed by ``(address, function signature)``; any value
    that is an exception instance is raised instead of returned. Every call
    is recorded in ``calls``.
    """

    def __init__(self) -> None:
        self.code: dict[str, str] = {}
        self.reads: dict[tuple[str, str], Any] = {}
        self.gas: Any = 52_000
        self.block: Any = 20_000_000
        self.calls: list[tuple[str, ...]] = []

    # ── Setup helpers ────────────────────────────────────────────────

    def set_code(self, address: str, code: str) -> None:
        self.code[address.lower()] = code

    def set_read(self, address: str, function: ContractFunction, value: Any) -> None:
        self.reads[(address.lower(), function.signature)] = value

    # ── Port ─────────────────────────────────────────────────────────

    async def get_bytecode(self, address: str) -> str:
        self.calls.append(("get_bytecode", address))
        value = self.code.get(address.lower(), "0x")
        if isinstance(value, Exception):
            raise value
        return value

    async def call_read(
        self,
        address: str,
        function: ContractFunction,
        args: Sequence[Any] = (),
    ) -> Any:
        self.calls.append(("call_read", address, function.signature))
        key = (address.lower(), function.signature)
        if key not in self.reads:
            raise CallFailed(f"{function.signature} reverted", function=function.signature)
        value = self.reads[key]
        if isinstance(value, Exception):
            raise value
        return value

    async def estimate_gas(self, tx: TxRequest) -> int:
        self.calls.append(("estimate_gas", tx.to, tx.from_))
        if isinstance(self.gas, Exception):
            raise self.gas
        return self.gas

    async def block_number(self) -> int:
        if isinstance(self.block, Exception):
            raise self.block
        return self.block

    def called(self, name: str) -> bool:
        return any(call[0] == name for call in self.calls)


# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def base_config():
    return get_chain_config("base")


@pytest.fixture
def settings() -> Settings:
    return Settings(app_env="development", chain="base", rpc_urls="https://rpc.test")


@pytest.fixture
def fake_chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def healthy_chain(base_config) -> FakeChain:
    """A standard ERC20 with renounced ownership and a liquid, tradable pair."""
    chain = FakeChain()
    chain.set_code(TOKEN, CLEAN_BYTECODE)
    chain.set_read(TOKEN, ERC20_NAME, "USD Coin")
    chain.set_read(TOKEN, ERC20_SYMBOL, "USDC")
    chain.set_read(TOKEN, ERC20_DECIMALS, 6)
    chain.set_read(TOKEN, ERC20_TOTAL_SUPPLY, 3_500_000_000 * 10**6)
    chain.set_read(TOKEN, OWNABLE_OWNER, ZERO_ADDRESS)
    chain.set_read(base_config.pair_factory_address, FACTORY_GET_PAIR, PAIR)
    chain.set_read(PAIR, PAIR_GET_RESERVES, (10**12, 5 * 10**20, 1_700_000_000))
    chain.set_read(TOKEN, ERC20_BALANCE_OF, 10**12)
    return chain
