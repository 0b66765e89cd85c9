"""Per-chain constants: RPC endpoints, explorer, DEX factory and wrapped native token."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChainConfig:
    """Deployment-time constants for the chain being analysed."""

    chain_id: int
    name: str
    short_name: str
    rpc_urls: tuple[str, ...]
    explorer_url: str
    pair_factory_address: str  # Uniswap V2-compatible factory
    counter_asset_address: str  # wrapped native token
    native_currency: str = "ETH"

    def explorer_address_url(self, address: str) -> str:
        return f"{self.explorer_url}/address/{address}"


# keyed by ``Settings.chain``

CHAINS: dict[str, ChainConfig] = {
    "base": ChainConfig(
        chain_id=8453,
        name="Base",
        short_name="base",
        rpc_urls=(
            "https://mainnet.base.org",
            "https://base.llamarpc.com",
            "https://base-mainnet.public.blastapi.io",
            "https://1rpc.io/base",
            "https://base.gateway.tenderly.co",
        ),
        explorer_url="https://basescan.org",
        pair_factory_address="0x8909Dc15e40173Ff4699343b6eB8132c65e18eC6",
        counter_asset_address="0x4200000000000000000000000000000000000006",
    ),
}


def get_chain_config(chain_name: str) -> ChainConfig | None:
    """Case-insensitive lookup; None for chains honeyscan does not know."""
    return CHAINS.get(chain_name.lower())
