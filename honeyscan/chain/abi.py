"""Minimal human-readable ABI support for the read calls the checks need.

Functions are declared the way block explorers print them::

    ContractFunction.parse("getReserves() view returns (uint112 reserve0, uint112 reserve1, uint32)")

Encoding and decoding go through ``eth_abi``; selectors and address
checksums through ``eth_utils``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from honeyscan.core.errors import CallFailed

_SIGNATURE_RE = re.compile(
    r"^\s*(?:function\s+)?(?P<name>[A-Za-z_]\w*)\s*\((?P<inputs>[^)]*)\)"
    r"(?P<modifiers>(?:\s+(?:external|public|view|pure|payable|nonpayable))*)"
    r"(?:\s*returns\s*\((?P<outputs>[^)]*)\))?\s*$"
)


def _param_types(params: str) -> tuple[str, ...]:
    """Extract the bare types from a parameter list like ``"address to, uint256"``."""
    types = []
    for raw in params.split(","):
        raw = raw.strip()
        if raw:
            types.append(raw.split()[0])
    return tuple(types)


@dataclass(frozen=True)
class ContractFunction:
    """A contract function with its input and output types."""

    name: str
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()

    @classmethod
    def parse(cls, signature: str) -> "ContractFunction":
        match = _SIGNATURE_RE.match(signature)
        if not match:
            raise ValueError(f"Unparseable function signature: {signature!r}")
        return cls(
            name=match.group("name"),
            inputs=_param_types(match.group("inputs")),
            outputs=_param_types(match.group("outputs") or ""),
        )

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.inputs)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    def encode_call(self, args: Sequence[Any] = ()) -> bytes:
        """Return selector + ABI-encoded arguments."""
        if len(args) != len(self.inputs):
            raise ValueError(
                f"{self.signature} takes {len(self.inputs)} argument(s), got {len(args)}"
            )
        if not self.inputs:
            return self.selector
        try:
            return self.selector + encode(list(self.inputs), list(args))
        except EncodingError as exc:
            raise ValueError(f"Cannot encode arguments for {self.signature}: {exc}") from exc

    def decode_result(self, data: bytes) -> Any:
        """Decode return data; single outputs are returned bare, several as a tuple."""
        if not self.outputs:
            return None
        if not data:
            raise CallFailed(f"{self.signature} returned no data", function=self.signature)
        try:
            values = decode(list(self.outputs), data)
        except (DecodingError, UnicodeDecodeError) as exc:
            raise CallFailed(
                f"{self.signature} returned undecodable data: {exc}", function=self.signature
            ) from exc

        values = tuple(
            to_checksum_address(v) if t == "address" else v
            for t, v in zip(self.outputs, values)
        )
        return values[0] if len(values) == 1 else values


# ── Functions used by the checks ─────────────────────────────────────────────

ERC20_NAME = ContractFunction.parse("function name() view returns (string)")
ERC20_SYMBOL = ContractFunction.parse("function symbol() view returns (string)")
ERC20_DECIMALS = ContractFunction.parse("function decimals() view returns (uint8)")
ERC20_TOTAL_SUPPLY = ContractFunction.parse("function totalSupply() view returns (uint256)")
ERC20_BALANCE_OF = ContractFunction.parse("function balanceOf(address) view returns (uint256)")
ERC20_TRANSFER = ContractFunction.parse("function transfer(address to, uint256 amount) returns (bool)")

OWNABLE_OWNER = ContractFunction.parse("function owner() view returns (address)")
OWNABLE_GET_OWNER = ContractFunction.parse("function getOwner() view returns (address)")

FACTORY_GET_PAIR = ContractFunction.parse(
    "function getPair(address tokenA, address tokenB) external view returns (address pair)"
)
PAIR_GET_RESERVES = ContractFunction.parse(
    "function getReserves() external view returns "
    "(uint112 reserve0, uint112 reserve1, uint32 blockTimestampLast)"
)
