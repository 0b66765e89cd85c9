"""Chain access port — the read-only capabilities the analysis pipeline needs."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any, Sequence

from honeyscan.chain.abi import ContractFunction

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def is_zero_address(address: str) -> bool:
    return int(address, 16) == 0


def short_address(address: str) -> str:
    """Truncated display form: first 6 and last 4 characters."""
    return f"{address[:6]}...{address[-4:]}"


@dataclass(frozen=True)
class TxRequest:
    """A hypothetical transaction used for gas estimation."""

    to: str
    from_: str
    data: bytes = b""

    def to_rpc(self) -> dict[str, str]:
        return {"to": self.to, "from": self.from_, "data": "0x" + self.data.hex()}


class ChainAccessPort(abc.ABC):
    """Abstract read-only access to an EVM chain.

    Implementations raise subclasses of ``ChainAccessError``:
        - ``CallFailed`` when a read call reverts or its output cannot be decoded
        - ``EstimationFailed`` when gas estimation fails, flagging reverts
        - ``ChainUnavailableError`` when no endpoint can be reached
    """

    @abc.abstractmethod
    async def get_bytecode(self, address: str) -> str:
        """Return deployed bytecode as a hex string (``"0x"`` when none)."""
        ...

    @abc.abstractmethod
    async def call_read(
        self,
        address: str,
        function: ContractFunction,
        args: Sequence[Any] = (),
    ) -> Any:
        """Execute a read-only call and return the decoded value."""
        ...

    @abc.abstractmethod
    async def estimate_gas(self, tx: TxRequest) -> int:
        """Estimate gas for a transaction without signing or sending it."""
        ...

    async def block_number(self) -> int:
        """Latest block height; only the readiness probe needs it."""
        raise NotImplementedError
