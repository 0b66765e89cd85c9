"""Exception hierarchy shared by the chain port and the analysis pipeline.

Fatal errors derive from ``AnalysisError`` and abort an analysis; everything
raised by a chain port derives from ``ChainAccessError`` and is expected to be
caught at a check boundary and turned into a finding.
"""

from __future__ import annotations

from typing import Any


class HoneyscanError(Exception):
    """Base exception for all honeyscan errors."""


# ── Fatal ────────────────────────────────────────────────────────────────────


class AnalysisError(HoneyscanError):
    """Terminal failure: the analysis cannot produce a result."""


class NotAContractError(AnalysisError):
    """The address holds no deployed bytecode."""

    def __init__(self, address: str) -> None:
        super().__init__("Address is not a contract")
        self.address = address


class InvalidAddressError(AnalysisError):
    """The supplied string is not a 20-byte hex address."""

    def __init__(self, address: str) -> None:
        super().__init__(
            f"Invalid contract address: {address!r} "
            "(expected 0x followed by 40 hexadecimal characters)"
        )
        self.address = address


# ── Chain access ─────────────────────────────────────────────────────────────


class ChainAccessError(HoneyscanError):
    """Base class for failures reported by a chain access port."""


class ChainUnavailableError(ChainAccessError, AnalysisError):
    """No endpoint could serve the request (connection failure or timeout)."""


class RpcError(ChainAccessError):
    """A JSON-RPC error object returned by the node."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


class CallFailed(ChainAccessError):
    """A read-only contract call reverted or returned undecodable data."""

    def __init__(self, message: str, function: str = "") -> None:
        super().__init__(message)
        self.function = function


class EstimationFailed(ChainAccessError):
    """Gas estimation failed.

    ``reverted`` is True when the node reported an execution revert, as
    opposed to a generic estimation problem.
    """

    def __init__(self, reason: str, reverted: bool = False) -> None:
        super().__init__(reason)
        self.reason = reason
        self.reverted = reverted
