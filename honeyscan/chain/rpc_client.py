"""JSON-RPC chain access over HTTP with endpoint failover."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Sequence

import httpx
from eth_utils import decode_hex

from honeyscan.chain.abi import ContractFunction
from honeyscan.chain.port import ChainAccessPort, TxRequest
from honeyscan.core.config import Settings, get_settings
from honeyscan.core.errors import (
    CallFailed,
    ChainUnavailableError,
    EstimationFailed,
    RpcError,
)

logger = logging.getLogger(__name__)

# JSON-RPC error code geth and most providers use for "execution reverted"
_EXECUTION_REVERTED_CODE = 3


def _is_revert(exc: RpcError) -> bool:
    return exc.code == _EXECUTION_REVERTED_CODE or "revert" in exc.message.lower()


class JsonRpcChainClient(ChainAccessPort):
    """Read-only chain access through a list of public JSON-RPC endpoints.

    The client connects lazily to the first endpoint that answers
    ``eth_chainId`` with the expected chain id. When a request fails at the
    transport level it rotates to the next endpoint and retries once before
    giving up with ``ChainUnavailableError``.

    Usage::

        async with JsonRpcChainClient(["https://mainnet.base.org"], chain_id=8453) as chain:
            code = await chain.get_bytecode("0x4200000000000000000000000000000000000006")
    """

    def __init__(
        self,
        rpc_urls: Sequence[str],
        chain_id: int | None = None,
        timeout: float = 15.0,
        connect_timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not rpc_urls:
            raise ValueError("At least one RPC endpoint is required")
        self._rpc_urls = list(rpc_urls)
        self._chain_id = chain_id
        self._connect_timeout = connect_timeout
        self._current = 0
        self._connected = False
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        rpc_urls: Sequence[str] | None = None,
    ) -> "JsonRpcChainClient":
        settings = settings or get_settings()
        return cls(
            rpc_urls=list(rpc_urls) if rpc_urls else settings.rpc_url_list,
            chain_id=settings.chain_config.chain_id,
            timeout=settings.rpc_timeout_seconds,
            connect_timeout=settings.rpc_connect_timeout_seconds,
        )

    @property
    def rpc_url(self) -> str:
        """The endpoint currently in use."""
        return self._rpc_urls[self._current]

    @property
    def connected(self) -> bool:
        return self._connected

    # ── Context manager ──────────────────────────────────────────────

    async def __aenter__(self) -> "JsonRpcChainClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ── Transport ────────────────────────────────────────────────────

    async def _post(
        self,
        url: str,
        method: str,
        params: list[Any],
        timeout: float | None = None,
    ) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        if timeout is not None:
            resp = await self._client.post(url, json=payload, timeout=timeout)
        else:
            resp = await self._client.post(url, json=payload)
        resp.raise_for_status()
        body = resp.json()
        if not isinstance(body, dict):
            raise RpcError(-32603, f"Malformed JSON-RPC response to {method}")

        error = body.get("error")
        if error:
            if not isinstance(error, dict):
                raise RpcError(-32603, str(error))
            code = error.get("code")
            raise RpcError(
                code if isinstance(code, int) else -32000,
                str(error.get("message", "")),
                error.get("data"),
            )
        if "result" not in body:
            raise RpcError(-32603, f"Malformed JSON-RPC response to {method}")
        return body["result"]

    async def connect(self) -> str:
        """Select a working endpoint; returns its URL."""
        async with self._lock:
            if self._connected:
                return self.rpc_url
            return await self._connect_locked(start=self._current)

    async def _connect_locked(self, start: int) -> str:
        total = len(self._rpc_urls)
        for offset in range(total):
            index = (start + offset) % total
            url = self._rpc_urls[index]
            logger.debug("Trying RPC endpoint %s", url, extra={"rpc_url": url})
            try:
                chain_id = int(
                    await self._post(url, "eth_chainId", [], timeout=self._connect_timeout), 16
                )
            except (httpx.HTTPError, RpcError, TypeError, ValueError) as exc:
                logger.warning("Failed to connect to %s: %s", url, exc, extra={"rpc_url": url})
                continue

            if self._chain_id is not None and chain_id != self._chain_id:
                logger.warning(
                    "Skipping %s: chain id %d, expected %d",
                    url, chain_id, self._chain_id,
                    extra={"rpc_url": url},
                )
                continue

            self._current = index
            self._connected = True
            logger.info("Connected to chain %d via %s", chain_id, url, extra={"rpc_url": url})
            return url

        self._connected = False
        raise ChainUnavailableError(
            "Unable to connect to the network. All RPC endpoints failed."
        )

    async def _rpc(self, method: str, params: list[Any]) -> Any:
        """Send a request, failing over to the next endpoint once on transport errors."""
        await self.connect()
        failed_url = self.rpc_url
        try:
            return await self._post(failed_url, method, params)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "%s failed on %s, failing over: %s", method, failed_url, exc,
                extra={"rpc_url": failed_url},
            )

        async with self._lock:
            # Another request may already have rotated away from the failed endpoint
            if self._connected and self.rpc_url == failed_url:
                self._connected = False
            if not self._connected:
                await self._connect_locked(start=self._current + 1)

        url = self.rpc_url
        try:
            return await self._post(url, method, params)
        except (httpx.HTTPError, ValueError) as exc:
            self._connected = False
            raise ChainUnavailableError(f"Lost connection to the network during {method}: {exc}") from exc

    # ── Port operations ──────────────────────────────────────────────

    async def get_bytecode(self, address: str) -> str:
        code = await self._rpc("eth_getCode", [address, "latest"])
        if code is not None and not isinstance(code, str):
            raise RpcError(-32603, f"eth_getCode returned {type(code).__name__}, expected hex string")
        return code or "0x"

    async def call_read(
        self,
        address: str,
        function: ContractFunction,
        args: Sequence[Any] = (),
    ) -> Any:
        data = function.encode_call(args)
        try:
            result = await self._rpc(
                "eth_call", [{"to": address, "data": "0x" + data.hex()}, "latest"]
            )
        except RpcError as exc:
            raise CallFailed(
                f"{function.signature} failed: {exc.message}", function=function.signature
            ) from exc
        try:
            output = decode_hex(result or "0x")
        except (TypeError, ValueError) as exc:
            raise CallFailed(
                f"{function.signature} returned non-hex data: {result!r}", function=function.signature
            ) from exc
        return function.decode_result(output)

    async def estimate_gas(self, tx: TxRequest) -> int:
        try:
            result = await self._rpc("eth_estimateGas", [tx.to_rpc()])
        except RpcError as exc:
            raise EstimationFailed(exc.message, reverted=_is_revert(exc)) from exc
        try:
            return int(result, 16)
        except (TypeError, ValueError) as exc:
            raise EstimationFailed(f"Malformed gas estimate: {result!r}") from exc

    async def block_number(self) -> int:
        return int(await self._rpc("eth_blockNumber", []), 16)
