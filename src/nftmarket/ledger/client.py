"""Aptos fullnode REST client - account resources and transaction finality."""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from nftmarket.errors import FinalityTimeout, NetworkError, ResourceNotFound
from nftmarket.models import TransactionOutcome

log = structlog.get_logger(__name__)

DEFAULT_NODE_URL = "https://fullnode.testnet.aptoslabs.com/v1"


class LedgerClient:
    """
    Thin async wrapper over the fullnode REST API.

    Constructed once at process start and passed to readers and orchestrators.
    Pass http_client to share a connection pool or to inject a mock transport.
    """

    def __init__(
        self,
        node_url: str = DEFAULT_NODE_URL,
        *,
        timeout: float = 30.0,
        poll_interval: float = 1.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.node_url = node_url.rstrip("/")
        self.poll_interval = poll_interval
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=self.node_url, timeout=timeout)

    async def __aenter__(self) -> LedgerClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _get(self, path: str) -> httpx.Response:
        try:
            return await self._http.get(path)
        except httpx.HTTPError as e:
            log.warning("node_request_failed", path=path, error=str(e))
            raise NetworkError(f"GET {path} failed: {e}") from e

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError(
                f"malformed response from {resp.request.url}", status_code=resp.status_code
            ) from e

    async def get_account_resource(self, address: str, resource_type: str) -> dict[str, Any]:
        """Return the resource body ({"type": ..., "data": {...}}). 404 -> ResourceNotFound."""
        path = f"/accounts/{address}/resource/{quote(resource_type, safe=':')}"
        resp = await self._get(path)
        if resp.status_code == 404:
            raise ResourceNotFound(address, resource_type)
        if resp.status_code != 200:
            raise NetworkError(
                f"node returned {resp.status_code} for {resource_type}", status_code=resp.status_code
            )
        body = self._json(resp)
        if not isinstance(body, dict):
            raise NetworkError(f"unexpected resource body for {resource_type}")
        return body

    async def get_transaction(self, tx_hash: str) -> dict[str, Any] | None:
        """Return the transaction, or None if the node does not know it yet."""
        resp = await self._get(f"/transactions/by_hash/{tx_hash}")
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            raise NetworkError(
                f"node returned {resp.status_code} for transaction {tx_hash}",
                status_code=resp.status_code,
            )
        body = self._json(resp)
        if not isinstance(body, dict):
            raise NetworkError(f"unexpected transaction body for {tx_hash}")
        return body

    async def _poll_until_committed(self, tx_hash: str) -> dict[str, Any]:
        while True:
            txn = await self.get_transaction(tx_hash)
            if txn is not None and txn.get("type") != "pending_transaction":
                return txn
            await asyncio.sleep(self.poll_interval)

    async def wait_for_transaction(self, tx_hash: str, timeout: float = 60.0) -> TransactionOutcome:
        """
        Wait until tx_hash is committed. Success and execution failure both resolve;
        exceeding timeout raises FinalityTimeout.
        """
        try:
            txn = await asyncio.wait_for(self._poll_until_committed(tx_hash), timeout=timeout)
        except asyncio.TimeoutError as e:
            log.warning("finality_timeout", tx_hash=tx_hash, timeout=timeout)
            raise FinalityTimeout(tx_hash, timeout) from e
        version = txn.get("version")
        payload = txn.get("payload") or {}
        return TransactionOutcome(
            hash=tx_hash,
            success=bool(txn.get("success")),
            vm_status=str(txn.get("vm_status") or ""),
            version=int(version) if version is not None else None,
            function=payload.get("function"),
        )
