"""Shared fixtures: raw records, an in-memory fullnode and a scripted wallet."""

from __future__ import annotations

import itertools
from typing import Any

import httpx
import pytest

from nftmarket.errors import WalletRejected
from nftmarket.ledger import LedgerClient
from nftmarket.models import MarketplaceResource

MARKET = "0x" + "a" * 64
BUYER = "0x" + "b" * 64
NODE_URL = "https://node.test/v1"


def hexs(text: str) -> str:
    return "0x" + text.encode("utf-8").hex()


def raw_nft(
    nft_id: int,
    *,
    name: str | None = None,
    price: int = 100_000_000,
    for_sale: bool = True,
    rarity: int = 1,
    owner: str = MARKET,
    average_rating: Any = None,
) -> dict[str, Any]:
    """One record shaped like the node's JSON (u64 fields as strings)."""
    return {
        "id": str(nft_id),
        "owner": owner,
        "name": hexs(name or f"NFT {nft_id}"),
        "description": hexs(f"description {nft_id}"),
        "uri": hexs(f"https://img.test/{nft_id}.png"),
        "price": str(price),
        "for_sale": for_sale,
        "rarity": rarity,
        "average_rating": average_rating,
    }


def resource(*records: dict[str, Any]) -> MarketplaceResource:
    return MarketplaceResource.model_validate({"nfts": list(records)})


class FakeNode:
    """Minimal fullnode: one Marketplace resource and scripted transaction lookups."""

    def __init__(self, records: list[dict[str, Any]] | None = None):
        self.records = records
        self.transactions: dict[str, list[dict[str, Any] | None]] = {}
        self.resource_status: int | None = None
        self.requests: list[httpx.Request] = []

    def commit(self, tx_hash: str, success: bool = True, vm_status: str = "Executed successfully", pending: int = 0):
        """Script tx_hash to be unknown/pending for `pending` polls, then committed."""
        committed = {
            "type": "user_transaction",
            "hash": tx_hash,
            "success": success,
            "vm_status": vm_status,
            "version": "42",
        }
        self.transactions[tx_hash] = [{"type": "pending_transaction"}] * pending + [committed]

    @property
    def resource_reads(self) -> int:
        return sum(1 for r in self.requests if "/resource/" in r.url.path)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if "/resource/" in path:
            if self.resource_status is not None:
                return httpx.Response(self.resource_status, text="node unavailable")
            if self.records is None:
                return httpx.Response(404, json={"error_code": "resource_not_found"})
            return httpx.Response(200, json={"type": "x", "data": {"nfts": self.records}})
        if "/transactions/by_hash/" in path:
            tx_hash = path.rsplit("/", 1)[-1]
            script = self.transactions.get(tx_hash)
            if not script:
                return httpx.Response(404, json={"error_code": "transaction_not_found"})
            step = script.pop(0) if len(script) > 1 else script[0]
            return httpx.Response(200, json=step)
        return httpx.Response(500)

    def client(self, poll_interval: float = 0.0) -> LedgerClient:
        http = httpx.AsyncClient(base_url=NODE_URL, transport=httpx.MockTransport(self.handler))
        return LedgerClient(NODE_URL, poll_interval=poll_interval, http_client=http)


class FakeWallet:
    """Records payloads; optionally refuses. Commits each hash on the attached node."""

    def __init__(self, node: FakeNode | None = None, *, reject: Exception | None = None, success: bool = True):
        self.node = node
        self.reject = reject
        self.success = success
        self.payloads: list[dict[str, Any]] = []
        self._seq = itertools.count(1)

    async def sign_and_submit_transaction(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.payloads.append(payload)
        if self.reject is not None:
            raise self.reject
        tx_hash = f"0x{next(self._seq):064x}"
        if self.node is not None:
            self.node.commit(tx_hash, success=self.success, vm_status="Executed successfully" if self.success else "Move abort: E_NOT_FOR_SALE")
        return {"hash": tx_hash}


@pytest.fixture
def node():
    return FakeNode([raw_nft(i, rarity=3) for i in range(1, 4)])


@pytest.fixture
def declining_wallet():
    return FakeWallet(reject=WalletRejected("User rejected the request"))
