"""Headless signer backed by a local ed25519 key (aptos-sdk)."""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from aptos_sdk.account import Account
from aptos_sdk.async_client import ApiError, RestClient

from nftmarket.errors import NetworkError, TransactionRejected, WalletRejected

log = structlog.get_logger(__name__)


class LocalAccountWallet:
    """Signs JSON entry-function payloads with a private key and submits them to the node."""

    def __init__(self, account: Account, node_url: str):
        self.account = account
        self.node_url = node_url
        self._rest = RestClient(node_url)

    @classmethod
    def from_private_key(cls, private_key: str, node_url: str) -> LocalAccountWallet:
        if not private_key:
            raise WalletRejected("no wallet private key configured (set WALLET_PRIVATE_KEY)")
        try:
            account = Account.load_key(private_key)
        except ValueError as e:
            raise WalletRejected(f"unusable private key: {e}") from e
        return cls(account, node_url)

    @property
    def address(self) -> str:
        return str(self.account.address())

    async def sign_and_submit_transaction(self, payload: dict[str, Any]) -> dict[str, Any]:
        log.info("wallet_submit", sender=self.address, function=payload.get("function"))
        try:
            tx_hash = await self._rest.submit_transaction(self.account, payload)
        except ApiError as e:
            # Node refused to accept the transaction (simulation/validation failure).
            raise TransactionRejected(f"node rejected submission: {e}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"submission failed: {e}") from e
        return {"hash": tx_hash}

    async def aclose(self) -> None:
        await self._rest.close()
