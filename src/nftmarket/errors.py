"""Error taxonomy for marketplace reads, payload building and transactions."""

from __future__ import annotations

from typing import Any


class MarketplaceError(Exception):
    """Base class for every error raised by this package."""


class DecodeError(MarketplaceError):
    """A resource field could not be decoded (bad hex, bad UTF-8, unknown rarity)."""

    def __init__(self, message: str, *, nft_id: Any = None, field: str | None = None):
        super().__init__(message)
        self.nft_id = nft_id
        self.field = field


class ResourceNotFound(MarketplaceError):
    """The node has no such resource. For the Marketplace this means not yet initialized."""

    def __init__(self, address: str, resource_type: str):
        super().__init__(f"resource {resource_type} not found under {address}")
        self.address = address
        self.resource_type = resource_type


class NetworkError(MarketplaceError):
    """Transport failure, unexpected node status or malformed node response."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(MarketplaceError, ValueError):
    """A payload argument violates a client-side constraint. Nothing was submitted."""


class TransactionRejected(MarketplaceError):
    """The wallet declined to sign, or the ledger executed the transaction and it failed."""

    def __init__(self, reason: str, *, tx_hash: str | None = None):
        super().__init__(reason)
        self.reason = reason
        self.tx_hash = tx_hash


class WalletRejected(TransactionRejected):
    """The signer refused the payload (e.g. the user declined)."""


class FinalityTimeout(MarketplaceError, TimeoutError):
    """A submitted transaction was not finalized within the configured bound."""

    def __init__(self, tx_hash: str, timeout: float):
        super().__init__(f"transaction {tx_hash} not finalized after {timeout}s")
        self.tx_hash = tx_hash
        self.timeout = timeout
