"""Canonical schema (Pydantic) - NFT records, Marketplace resource, payloads."""

from nftmarket.models.nft import NFT, MarketplaceResource, Rarity, RawNFT
from nftmarket.models.transaction import EntryFunctionPayload, TransactionOutcome

__all__ = [
    "NFT",
    "RawNFT",
    "Rarity",
    "MarketplaceResource",
    "EntryFunctionPayload",
    "TransactionOutcome",
]
