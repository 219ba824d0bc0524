"""Rarity, RawNFT, NFT, MarketplaceResource - marketplace entities."""

from __future__ import annotations

from decimal import Decimal
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Rarity(IntEnum):
    """Rarity tier stored on-chain as a u8 in 1..4."""

    COMMON = 1
    UNCOMMON = 2
    RARE = 3
    SUPER_RARE = 4

    @property
    def label(self) -> str:
        return _RARITY_LABELS[self]

    @property
    def color(self) -> str:
        return _RARITY_COLORS[self]


_RARITY_LABELS = {
    Rarity.COMMON: "Common",
    Rarity.UNCOMMON: "Uncommon",
    Rarity.RARE: "Rare",
    Rarity.SUPER_RARE: "Super Rare",
}

_RARITY_COLORS = {
    Rarity.COMMON: "green",
    Rarity.UNCOMMON: "blue",
    Rarity.RARE: "purple",
    Rarity.SUPER_RARE: "orange",
}


def _unwrap_option(value: Any) -> Any:
    """Move Option<T> is serialized as {"vec": []} or {"vec": [x]}."""
    if isinstance(value, dict) and "vec" in value:
        vec = value["vec"]
        return vec[0] if vec else None
    return value


class RawNFT(BaseModel):
    """One NFT record as the node returns it (hex text, integer octas)."""

    id: int = Field(..., ge=0)
    owner: str
    name: str
    description: str
    uri: str
    price: int = Field(..., ge=0, description="Price in octas")
    for_sale: bool
    rarity: int
    average_rating: float | None = None

    @field_validator("average_rating", mode="before")
    @classmethod
    def _rating_option(cls, value: Any) -> Any:
        return _unwrap_option(value)


class MarketplaceResource(BaseModel):
    """
    The <addr>::NFTMarketplace::Marketplace resource, records in on-chain order.

    Records stay as the node delivered them; each one is validated against
    RawNFT on its own when decoded, so one bad record cannot sink the rest.
    """

    nfts: list[dict[str, Any]]


class NFT(BaseModel):
    """Decoded NFT ready for display. Immutable; a refresh replaces it."""

    model_config = ConfigDict(frozen=True)

    id: int
    owner: str
    name: str
    description: str
    uri: str
    price: Decimal = Field(..., description="Display price (octas / 1e8)")
    price_octas: int
    for_sale: bool
    rarity: Rarity
    average_rating: float | None = None
