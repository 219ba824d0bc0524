"""Entry-function payloads for the NFTMarketplace module.

Argument encoding follows the fullnode JSON rules:

    vector<u8>   list of ints (UTF-8 bytes)
    u8           JSON number (rarity, rating)
    u64          decimal string (nft id, price in octas)
    address      0x-prefixed hex string

Every builder validates its arguments and raises ValidationError before
anything reaches the wallet.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from nftmarket.codec import (
    MAX_OCTAS,
    encode_text_to_byte_vector,
    is_valid_address,
    unit_to_octas,
)
from nftmarket.errors import ValidationError
from nftmarket.ledger.reader import MODULE_NAME
from nftmarket.models import EntryFunctionPayload, Rarity

MIN_RATING = 1
MAX_RATING = 5
_RARITIES = frozenset(int(r) for r in Rarity)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _u64(value: int, what: str) -> str:
    if not _is_int(value) or value < 0 or value > MAX_OCTAS:
        raise ValidationError(f"{what} must be an unsigned 64-bit integer, got {value!r}")
    return str(value)


def _rarity(value: Any) -> int:
    if not _is_int(value) or value not in _RARITIES:
        raise ValidationError(f"rarity must be one of 1-4, got {value!r}")
    return int(value)


def _rating(value: Any) -> int:
    if not _is_int(value) or not MIN_RATING <= value <= MAX_RATING:
        raise ValidationError(f"rating must be an integer in [{MIN_RATING}, {MAX_RATING}], got {value!r}")
    return int(value)


def _address(value: Any, what: str) -> str:
    if not is_valid_address(value):
        raise ValidationError(f"{what} is not a valid account address: {value!r}")
    return value


def _text(value: Any, what: str) -> list[int]:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{what} must be a non-empty string")
    return encode_text_to_byte_vector(value)


class PayloadBuilder:
    """Builds NFTMarketplace entry-function payloads namespaced under one marketplace address."""

    def __init__(self, marketplace_address: str):
        self.marketplace_address = _address(marketplace_address, "marketplace address")

    def _payload(self, name: str, arguments: list[Any]) -> EntryFunctionPayload:
        return EntryFunctionPayload(
            function=f"{self.marketplace_address}::{MODULE_NAME}::{name}",
            type_arguments=[],
            arguments=arguments,
        )

    def initialize(self) -> EntryFunctionPayload:
        return self._payload("initialize", [])

    def mint(self, name: str, description: str, uri: str, rarity: Rarity | int) -> EntryFunctionPayload:
        return self._payload(
            "mint_nft",
            [
                _text(name, "name"),
                _text(description, "description"),
                _text(uri, "uri"),
                _rarity(rarity),
            ],
        )

    def purchase(self, nft_id: int, price: Decimal | int | float | str) -> EntryFunctionPayload:
        """Purchase at a display price (e.g. Decimal("2.5")); converted to octas here."""
        return self.purchase_octas(nft_id, unit_to_octas(price))

    def purchase_octas(self, nft_id: int, price_octas: int) -> EntryFunctionPayload:
        if _is_int(price_octas) and price_octas < 0:
            raise ValidationError(f"price must be non-negative, got {price_octas}")
        return self._payload(
            "purchase_nft",
            [self.marketplace_address, _u64(nft_id, "nft id"), _u64(price_octas, "price")],
        )

    def transfer(self, nft_id: int, recipient: str) -> EntryFunctionPayload:
        return self._payload(
            "transfer_nft",
            [self.marketplace_address, _u64(nft_id, "nft id"), _address(recipient, "recipient")],
        )

    def rate(self, nft_id: int, rating: int) -> EntryFunctionPayload:
        return self._payload(
            "rate_nft",
            [self.marketplace_address, _u64(nft_id, "nft id"), _rating(rating)],
        )
