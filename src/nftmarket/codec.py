"""Wire <-> application conversions: hex text, byte vectors, octas, addresses."""

from __future__ import annotations

import re
import string
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Any

import pydantic

from nftmarket.errors import DecodeError, ValidationError
from nftmarket.models import NFT, RawNFT, Rarity

OCTAS_PER_UNIT = 100_000_000
# APT max supply is u64-bounded; integer octas up to this convert exactly.
MAX_OCTAS = 2**64 - 1

_OCTAS_SCALE = Decimal(OCTAS_PER_UNIT)
_HEXDIGITS = frozenset(string.hexdigits)
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")


def decode_hex_text(hex_text: str) -> str:
    """Decode a 0x-prefixed (or bare) hex string of UTF-8 bytes into text."""
    if not isinstance(hex_text, str):
        raise DecodeError(f"expected hex string, got {type(hex_text).__name__}")
    body = hex_text[2:] if hex_text[:2] in ("0x", "0X") else hex_text
    if len(body) % 2:
        raise DecodeError(f"odd-length hex string: {hex_text!r}")
    if not _HEXDIGITS.issuperset(body):
        raise DecodeError(f"non-hex characters in {hex_text!r}")
    try:
        return bytes.fromhex(body).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"invalid UTF-8 in {hex_text!r}: {e}") from e


def encode_text_to_byte_vector(text: str) -> list[int]:
    """UTF-8 bytes of text as a list of ints (JSON form of a vector<u8> argument)."""
    return list(text.encode("utf-8"))


def hex_encode(data: bytes | list[int]) -> str:
    return "0x" + bytes(data).hex()


def octas_to_unit(raw: int) -> Decimal:
    """Integer octas -> display units, exact."""
    return Decimal(int(raw)) / _OCTAS_SCALE


def unit_to_octas(value: Decimal | int | float | str) -> int:
    """Display units -> integer octas, rounded half-even to the nearest octa."""
    try:
        # str() keeps floats like 2.5 from dragging binary noise into the Decimal
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        octas = (amount * _OCTAS_SCALE).to_integral_value(rounding=ROUND_HALF_EVEN)
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"not a price: {value!r}") from e
    if not octas.is_finite():
        raise ValidationError(f"not a price: {value!r}")
    return int(octas)


def standardize_address(address: str) -> str:
    address = address.removeprefix("0x")
    return "0x" + address.zfill(64)


def is_valid_address(address: object) -> bool:
    return isinstance(address, str) and bool(_ADDRESS_RE.match(address))


def truncate_address(address: str, start: int = 6, end: int = 4) -> str:
    """Shorten an address for display, e.g. 0x1234...abcd."""
    if len(address) <= start + end:
        return address
    return f"{address[:start]}...{address[-end:]}"


def decode_rarity(value: int, nft_id: int | None = None) -> Rarity:
    try:
        return Rarity(int(value))
    except (TypeError, ValueError) as e:
        raise DecodeError(f"invalid rarity {value!r}", nft_id=nft_id, field="rarity") from e


def parse_raw_nft(record: Any) -> RawNFT:
    """Validate one record's shape. Missing or mistyped fields -> DecodeError."""
    if isinstance(record, RawNFT):
        return record
    nft_id = record.get("id") if isinstance(record, dict) else None
    try:
        return RawNFT.model_validate(record)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first["loc"] else None
        raise DecodeError(f"malformed record: {field}: {first['msg']}", nft_id=nft_id, field=field) from e


def decode_nft(raw: RawNFT | dict[str, Any]) -> NFT:
    """Decode one record: shape check, hex text fields, octas price, rarity enum."""
    raw = parse_raw_nft(raw)
    fields = {}
    for name in ("name", "description", "uri"):
        try:
            fields[name] = decode_hex_text(getattr(raw, name))
        except DecodeError as e:
            raise DecodeError(str(e), nft_id=raw.id, field=name) from e
    return NFT(
        id=raw.id,
        owner=raw.owner,
        price=octas_to_unit(raw.price),
        price_octas=raw.price,
        for_sale=raw.for_sale,
        rarity=decode_rarity(raw.rarity, raw.id),
        average_rating=raw.average_rating,
        **fields,
    )
