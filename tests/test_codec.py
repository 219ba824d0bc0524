"""Codec: hex text, byte vectors, octas conversion, record decoding."""

from decimal import Decimal

import pytest

from conftest import MARKET, raw_nft
from nftmarket.codec import (
    decode_hex_text,
    decode_nft,
    encode_text_to_byte_vector,
    hex_encode,
    is_valid_address,
    octas_to_unit,
    standardize_address,
    truncate_address,
    unit_to_octas,
)
from nftmarket.errors import DecodeError, ValidationError
from nftmarket.models import RawNFT, Rarity


def test_decode_hello():
    assert decode_hex_text("0x48656c6c6f") == "Hello"
    assert decode_hex_text("48656c6c6f") == "Hello"
    assert decode_hex_text("0x") == ""


@pytest.mark.parametrize("bad", ["0x123", "0xzz", "0x48 65", "hello!"])
def test_decode_hex_rejects_malformed(bad):
    with pytest.raises(DecodeError):
        decode_hex_text(bad)


def test_decode_hex_rejects_invalid_utf8():
    with pytest.raises(DecodeError):
        decode_hex_text("0xff")


@pytest.mark.parametrize("text", ["Hello", "", "Épée ✨ 日本", "ipfs://Qm/1.png"])
def test_text_survives_byte_vector_and_hex(text):
    vector = encode_text_to_byte_vector(text)
    assert all(isinstance(b, int) and 0 <= b < 256 for b in vector)
    assert decode_hex_text(hex_encode(vector)) == text


def test_byte_vector_is_raw_bytes_not_hex():
    assert encode_text_to_byte_vector("Hi") == [72, 105]


def test_octas_to_unit_exact():
    assert octas_to_unit(250_000_000) == Decimal("2.5")
    assert octas_to_unit(1) == Decimal("0.00000001")
    assert octas_to_unit(0) == 0


@pytest.mark.parametrize("octas", [0, 1, 7, 99_999_999, 100_000_000, 250_000_000, 123_456_789_012, 2**64 - 1])
def test_octas_round_trip(octas):
    assert unit_to_octas(octas_to_unit(octas)) == octas


def test_unit_to_octas_accepts_display_inputs():
    assert unit_to_octas("2.5") == 250_000_000
    assert unit_to_octas(2.5) == 250_000_000
    assert unit_to_octas(3) == 300_000_000
    assert unit_to_octas(Decimal("0.000000015")) == 2  # half-even


def test_unit_to_octas_rejects_garbage():
    with pytest.raises(ValidationError):
        unit_to_octas("two")


def test_addresses():
    assert standardize_address("0x1") == "0x" + "0" * 63 + "1"
    assert is_valid_address("0x1")
    assert is_valid_address(MARKET)
    assert not is_valid_address("0x")
    assert not is_valid_address("1234")
    assert not is_valid_address("0x" + "g" * 64)
    assert not is_valid_address("0x" + "a" * 65)
    assert truncate_address("0x1234567890abcdef") == "0x1234...cdef"
    assert truncate_address("0x12") == "0x12"


def test_decode_nft():
    nft = decode_nft(RawNFT.model_validate(raw_nft(7, name="Hello", price=250_000_000, rarity=4)))
    assert nft.id == 7
    assert nft.name == "Hello"
    assert nft.uri == "https://img.test/7.png"
    assert nft.price == Decimal("2.5")
    assert nft.price_octas == 250_000_000
    assert nft.rarity is Rarity.SUPER_RARE
    assert nft.rarity.label == "Super Rare"
    assert nft.rarity.color == "orange"


@pytest.mark.parametrize("rarity", [0, 5])
def test_decode_nft_invalid_rarity_is_error(rarity):
    with pytest.raises(DecodeError) as exc:
        decode_nft(RawNFT.model_validate(raw_nft(3, rarity=rarity)))
    assert exc.value.nft_id == 3
    assert exc.value.field == "rarity"


def test_decode_nft_reports_bad_field():
    record = raw_nft(9)
    record["description"] = "0xabc"
    with pytest.raises(DecodeError) as exc:
        decode_nft(RawNFT.model_validate(record))
    assert exc.value.field == "description"


def test_average_rating_option_shapes():
    assert RawNFT.model_validate(raw_nft(1, average_rating={"vec": []})).average_rating is None
    assert RawNFT.model_validate(raw_nft(1, average_rating={"vec": ["4"]})).average_rating == 4.0
    assert RawNFT.model_validate(raw_nft(1, average_rating=3.5)).average_rating == 3.5


def test_decode_nft_missing_field_is_decode_error():
    record = raw_nft(6)
    del record["rarity"]
    with pytest.raises(DecodeError) as exc:
        decode_nft(record)
    assert exc.value.nft_id == "6"
    assert exc.value.field == "rarity"


def test_decode_nft_accepts_node_dict():
    assert decode_nft(raw_nft(8, name="Hello")).name == "Hello"
