"""Tests for the canonical hex wire encoding."""

from __future__ import annotations

import pytest

from idregistry.identity.encoding import (
    EncodedPublicKey,
    EncodedSignature,
    EncodingError,
    RegistrationPayload,
    decode_bytes,
    encode_bytes,
    encode_registration_data,
)
from idregistry.identity.models import RegistrationData, SignatureParts


class TestEncodeBytes:
    def test_prefix_and_lowercase(self):
        assert encode_bytes(b"\xab\xcd") == "0xabcd"

    def test_leading_zero_bytes_preserved(self):
        encoded = encode_bytes(bytes(31) + b"\x01")
        assert encoded == "0x" + "00" * 31 + "01"
        assert len(encoded) == 2 + 64

    def test_all_zero_array(self):
        assert encode_bytes(bytes(32)) == "0x" + "0" * 64

    def test_empty(self):
        assert encode_bytes(b"") == "0x"

    def test_bytearray_accepted(self):
        assert encode_bytes(bytearray(b"\x01\x02")) == "0x0102"


class TestDecodeBytes:
    @pytest.mark.parametrize(
        "data",
        [bytes(32), b"\xff" * 32, bytes(31) + b"\x01", bytes(range(32))],
        ids=["zeros", "ones", "leading-zeros", "sequence"],
    )
    def test_round_trip_32_bytes(self, data):
        assert decode_bytes(encode_bytes(data), 32) == data

    def test_prefix_optional(self):
        assert decode_bytes("0a0b") == b"\x0a\x0b"

    def test_uppercase_accepted(self):
        assert decode_bytes("0XABCD") == b"\xab\xcd"

    def test_odd_length_rejected(self):
        with pytest.raises(EncodingError, match="odd"):
            decode_bytes("0xabc")

    def test_non_hex_rejected(self):
        with pytest.raises(EncodingError):
            decode_bytes("0xzz")

    def test_length_mismatch_rejected(self):
        with pytest.raises(EncodingError, match="Expected 32 bytes, got 31"):
            decode_bytes(encode_bytes(bytes(31)), 32)

    def test_non_string_rejected(self):
        with pytest.raises(EncodingError):
            decode_bytes(b"0x00")  # type: ignore[arg-type]


class TestEncodeRegistrationData:
    def test_encodes_example_scenario(self, sample_registration_data):
        payload = encode_registration_data(sample_registration_data)

        assert payload == RegistrationPayload(
            public_key=EncodedPublicKey(part1="0x" + "00" * 32, part2="0x" + "01" * 32),
            signature=EncodedSignature(r="0x" + "aa" * 32, s="0x" + "bb" * 32, v=27),
        )

    def test_v_stays_integer(self, sample_registration_data):
        payload = encode_registration_data(sample_registration_data)
        assert payload.signature.to_dict()["V"] == 27
        assert isinstance(payload.signature.to_dict()["V"], int)

    def test_wire_keys(self, sample_registration_data):
        data = encode_registration_data(sample_registration_data).to_dict()
        assert set(data) == {"PublicKey", "Signature"}
        assert set(data["PublicKey"]) == {"Part1", "Part2"}
        assert set(data["Signature"]) == {"R", "S", "V"}

    def test_incomplete_data_rejected(self):
        data = RegistrationData(
            public_key=None,
            signature=SignatureParts(r=bytes(32), s=bytes(32), v=28),
        )
        with pytest.raises(EncodingError, match="incomplete"):
            encode_registration_data(data)
