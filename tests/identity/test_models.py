"""Tests for identity registration models."""

from __future__ import annotations

import pytest

from idregistry.core.exceptions import ValidationException
from idregistry.identity.encoding import EncodedPublicKey, EncodedSignature, RegistrationPayload
from idregistry.identity.models import (
    IdentityAddress,
    InvalidIdentityAddressError,
    InvalidPublicKeyError,
    InvalidSignatureError,
    PublicKeyParts,
    RegistrationData,
    RegistrationStatusResult,
    SignatureParts,
)


@pytest.fixture
def payload() -> RegistrationPayload:
    return RegistrationPayload(
        public_key=EncodedPublicKey(part1="0x" + "00" * 32, part2="0x" + "01" * 32),
        signature=EncodedSignature(r="0x" + "aa" * 32, s="0x" + "bb" * 32, v=27),
    )


# ---------------------------------------------------------------------------
# IdentityAddress
# ---------------------------------------------------------------------------


class TestIdentityAddress:
    def test_canonical_hex(self):
        identity = IdentityAddress(bytes(19) + b"\x01")
        assert identity.hex == "0x0000000000000000000000000000000000000001"
        assert str(identity) == identity.hex

    def test_equality_is_bytewise(self):
        assert IdentityAddress(b"\x01" * 20) == IdentityAddress(bytearray(b"\x01" * 20))
        assert IdentityAddress(b"\x01" * 20) != IdentityAddress(b"\x02" * 20)

    def test_hashable(self):
        assert len({IdentityAddress(b"\x01" * 20), IdentityAddress(b"\x01" * 20)}) == 1

    def test_wrong_length_rejected(self):
        with pytest.raises(InvalidIdentityAddressError):
            IdentityAddress(b"\x01" * 19)

    def test_non_bytes_rejected(self):
        with pytest.raises(InvalidIdentityAddressError):
            IdentityAddress("0x" + "01" * 20)  # type: ignore[arg-type]

    def test_from_hex_prefixed(self):
        identity = IdentityAddress.from_hex("0x0000000000000000000000000000000000000001")
        assert identity.value == bytes(19) + b"\x01"

    def test_from_hex_bare_and_mixed_case(self):
        checksummed = "0x617ad5e514e8117Bb6F18E68FA65cc479483df88"
        assert IdentityAddress.from_hex(checksummed) == IdentityAddress.from_hex(checksummed[2:].lower())
        assert IdentityAddress.from_hex(checksummed).hex == checksummed.lower()

    @pytest.mark.parametrize("text", ["", "0x", "0x01", "0x" + "zz" * 20, "0x" + "01" * 21, "not-an-address"])
    def test_from_hex_rejects_malformed(self, text):
        with pytest.raises(InvalidIdentityAddressError):
            IdentityAddress.from_hex(text)

    def test_error_is_validation_exception(self):
        with pytest.raises(ValidationException):
            IdentityAddress.from_hex("0x01")

    def test_immutable(self):
        identity = IdentityAddress(bytes(20))
        with pytest.raises(AttributeError):
            identity.value = b"\x01" * 20  # type: ignore[misc]


# ---------------------------------------------------------------------------
# PublicKeyParts
# ---------------------------------------------------------------------------


class TestPublicKeyParts:
    def test_from_uncompressed_key_strips_prefix(self):
        body = bytes(range(64))
        parts = PublicKeyParts.from_public_key(b"\x04" + body)
        assert parts.part1 == body[:32]
        assert parts.part2 == body[32:]

    def test_from_key_body(self):
        body = b"\x11" * 32 + b"\x22" * 32
        parts = PublicKeyParts.from_public_key(body)
        assert parts.part1 == b"\x11" * 32
        assert parts.part2 == b"\x22" * 32

    def test_concatenation_reconstructs_body(self):
        body = bytes(range(1, 65))
        assert PublicKeyParts.from_public_key(b"\x04" + body).to_bytes() == body

    def test_wrong_prefix_rejected(self):
        with pytest.raises(InvalidPublicKeyError, match="0x04"):
            PublicKeyParts.from_public_key(b"\x02" + bytes(64))

    def test_compressed_key_rejected(self):
        with pytest.raises(InvalidPublicKeyError):
            PublicKeyParts.from_public_key(b"\x02" + bytes(32))

    def test_part_length_enforced(self):
        with pytest.raises(InvalidPublicKeyError, match="part2"):
            PublicKeyParts(part1=bytes(32), part2=bytes(31))


# ---------------------------------------------------------------------------
# SignatureParts
# ---------------------------------------------------------------------------


class TestSignatureParts:
    @pytest.mark.parametrize("v", [27, 28])
    def test_valid_recovery_ids(self, v):
        assert SignatureParts(r=bytes(32), s=bytes(32), v=v).v == v

    @pytest.mark.parametrize("v", [0, 1, 26, 29, 255, -1])
    def test_invalid_recovery_ids_rejected(self, v):
        with pytest.raises(InvalidSignatureError, match="27 or 28"):
            SignatureParts(r=bytes(32), s=bytes(32), v=v)

    def test_bool_v_rejected(self):
        with pytest.raises(InvalidSignatureError):
            SignatureParts(r=bytes(32), s=bytes(32), v=True)

    def test_component_length_enforced(self):
        with pytest.raises(InvalidSignatureError, match="R must be 32 bytes"):
            SignatureParts(r=bytes(33), s=bytes(32), v=27)

    @pytest.mark.parametrize("raw_v, expected", [(0, 27), (1, 28), (27, 27), (28, 28)])
    def test_from_signature_shifts_recovery_id(self, raw_v, expected):
        signature = b"\xaa" * 32 + b"\xbb" * 32 + bytes([raw_v])
        parts = SignatureParts.from_signature(signature)
        assert parts.r == b"\xaa" * 32
        assert parts.s == b"\xbb" * 32
        assert parts.v == expected

    @pytest.mark.parametrize("raw_v", [2, 26, 29, 35])
    def test_from_signature_rejects_other_v(self, raw_v):
        with pytest.raises(InvalidSignatureError):
            SignatureParts.from_signature(bytes(64) + bytes([raw_v]))

    def test_from_signature_length_enforced(self):
        with pytest.raises(InvalidSignatureError, match="65 bytes"):
            SignatureParts.from_signature(bytes(64))

    def test_to_bytes(self):
        parts = SignatureParts(r=b"\x01" * 32, s=b"\x02" * 32, v=28)
        assert parts.to_bytes() == b"\x01" * 32 + b"\x02" * 32 + b"\x1c"


# ---------------------------------------------------------------------------
# RegistrationData / RegistrationStatusResult
# ---------------------------------------------------------------------------


class TestRegistrationData:
    def test_complete(self, sample_registration_data):
        assert sample_registration_data.is_complete

    def test_incomplete(self, sample_registration_data):
        data = RegistrationData(public_key=None, signature=sample_registration_data.signature)
        assert not data.is_complete


class TestRegistrationStatusResult:
    def test_registered_has_no_payload(self):
        result = RegistrationStatusResult.already_registered()
        assert result.registered is True
        assert result.payload is None

    def test_registered_wire_form_omits_fields(self):
        assert RegistrationStatusResult.already_registered().to_dict() == {"Registered": True}

    def test_unregistered_wire_form(self, payload):
        data = RegistrationStatusResult.not_registered(payload).to_dict()
        assert data == {
            "Registered": False,
            "PublicKey": {"Part1": "0x" + "00" * 32, "Part2": "0x" + "01" * 32},
            "Signature": {"R": "0x" + "aa" * 32, "S": "0x" + "bb" * 32, "V": 27},
        }

    def test_registered_with_payload_rejected(self, payload):
        with pytest.raises(ValueError):
            RegistrationStatusResult(registered=True, payload=payload)

    def test_unregistered_without_payload_rejected(self):
        with pytest.raises(ValueError):
            RegistrationStatusResult(registered=False)
