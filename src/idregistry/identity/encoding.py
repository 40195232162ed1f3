# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Canonical hex wire encoding for registration material.

Every fixed-width byte field is rendered as ``0x`` followed by exactly
``2 * len(data)`` lowercase hex digits. Leading zero bytes are never trimmed,
so a field always decodes back to the same number of bytes. The recovery
identifier ``V`` is not hex-encoded; it travels as a plain integer.
"""

from __future__ import annotations

import binascii
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..core.exceptions import ValidationException

if TYPE_CHECKING:
    from .models import PublicKeyParts, RegistrationData, SignatureParts

HEX_PREFIX = "0x"


class EncodingError(ValidationException):
    """Raised when a hex string cannot be decoded to the expected bytes."""


def encode_bytes(data: bytes) -> str:
    """Encode bytes as a ``0x``-prefixed, lowercase, zero-preserving hex string."""
    return HEX_PREFIX + bytes(data).hex()


def decode_bytes(text: str, length: int | None = None) -> bytes:
    """Decode a hex string produced by :func:`encode_bytes`.

    The ``0x`` prefix is optional and digits may be upper or lower case.

    Args:
        text: Hex string.
        length: Expected number of decoded bytes, if the field is fixed-width.

    Raises:
        EncodingError: On non-hex input, an odd digit count, or a length mismatch.
    """
    if not isinstance(text, str):
        raise EncodingError("Hex value must be a string", value=text)

    digits = text[2:] if text[:2].lower() == HEX_PREFIX else text
    if len(digits) % 2:
        raise EncodingError("Hex value has an odd number of digits", value=text)
    try:
        data = binascii.unhexlify(digits)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid hex value: {e}", value=text) from e

    if length is not None and len(data) != length:
        raise EncodingError(
            f"Expected {length} bytes, got {len(data)}",
            value=text,
        )
    return data


# ---------------------------------------------------------------------------
# Encoded (wire) forms
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EncodedPublicKey:
    """Public key parts in wire form."""

    part1: str
    part2: str

    def to_dict(self) -> dict[str, Any]:
        return {"Part1": self.part1, "Part2": self.part2}


@dataclass(frozen=True)
class EncodedSignature:
    """Signature parts in wire form. ``v`` stays an integer."""

    r: str
    s: str
    v: int

    def to_dict(self) -> dict[str, Any]:
        return {"R": self.r, "S": self.s, "V": self.v}


@dataclass(frozen=True)
class RegistrationPayload:
    """Encoded public key and signature, always carried together."""

    public_key: EncodedPublicKey
    signature: EncodedSignature

    def to_dict(self) -> dict[str, Any]:
        return {
            "PublicKey": self.public_key.to_dict(),
            "Signature": self.signature.to_dict(),
        }


def encode_public_key(parts: PublicKeyParts) -> EncodedPublicKey:
    return EncodedPublicKey(
        part1=encode_bytes(parts.part1),
        part2=encode_bytes(parts.part2),
    )


def encode_signature(parts: SignatureParts) -> EncodedSignature:
    return EncodedSignature(
        r=encode_bytes(parts.r),
        s=encode_bytes(parts.s),
        v=int(parts.v),
    )


def encode_registration_data(data: RegistrationData) -> RegistrationPayload:
    """Encode complete registration data into its wire form.

    Raises:
        EncodingError: If the public key or the signature is missing.
    """
    if data.public_key is None or data.signature is None:
        raise EncodingError("Registration data is incomplete")
    return RegistrationPayload(
        public_key=encode_public_key(data.public_key),
        signature=encode_signature(data.signature),
    )
