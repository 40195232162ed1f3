# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Identity registration models.

An identity is a 20-byte address derived from a secp256k1 public key. To
register it with the payments contract a client needs:

- the public key without its ``0x04`` format byte, split into two 32-byte
  halves (:class:`PublicKeyParts`);
- an ECDSA signature split into ``R``, ``S`` and ``V``
  (:class:`SignatureParts`), with ``V`` being 27 or 28 as expected by
  ``ecrecover``.

All models are frozen; each request builds its own instances.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.exceptions import ValidationException
from .encoding import RegistrationPayload, decode_bytes, encode_bytes

ADDRESS_LENGTH = 20
PUBLIC_KEY_PART_LENGTH = 32
SIGNATURE_COMPONENT_LENGTH = 32
UNCOMPRESSED_KEY_PREFIX = 0x04
RECOVERY_ID_OFFSET = 27
VALID_RECOVERY_IDS = (27, 28)

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class InvalidIdentityAddressError(ValidationException):
    """Raised when an identity address is not 20 bytes."""


class InvalidPublicKeyError(ValidationException):
    """Raised when a public key has the wrong shape."""


class InvalidSignatureError(ValidationException):
    """Raised when a signature has the wrong shape or an invalid V."""


def _as_bytes(value: Any, field: str, error: type[ValidationException]) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise error(f"{field} must be bytes", field=field, value=type(value).__name__)
    return bytes(value)


# ---------------------------------------------------------------------------
# IdentityAddress
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IdentityAddress:
    """A 20-byte identity address. Equality is byte-for-byte."""

    value: bytes

    def __post_init__(self) -> None:
        value = _as_bytes(self.value, "identity", InvalidIdentityAddressError)
        if len(value) != ADDRESS_LENGTH:
            raise InvalidIdentityAddressError(
                f"Identity address must be {ADDRESS_LENGTH} bytes, got {len(value)}",
                field="identity",
            )
        object.__setattr__(self, "value", value)

    @classmethod
    def from_hex(cls, text: str) -> IdentityAddress:
        """Parse ``0x``-prefixed (or bare) hex, in any letter case."""
        try:
            return cls(decode_bytes(text.strip(), ADDRESS_LENGTH))
        except (ValidationException, AttributeError) as e:
            raise InvalidIdentityAddressError(
                "Identity must be a hex encoded 20 byte address",
                field="id",
                value=text,
            ) from e

    @property
    def hex(self) -> str:
        """Canonical form: ``0x`` + 40 lowercase hex digits."""
        return encode_bytes(self.value)

    def __str__(self) -> str:
        return self.hex


# ---------------------------------------------------------------------------
# PublicKeyParts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PublicKeyParts:
    """Uncompressed public key body split into two 32-byte halves.

    Attributes:
        part1: High 32 bytes (the X coordinate).
        part2: Low 32 bytes (the Y coordinate).
    """

    part1: bytes
    part2: bytes

    def __post_init__(self) -> None:
        for name in ("part1", "part2"):
            value = _as_bytes(getattr(self, name), name, InvalidPublicKeyError)
            if len(value) != PUBLIC_KEY_PART_LENGTH:
                raise InvalidPublicKeyError(
                    f"Public key {name} must be {PUBLIC_KEY_PART_LENGTH} bytes, got {len(value)}",
                    field=name,
                )
            object.__setattr__(self, name, value)

    @classmethod
    def from_public_key(cls, key: bytes) -> PublicKeyParts:
        """Split a 65-byte ``0x04``-prefixed key, or a 64-byte key body."""
        key = _as_bytes(key, "public_key", InvalidPublicKeyError)
        body_length = 2 * PUBLIC_KEY_PART_LENGTH
        if len(key) == body_length + 1:
            if key[0] != UNCOMPRESSED_KEY_PREFIX:
                raise InvalidPublicKeyError(
                    f"Uncompressed public key must start with 0x04, got 0x{key[0]:02x}",
                    field="public_key",
                )
            key = key[1:]
        elif len(key) != body_length:
            raise InvalidPublicKeyError(
                f"Public key must be {body_length + 1} or {body_length} bytes, got {len(key)}",
                field="public_key",
            )
        return cls(part1=key[:PUBLIC_KEY_PART_LENGTH], part2=key[PUBLIC_KEY_PART_LENGTH:])

    def to_bytes(self) -> bytes:
        """Reassemble the 64-byte key body."""
        return self.part1 + self.part2


# ---------------------------------------------------------------------------
# SignatureParts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SignatureParts:
    """ECDSA signature decomposed for ``ecrecover``.

    ``v`` is restricted to 27 or 28. Any other value is rejected rather
    than coerced.
    """

    r: bytes
    s: bytes
    v: int

    def __post_init__(self) -> None:
        for name in ("r", "s"):
            value = _as_bytes(getattr(self, name), name, InvalidSignatureError)
            if len(value) != SIGNATURE_COMPONENT_LENGTH:
                raise InvalidSignatureError(
                    f"Signature {name.upper()} must be {SIGNATURE_COMPONENT_LENGTH} bytes, got {len(value)}",
                    field=name,
                )
            object.__setattr__(self, name, value)
        if isinstance(self.v, bool) or not isinstance(self.v, int) or self.v not in VALID_RECOVERY_IDS:
            raise InvalidSignatureError(
                "Signature V must be 27 or 28",
                field="v",
                value=self.v,
            )

    @classmethod
    def from_signature(cls, signature: bytes) -> SignatureParts:
        """Decompose a 65-byte ``R || S || V`` signature.

        The trailing byte may be a raw recovery id (0 or 1) or an
        already-shifted 27/28.
        """
        signature = _as_bytes(signature, "signature", InvalidSignatureError)
        expected = 2 * SIGNATURE_COMPONENT_LENGTH + 1
        if len(signature) != expected:
            raise InvalidSignatureError(
                f"Signature must be {expected} bytes, got {len(signature)}",
                field="signature",
            )
        v = signature[-1]
        if v in (0, 1):
            v += RECOVERY_ID_OFFSET
        return cls(
            r=signature[:SIGNATURE_COMPONENT_LENGTH],
            s=signature[SIGNATURE_COMPONENT_LENGTH : 2 * SIGNATURE_COMPONENT_LENGTH],
            v=v,
        )

    def to_bytes(self) -> bytes:
        return self.r + self.s + bytes([self.v])


# ---------------------------------------------------------------------------
# RegistrationData / RegistrationStatusResult
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RegistrationData:
    """Raw registration material returned by a data provider.

    Providers must fill both fields; the resolver rejects data where either
    is missing.
    """

    public_key: PublicKeyParts | None
    signature: SignatureParts | None

    @property
    def is_complete(self) -> bool:
        return self.public_key is not None and self.signature is not None


@dataclass(frozen=True)
class RegistrationStatusResult:
    """Registration status of one identity.

    ``payload`` is present if and only if the identity is not registered.
    """

    registered: bool
    payload: RegistrationPayload | None = None

    def __post_init__(self) -> None:
        if self.registered and self.payload is not None:
            raise ValueError("A registered identity must not carry registration data")
        if not self.registered and self.payload is None:
            raise ValueError("An unregistered identity must carry registration data")

    @classmethod
    def already_registered(cls) -> RegistrationStatusResult:
        return cls(registered=True)

    @classmethod
    def not_registered(cls, payload: RegistrationPayload) -> RegistrationStatusResult:
        return cls(registered=False, payload=payload)

    def to_dict(self) -> dict[str, Any]:
        """Wire form. ``PublicKey``/``Signature`` are omitted when registered."""
        data: dict[str, Any] = {"Registered": self.registered}
        if self.payload is not None:
            data.update(self.payload.to_dict())
        return data
