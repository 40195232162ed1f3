"""Identity registration for the payments contract.

Key concepts:
- **IdentityAddress**: 20-byte address of an identity.
- **PublicKeyParts / SignatureParts**: raw registration material.
- **IdentityRegistry**: answers whether an identity is registered.
- **RegistrationDataProvider**: produces registration material.
- **RegistrationStatusResolver**: combines both into one result with the
  material hex-encoded for the wire.
"""

from idregistry.identity.encoding import (
    EncodedPublicKey,
    EncodedSignature,
    EncodingError,
    RegistrationPayload,
    decode_bytes,
    encode_bytes,
)
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
from idregistry.identity.registration_data import (
    IdentityNotFoundError,
    InMemoryKeystore,
    KeystoreRegistrationDataProvider,
    RegistrationDataProvider,
)
from idregistry.identity.registry import (
    ContractIdentityRegistry,
    IdentityRegistry,
    InMemoryIdentityRegistry,
)
from idregistry.identity.resolver import (
    DataProvisioningFailed,
    IncompleteRegistrationData,
    RegistrationResolutionError,
    RegistrationStatusResolver,
    RegistryQueryFailed,
)

__all__ = [
    "ContractIdentityRegistry",
    "DataProvisioningFailed",
    "EncodedPublicKey",
    "EncodedSignature",
    "EncodingError",
    "IdentityAddress",
    "IdentityNotFoundError",
    "IdentityRegistry",
    "InMemoryIdentityRegistry",
    "InMemoryKeystore",
    "IncompleteRegistrationData",
    "InvalidIdentityAddressError",
    "InvalidPublicKeyError",
    "InvalidSignatureError",
    "KeystoreRegistrationDataProvider",
    "PublicKeyParts",
    "RegistrationData",
    "RegistrationDataProvider",
    "RegistrationPayload",
    "RegistrationResolutionError",
    "RegistrationStatusResolver",
    "RegistrationStatusResult",
    "RegistryQueryFailed",
    "SignatureParts",
    "decode_bytes",
    "encode_bytes",
]
