# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""idregistry - identity registration status for the payments contract.

Answers whether an identity is registered with the on-chain payments
contract and, when it is not, returns the public key parts and signature a
client needs to build the registration transaction.

Architecture:
  IdentityRegistry (on-chain status)
    → RegistrationDataProvider (key + signature, only when unregistered)
    → RegistrationStatusResolver (ordering, completeness, hex encoding)
    → HTTP: GET /identities/{id}/registration

Entry point: ``idregistry-server``
"""

__version__ = "0.1.0"
