"""
Domain models for the PGP engine.

These are immutable (frozen) dataclasses describing parameters, engine
results and parsed packet information.
"""

from pgp_engine.models.packets import (
    ANONYMOUS_BLOCK,
    HashAlgorithm,
    KeyMaterial,
    KeyPacketInfo,
    SignatureBlock,
    SignatureRecord,
)
from pgp_engine.models.params import (
    DecryptParams,
    EncryptParams,
    KeyData,
    KeyGenerationParams,
    SignatureType,
    SignParams,
    VerifyParams,
)
from pgp_engine.models.results import (
    GeneratedKeyPair,
    InvocationResult,
    IOMode,
    KeyringKind,
    KeyringRef,
    SignatureVerdict,
)

__all__ = [
    # Packets
    "ANONYMOUS_BLOCK",
    "HashAlgorithm",
    "KeyMaterial",
    "KeyPacketInfo",
    "SignatureBlock",
    "SignatureRecord",
    # Params
    "KeyData",
    "SignatureType",
    "KeyGenerationParams",
    "EncryptParams",
    "SignParams",
    "DecryptParams",
    "VerifyParams",
    # Results
    "IOMode",
    "KeyringKind",
    "KeyringRef",
    "InvocationResult",
    "SignatureVerdict",
    "GeneratedKeyPair",
]
