"""
OpenPGP operations driven through the gpg binary.

Example:
    ```python
    from pgp_engine import PgpEngine, KeyGenerationParams, SignParams, VerifyParams

    with PgpEngine() as pgp:
        pair = pgp.generate_key(
            KeyGenerationParams(name="Jane", email="jane@example.com", passphrase="secret")
        )
        signature = pgp.sign(
            b"hello",
            SignParams(pubkey=pair.public, privkey=pair.private, passphrase="secret"),
        )
        verdict = pgp.verify(b"hello", VerifyParams(pubkey=pair.public, signature=signature))
        print(verdict.diagnostic_text)
    ```
"""

from pgp_engine.client import PgpEngine
from pgp_engine.config import EngineConfig
from pgp_engine.exceptions import (
    BadSignatureError,
    DecryptionFailedError,
    EngineDiagnosticError,
    EngineInvocationError,
    KeyGenerationError,
    MissingParameterError,
    PgpEngineError,
    ProcessInvocationError,
    UnimplementedOperationError,
    UnsupportedVersionError,
)
from pgp_engine.models import (
    DecryptParams,
    EncryptParams,
    GeneratedKeyPair,
    HashAlgorithm,
    KeyGenerationParams,
    KeyPacketInfo,
    SignatureType,
    SignatureVerdict,
    SignParams,
    VerifyParams,
)

__version__ = "0.1.0"

__all__ = [
    # Main client
    "PgpEngine",
    "EngineConfig",
    # Models
    "DecryptParams",
    "EncryptParams",
    "GeneratedKeyPair",
    "HashAlgorithm",
    "KeyGenerationParams",
    "KeyPacketInfo",
    "SignParams",
    "SignatureType",
    "SignatureVerdict",
    "VerifyParams",
    # Exceptions
    "PgpEngineError",
    "MissingParameterError",
    "ProcessInvocationError",
    "EngineInvocationError",
    "EngineDiagnosticError",
    "DecryptionFailedError",
    "BadSignatureError",
    "KeyGenerationError",
    "UnsupportedVersionError",
    "UnimplementedOperationError",
]
