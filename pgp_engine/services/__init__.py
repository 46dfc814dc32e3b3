"""
Operation services.

Each service composes the keyring manager, the invoker and the parsers into
request/response operations:
- KeyService: key generation, fingerprints, packet info
- EncryptionService: encryption and symmetric detection
- SignatureService: signing, verification, signer lookup
- DecryptionService: decryption with embedded signature check
"""

from pgp_engine.services.decryption_service import DecryptionService
from pgp_engine.services.encryption_service import EncryptionService
from pgp_engine.services.key_service import KeyService
from pgp_engine.services.signature_service import SignatureService

__all__ = [
    "DecryptionService",
    "EncryptionService",
    "KeyService",
    "SignatureService",
]
