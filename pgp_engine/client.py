"""
PGP engine client facade.

This is the main entry point for users of the library. It wires the engine
handle, the invoker, the scratch keyrings and the operation services
together behind one object.
"""

import subprocess
from typing import Self

import structlog

from pgp_engine.config import EngineConfig
from pgp_engine.models.packets import KeyPacketInfo
from pgp_engine.models.params import (
    DecryptParams,
    EncryptParams,
    KeyData,
    KeyGenerationParams,
    SignParams,
    VerifyParams,
)
from pgp_engine.models.results import GeneratedKeyPair, SignatureVerdict
from pgp_engine.process.handle import EngineHandle
from pgp_engine.process.invoker import ProcessInvoker
from pgp_engine.process.keyring import KeyringManager
from pgp_engine.process.spawn import Runner
from pgp_engine.services.decryption_service import DecryptionService
from pgp_engine.services.encryption_service import EncryptionService
from pgp_engine.services.key_service import KeyService
from pgp_engine.services.signature_service import SignatureService

logger = structlog.get_logger(__name__)


class PgpEngine:
    """
    Synchronous client for OpenPGP operations backed by the gpg binary.

    The engine is started lazily on first use. Each instance owns a private
    scratch home holding its keyrings; close() removes it. An instance serves
    one operation sequence at a time, separate instances are independent.

    Example:
        ```python
        with PgpEngine() as pgp:
            pair = pgp.generate_key(
                KeyGenerationParams(name="Jane", email="jane@example.com", passphrase="secret")
            )
            ciphertext = pgp.encrypt(
                b"hello", EncryptParams(recipients={"jane@example.com": pair.public})
            )
            verdict = pgp.decrypt(
                ciphertext,
                DecryptParams(passphrase="secret", pubkey=pair.public, privkey=pair.private),
            )
        ```
    """

    def __init__(self, config: EngineConfig | None = None, *, runner: Runner = subprocess.run) -> None:
        """
        Args:
            config: Engine configuration. Uses defaults if not provided.
            runner: subprocess.run or a compatible fake for testing.
        """
        self._config = config or EngineConfig()
        self._runner = runner

        self._handle: EngineHandle | None = None
        self._keys: KeyService | None = None
        self._encryption: EncryptionService | None = None
        self._signatures: SignatureService | None = None
        self._decryption: DecryptionService | None = None

    def __enter__(self) -> Self:
        self._ensure_initialized()
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def _ensure_initialized(self) -> EngineHandle:
        """Detect the engine and create the scratch home on first use."""
        if self._handle is not None:
            return self._handle

        handle = EngineHandle.create(self._config, runner=self._runner)
        invoker = ProcessInvoker(
            handle,
            timeout=self._config.timeout,
            verbose=self._config.verbose,
            runner=self._runner,
        )
        keyrings = KeyringManager(handle, invoker)

        self._keys = KeyService(handle, invoker, keyrings)
        self._encryption = EncryptionService(handle, invoker, keyrings)
        self._signatures = SignatureService(handle, invoker, keyrings, self._config)
        self._decryption = DecryptionService(handle, invoker, keyrings)
        self._handle = handle
        logger.debug("Engine client initialized")
        return handle

    def close(self) -> None:
        """Remove the scratch home and drop the services."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        self._keys = None
        self._encryption = None
        self._signatures = None
        self._decryption = None

    @property
    def handle(self) -> EngineHandle:
        """The engine handle, started if needed."""
        return self._ensure_initialized()

    @property
    def keys(self) -> KeyService:
        self._ensure_initialized()
        if self._keys is None:
            raise RuntimeError("Client not initialized")
        return self._keys

    @property
    def encryption(self) -> EncryptionService:
        self._ensure_initialized()
        if self._encryption is None:
            raise RuntimeError("Client not initialized")
        return self._encryption

    @property
    def signatures(self) -> SignatureService:
        self._ensure_initialized()
        if self._signatures is None:
            raise RuntimeError("Client not initialized")
        return self._signatures

    @property
    def decryption(self) -> DecryptionService:
        self._ensure_initialized()
        if self._decryption is None:
            raise RuntimeError("Client not initialized")
        return self._decryption

    # Key operations

    def generate_key(self, params: KeyGenerationParams) -> GeneratedKeyPair:
        """Generate a key pair. See KeyService.generate_key."""
        return self.keys.generate_key(params)

    def get_fingerprints_from_key(self, key: KeyData) -> dict[str, str]:
        """Map key ids to fingerprints. See KeyService.get_fingerprints_from_key."""
        return self.keys.get_fingerprints_from_key(key)

    def packet_info(self, data: KeyData) -> KeyPacketInfo | None:
        return self.keys.packet_info(data)

    def packet_info_multiple(self, data: KeyData) -> list[KeyPacketInfo]:
        return self.keys.packet_info_multiple(data)

    def get_public_key_from_private_key(self, key: KeyData) -> bytes:
        return self.keys.get_public_key_from_private_key(key)

    # Payload operations

    def encrypt(self, data: KeyData, params: EncryptParams) -> bytes:
        """Encrypt a payload. See EncryptionService.encrypt."""
        return self.encryption.encrypt(data, params)

    def is_encrypted_symmetrically(self, data: KeyData) -> bool:
        return self.encryption.is_encrypted_symmetrically(data)

    def sign(self, data: KeyData, params: SignParams) -> bytes:
        """Sign a payload. See SignatureService.sign."""
        return self.signatures.sign(data, params)

    def verify(self, data: KeyData, params: VerifyParams) -> SignatureVerdict:
        """Verify a signature. See SignatureService.verify."""
        return self.signatures.verify(data, params)

    def get_signers_key_id(self, data: KeyData) -> str:
        return self.signatures.get_signers_key_id(data)

    def decrypt(self, data: KeyData, params: DecryptParams) -> SignatureVerdict:
        """Decrypt a message. See DecryptionService.decrypt."""
        return self.decryption.decrypt(data, params)
