"""
Decryption service.
"""

import structlog

from pgp_engine.exceptions import DecryptionFailedError
from pgp_engine.models.params import DecryptParams, KeyData
from pgp_engine.models.results import IOMode, KeyringKind, SignatureVerdict
from pgp_engine.parsing.status import (
    DECRYPTION_OKAY,
    check_signature_verdict,
    clean_diagnostic,
    has_status_token,
)
from pgp_engine.process.handle import EngineHandle
from pgp_engine.process.keyring import KeyringManager
from pgp_engine.process.protocol import Invoker
from pgp_engine.services.validation import require

logger = structlog.get_logger(__name__)


class DecryptionService:
    """Decrypts messages and checks any embedded signature."""

    def __init__(self, handle: EngineHandle, invoker: Invoker, keyrings: KeyringManager) -> None:
        """
        Args:
            handle: Engine handle owning the scratch home.
            invoker: Invoker used to run the engine.
            keyrings: Scratch keyrings of the handle.
        """
        self._handle = handle
        self._invoker = invoker
        self._keyrings = keyrings

    def decrypt(self, data: KeyData, params: DecryptParams) -> SignatureVerdict:
        """
        Decrypt a message.

        Success is read from the status file, so diagnostics such as
        signature details do not fail a decryption that went through.

        Args:
            data: Armored ciphertext.
            params: Keys and passphrase.

        Returns:
            SignatureVerdict with the plaintext and the engine diagnostics.

        Raises:
            MissingParameterError: If the passphrase is missing and
                no_passphrase is not set.
            DecryptionFailedError: If the engine did not report success.
            BadSignatureError: If an embedded signature is bad.
            ProcessInvocationError: If the engine cannot be run.
        """
        if not params.no_passphrase:
            require("decrypt", passphrase=params.passphrase)

        args = ["--always-trust", "--armor", "--batch"]
        if not params.no_passphrase:
            args += ["--passphrase-fd", "0"]
        if params.pubkey or params.privkey:
            private = self._keyrings.import_keys(params.privkey, KeyringKind.PRIVATE)
            public = self._keyrings.import_keys(params.pubkey)
            args += [*self._keyrings.keyring_args(private), *self._keyrings.keyring_args(public)]

        with self._handle.scratch_file(data) as path:
            result = self._invoker.run(
                [*args, "--decrypt", path],
                mode=IOMode.READ if params.no_passphrase else IOMode.WRITE,
                input_lines=None if params.no_passphrase else [params.passphrase],
                capture_output=True,
                capture_stderr=True,
                parseable=True,
            )

        if not has_status_token(result.status, DECRYPTION_OKAY):
            raise DecryptionFailedError(
                clean_diagnostic(result.stderr) or "Decryption failed",
                returncode=result.returncode,
            )

        logger.debug("Decrypted message")
        return check_signature_verdict(result.stderr or "", result.output or b"")
