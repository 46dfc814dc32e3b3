"""
Encryption service: asymmetric and symmetric encryption.
"""

import structlog

from pgp_engine.models.params import EncryptParams, KeyData
from pgp_engine.models.results import IOMode
from pgp_engine.parsing.status import is_symmetric_marker_present
from pgp_engine.process.handle import EngineHandle
from pgp_engine.process.keyring import KeyringManager
from pgp_engine.process.protocol import Invoker
from pgp_engine.services.validation import ensure_output, require

logger = structlog.get_logger(__name__)


class EncryptionService:
    """Encrypts payloads to recipient keys or a passphrase."""

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

    def encrypt(self, data: KeyData, params: EncryptParams) -> bytes:
        """
        Encrypt a payload.

        Args:
            data: Plaintext.
            params: Recipients, or symmetric mode with a passphrase.

        Returns:
            Armored ciphertext.

        Raises:
            MissingParameterError: If recipients (asymmetric) or the
                passphrase (symmetric) are missing.
            EngineDiagnosticError: If the engine reported an error.
            ProcessInvocationError: If the engine cannot be run.
        """
        args = ["--armor", "--batch", "--always-trust"]
        input_lines: list[str] | None = None

        if params.symmetric:
            require("encrypt", passphrase=params.passphrase)
            args += ["--symmetric", "--force-mdc", "--passphrase-fd", "0"]
            input_lines = [params.passphrase]
        else:
            require("encrypt", recipients=params.recipients)
            keyring = self._keyrings.import_keys(list(params.recipients.values()))
            args += [*keyring.args, "--encrypt"]
            for recipient in params.recipients:
                args += ["--recipient", recipient]

        with self._handle.scratch_file(data) as path:
            result = self._invoker.run(
                [*args, path],
                mode=IOMode.WRITE,
                input_lines=input_lines,
                capture_output=True,
                capture_stderr=True,
            )
        ciphertext = ensure_output(result, what="ciphertext")
        logger.debug("Encrypted payload", symmetric=params.symmetric, size=len(ciphertext))
        return ciphertext

    def is_encrypted_symmetrically(self, data: KeyData) -> bool:
        """
        Check whether a message was encrypted with a passphrase.

        Tries an empty passphrase; the attempt is expected to fail and only
        the diagnostics are inspected.

        Raises:
            MissingParameterError: If no data is given.
            ProcessInvocationError: If the engine cannot be run.
        """
        require("is_encrypted_symmetrically", data=data)
        result = self._invoker.run(
            ["--decrypt", "--batch", "--passphrase", ""],
            mode=IOMode.WRITE,
            input_lines=data,
            capture_output=True,
            capture_stderr=True,
            parseable=True,
            verbose=True,
        )
        return is_symmetric_marker_present(result.stderr)
