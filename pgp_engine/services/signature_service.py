"""
Signature service: signing, verification and signer lookup.
"""

from contextlib import ExitStack

import structlog

from pgp_engine.config import EngineConfig
from pgp_engine.exceptions import EngineDiagnosticError, UnimplementedOperationError
from pgp_engine.models.params import KeyData, SignatureType, SignParams, VerifyParams
from pgp_engine.models.results import IOMode, KeyringKind, SignatureVerdict
from pgp_engine.parsing.status import check_signature_verdict, parse_signer_key_id
from pgp_engine.process.handle import EngineHandle
from pgp_engine.process.keyring import KeyringManager
from pgp_engine.process.protocol import Invoker
from pgp_engine.services.validation import ensure_output, require

logger = structlog.get_logger(__name__)


def _signature_type(value: SignatureType | str, *, operation: str) -> SignatureType:
    try:
        return SignatureType(value)
    except ValueError:
        msg = f"Unsupported signature type: {value}"
        raise UnimplementedOperationError(msg, operation=operation) from None


class SignatureService:
    """Creates and checks signatures."""

    def __init__(
        self,
        handle: EngineHandle,
        invoker: Invoker,
        keyrings: KeyringManager,
        config: EngineConfig | None = None,
    ) -> None:
        """
        Args:
            handle: Engine handle owning the scratch home.
            invoker: Invoker used to run the engine.
            keyrings: Scratch keyrings of the handle.
            config: Supplies the default verification charset.
        """
        self._handle = handle
        self._invoker = invoker
        self._keyrings = keyrings
        self._config = config or EngineConfig()

    def sign(self, data: KeyData, params: SignParams) -> bytes:
        """
        Sign a payload.

        Args:
            data: Content to sign.
            params: Signer keys, passphrase and signature type.

        Returns:
            Armored detached signature, or the cleartext-signed message.

        Raises:
            MissingParameterError: If a key or the passphrase is missing.
            UnimplementedOperationError: For signature types other than
                detached and cleartext.
            EngineDiagnosticError: If the engine reported an error.
            ProcessInvocationError: If the engine cannot be run.
        """
        require(
            "sign",
            pubkey=params.pubkey,
            privkey=params.privkey,
            passphrase=params.passphrase,
        )
        match _signature_type(params.sigtype, operation="sign"):
            case SignatureType.DETACHED:
                mode_flag = "--detach-sign"
            case SignatureType.CLEARTEXT:
                mode_flag = "--clearsign"
            case other:
                msg = f"Signing with signature type {other} is not supported"
                raise UnimplementedOperationError(msg, operation="sign")

        public = self._keyrings.import_keys(params.pubkey)
        private = self._keyrings.import_keys(params.privkey, KeyringKind.PRIVATE)

        with self._handle.scratch_file(data) as path:
            result = self._invoker.run(
                [
                    "--armor",
                    "--batch",
                    "--passphrase-fd",
                    "0",
                    *self._keyrings.keyring_args(private),
                    *self._keyrings.keyring_args(public),
                    mode_flag,
                    path,
                ],
                mode=IOMode.WRITE,
                input_lines=[params.passphrase],
                capture_output=True,
                capture_stderr=True,
            )
        signature = ensure_output(result, what="signature")
        logger.debug("Signed payload", sigtype=str(params.sigtype))
        return signature

    def verify(self, data: KeyData, params: VerifyParams) -> SignatureVerdict:
        """
        Verify a detached or inline signature.

        Args:
            data: Signed content (detached) or the signed message (inline).
            params: Signer's public key, signature type and signature.

        Returns:
            SignatureVerdict with no message and the engine diagnostics.

        Raises:
            MissingParameterError: If the public key, or the detached
                signature, is missing.
            BadSignatureError: If the engine reported a bad signature.
            UnimplementedOperationError: For unknown signature types.
            ProcessInvocationError: If the engine cannot be run.
        """
        require("verify", pubkey=params.pubkey)
        sigtype = _signature_type(params.sigtype, operation="verify")
        if sigtype is SignatureType.DETACHED:
            require("verify", signature=params.signature)

        keyring = self._keyrings.import_keys(params.pubkey)
        charset = params.charset or self._config.default_charset
        args = [
            "--armor",
            "--always-trust",
            "--batch",
            "--charset",
            charset,
            *keyring.args,
            "--verify",
        ]

        with ExitStack() as stack:
            if sigtype is SignatureType.DETACHED:
                args.append(stack.enter_context(self._handle.scratch_file(params.signature)))
            args.append(stack.enter_context(self._handle.scratch_file(data)))

            result = self._invoker.run(
                args,
                capture_output=True,
                capture_stderr=True,
                parseable=True,
            )

        return check_signature_verdict(result.stderr or "")

    def get_signers_key_id(self, data: KeyData) -> str:
        """
        Read the short key id of the key that signed a message.

        The signer's key need not be known; the engine names it even when
        it cannot check the signature.

        Returns:
            8 hex digit key id.

        Raises:
            MissingParameterError: If no data is given.
            EngineDiagnosticError: If no signer can be read.
            ProcessInvocationError: If the engine cannot be run.
        """
        require("get_signers_key_id", data=data)
        with self._handle.scratch_file(data) as path:
            result = self._invoker.run(
                ["--verify", path],
                capture_output=True,
                capture_stderr=True,
                parseable=True,
            )

        keyid = parse_signer_key_id(result.stderr)
        if keyid is None:
            msg = "Cannot read PGP key ID"
            raise EngineDiagnosticError(msg, returncode=result.returncode)
        return keyid
