"""
Key service: generation, fingerprints and packet introspection.
"""

import time
from contextlib import ExitStack
from pathlib import Path

import structlog

from pgp_engine.exceptions import EngineDiagnosticError, KeyGenerationError
from pgp_engine.models.packets import KeyPacketInfo
from pgp_engine.models.params import KeyData, KeyGenerationParams
from pgp_engine.models.results import GeneratedKeyPair, IOMode, KeyringKind, KeyringRef
from pgp_engine.parsing.fingerprints import parse_fingerprints, parse_listing_keyid
from pgp_engine.parsing.packets import parse_packets
from pgp_engine.parsing.status import parse_created_fingerprint
from pgp_engine.process.handle import EngineHandle
from pgp_engine.process.keyring import KeyringManager
from pgp_engine.process.protocol import Invoker
from pgp_engine.services.validation import ensure_output, require

logger = structlog.get_logger(__name__)

KEY_PREFERENCES = (
    "AES256 AES192 AES CAST5 3DES SHA256 SHA512 SHA384 SHA224 SHA1 ZLIB BZIP2 ZIP Uncompressed"
)


class KeyService:
    """
    Key generation and key inspection.

    Example:
        keys = KeyService(handle, invoker, keyrings)
        pair = keys.generate_key(KeyGenerationParams(name=..., email=..., passphrase=...))
        info = keys.packet_info(pair.public)
    """

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

    def generate_key(self, params: KeyGenerationParams) -> GeneratedKeyPair:
        """
        Generate a primary key and an encryption subkey.

        Args:
            params: Identity, passphrase and key parameters.

        Returns:
            GeneratedKeyPair with armored public and private keys.

        Raises:
            MissingParameterError: If name, email or passphrase is missing.
            KeyGenerationError: If the engine produced no key material.
            ProcessInvocationError: If the engine cannot be run.
        """
        require(
            "generate_key",
            name=params.name,
            email=params.email,
            passphrase=params.passphrase,
        )
        flavor = self._handle.flavor

        with ExitStack() as stack:
            public_path = stack.enter_context(self._handle.scratch_file(prefix="pub-"))
            secret_path = stack.enter_context(self._handle.scratch_file(prefix="sec-"))

            result = self._invoker.run(
                ["--gen-key", "--batch", "--armor"],
                mode=IOMode.WRITE,
                input_lines=self._keygen_script(params, public_path, secret_path),
                capture_output=True,
                parseable=True,
            )

            if flavor.exports_generated_keys:
                public, private = self._export_created(result.status, params.passphrase)
            else:
                public = Path(public_path).read_bytes()
                private = Path(secret_path).read_bytes()

        if not public or not private:
            msg = "Cannot generate PGP keys"
            raise KeyGenerationError(msg)

        logger.debug("Generated key pair", key_type=params.key_type, key_length=params.key_length)
        return GeneratedKeyPair(public=public, private=private)

    def _keygen_script(
        self, params: KeyGenerationParams, public_path: str, secret_path: str
    ) -> list[str]:
        expire = "0" if not params.expire else f"seconds={params.expire - int(time.time())}"
        script = [
            f"Key-Type: {params.key_type}",
            f"Key-Length: {params.key_length}",
            f"Subkey-Type: {params.subkey_type}",
            f"Subkey-Length: {params.key_length}",
            "Subkey-Usage: encrypt",
            f"Name-Real: {params.name}",
            f"Name-Email: {params.email}",
            f"Expire-Date: {expire}",
            f"Passphrase: {params.passphrase}",
            f"Preferences: {KEY_PREFERENCES}",
            *self._handle.flavor.keygen_directives(public_path, secret_path),
        ]
        if params.comment:
            script.append(f"Name-Comment: {params.comment}")
        if params.created is not None:
            script.append(f"Creation-Date: seconds={params.created}")
        script.append("%commit")
        return script

    def _export(self, args: list[str], *, passphrase: str | None = None) -> bytes:
        result = self._invoker.run(
            args,
            mode=IOMode.WRITE if passphrase is not None else IOMode.READ,
            input_lines=[passphrase] if passphrase is not None else None,
            capture_output=True,
        )
        return result.output or b""

    def _export_created(self, status: str, passphrase: str) -> tuple[bytes, bytes]:
        # Only the key this run created; the scratch home may hold others.
        fingerprint = parse_created_fingerprint(status)
        if fingerprint is None:
            logger.warning("Engine did not report a created key")
            return b"", b""

        public = self._export(["--export", "--armor", fingerprint])
        private = self._export(
            ["--export-secret-key", "--batch", "--passphrase-fd", "0", "--armor", fingerprint],
            passphrase=passphrase,
        )
        return public, private

    def get_fingerprints_from_key(self, key: KeyData) -> dict[str, str]:
        """
        List the fingerprints of the keys in a key blob.

        Keys imported earlier into the same engine are not reported.

        Args:
            key: Armored or binary public key(s).

        Returns:
            Mapping of "0x"-prefixed key id to fingerprint, in blob order.
            Empty if the blob contained no usable key.

        Raises:
            MissingParameterError: If no key is given.
            ProcessInvocationError: If the engine cannot be run.
        """
        require("get_fingerprints_from_key", key=key)
        keyring = self._keyrings.import_keys(key)
        return self._list_fingerprints(keyring, self._key_ids(key))

    def _key_ids(self, key: KeyData) -> list[str]:
        keyids: list[str] = []
        for info in self.packet_info_multiple(key):
            material = info.public_key or info.secret_key
            keyid = (material.keyid if material else None) or info.keyid
            if not keyid:
                continue
            selector = f"0x{keyid[-16:].upper()}"
            if selector not in keyids:
                keyids.append(selector)
        return keyids

    def _list_fingerprints(self, keyring: KeyringRef, keyids: list[str]) -> dict[str, str]:
        result = self._invoker.run(
            ["--fingerprint", *keyring.args, "--with-colons", "--fixed-list-mode"],
            parseable=True,
        )
        listing = parse_fingerprints(result.stdout_text)
        return {keyid: listing[keyid] for keyid in keyids if keyid in listing}

    def packet_info_multiple(self, data: KeyData) -> list[KeyPacketInfo]:
        """
        Describe every key in a blob.

        Args:
            data: Armored or binary key(s) or signature data.

        Returns:
            One KeyPacketInfo per key, in blob order.

        Raises:
            MissingParameterError: If no data is given.
            ProcessInvocationError: If the engine cannot be run.
        """
        require("packet_info", data=data)
        with self._handle.scratch_file(data) as path:
            result = self._invoker.run(["--list-packets", path], parseable=True)

            def resolve_keyid() -> str | None:
                listing = self._invoker.run(["--with-fingerprint", path], parseable=True)
                return parse_listing_keyid(listing.stdout_text)

            return parse_packets(result.stdout_text, keyid_resolver=resolve_keyid)

    def packet_info(self, data: KeyData) -> KeyPacketInfo | None:
        """
        Describe the first key in a blob.

        Returns:
            KeyPacketInfo, or None if the blob holds no key packets.
        """
        records = self.packet_info_multiple(data)
        return records[0] if records else None

    def get_public_key_from_private_key(self, key: KeyData) -> bytes:
        """
        Extract the armored public key from a private key.

        Args:
            key: Armored private key.

        Returns:
            Armored public key of the first key in the blob.

        Raises:
            MissingParameterError: If no key is given.
            EngineDiagnosticError: If the key cannot be listed or exported.
            ProcessInvocationError: If the engine cannot be run.
        """
        require("get_public_key_from_private_key", key=key)
        self._keyrings.import_keys(key, KeyringKind.PRIVATE)
        public = self._keyrings.ensure_keyring(KeyringKind.PUBLIC)

        fingerprints = self._list_fingerprints(public, self._key_ids(key))
        if not fingerprints:
            msg = "No key found in private key data"
            raise EngineDiagnosticError(msg)
        keyid = next(iter(fingerprints))

        result = self._invoker.run(
            ["--armor", *public.args, "--export", keyid],
            capture_output=True,
            capture_stderr=True,
        )
        return ensure_output(result, what="public key")
