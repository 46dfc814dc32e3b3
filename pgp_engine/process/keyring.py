"""
Ephemeral keyrings inside the engine's scratch home.
"""

from collections.abc import Iterable

import structlog

from pgp_engine.models.params import KeyData
from pgp_engine.models.results import IOMode, KeyringKind, KeyringRef
from pgp_engine.process.handle import EngineHandle
from pgp_engine.process.protocol import Invoker

logger = structlog.get_logger(__name__)


def _as_key_list(keys: KeyData | Iterable[KeyData] | None) -> list[KeyData]:
    if keys is None:
        return []
    if isinstance(keys, (str, bytes)):
        return [keys] if keys else []
    return [key for key in keys if key]


class KeyringManager:
    """
    Creates and fills the scratch public and private keyrings.

    At most one keyring of each kind exists per handle; imports append to it.
    The keyrings are a cache for the current operation sequence, not a key
    store.
    """

    def __init__(self, handle: EngineHandle, invoker: Invoker) -> None:
        """
        Args:
            handle: Engine handle owning the scratch home.
            invoker: Invoker used to run imports.
        """
        self._handle = handle
        self._invoker = invoker
        self._keyrings: dict[KeyringKind, KeyringRef] = {}

    def ensure_keyring(self, kind: KeyringKind | str = KeyringKind.PUBLIC) -> KeyringRef:
        """
        Get the keyring of a kind, creating an empty one on first use.

        Args:
            kind: "public" or "private".

        Returns:
            Reference usable as command-line arguments.
        """
        kind = KeyringKind(kind.lower())
        if kind not in self._keyrings:
            path = self._handle.scratch_path(prefix=f"{kind}-", suffix=".gpg")
            self._keyrings[kind] = KeyringRef(kind=kind, path=path)
            logger.debug("Created keyring", kind=str(kind))
        return self._keyrings[kind]

    def import_keys(
        self,
        keys: KeyData | Iterable[KeyData] | None,
        kind: KeyringKind | str = KeyringKind.PUBLIC,
    ) -> KeyringRef:
        """
        Import key blobs into the keyring of a kind.

        Private keys are imported into the public keyring as well: GnuPG 2.1
        and later ignore --secret-keyring, so the public keyring must also
        carry them for later invocations to find the key. Engines without a
        separate secret keyring get that single import only.

        Args:
            keys: One armored/binary key blob or several.
            kind: "public" or "private".

        Returns:
            Reference to the keyring the keys went into. Importing nothing
            spawns no process and still returns a valid reference.

        Raises:
            ProcessInvocationError: If the engine cannot be run.
        """
        kind = KeyringKind(kind.lower())
        blobs = _as_key_list(keys)

        if kind == KeyringKind.PRIVATE:
            self.import_keys(blobs, KeyringKind.PUBLIC)

        keyring = self.ensure_keyring(kind)
        args = self.keyring_args(keyring)
        if not blobs or not args:
            return keyring

        self._invoker.run(
            ["--allow-secret-key-import", "--batch", "--fast-import", *args],
            mode=IOMode.WRITE,
            input_lines=blobs,
        )
        logger.debug("Imported keys", kind=str(kind), count=len(blobs))
        return keyring

    def keyring_args(self, keyring: KeyringRef) -> tuple[str, ...]:
        """
        Command-line flags selecting a keyring on this engine.

        Empty for the private keyring on engines that keep secret keys in
        gpg-agent.
        """
        return self._handle.flavor.keyring_args(keyring)
