"""
Engine generation strategies.

GnuPG 2.1 moved secret keys into gpg-agent and made the pinentry mode
explicit. The flavor is picked once from the detected version; everything
version-specific lives here.
"""

from pathlib import Path

import structlog

from pgp_engine.exceptions import UnsupportedVersionError
from pgp_engine.models.results import KeyringKind, KeyringRef
from pgp_engine.parsing.version import EngineVersion, format_version
from pgp_engine.process.protocol import InvocationFlavor

logger = structlog.get_logger(__name__)

MODERN_VERSION: EngineVersion = (2, 1, 0)
LOOPBACK_MIN_VERSION: EngineVersion = (2, 1, 12)

AGENT_CONF = "gpg-agent.conf"


class LegacyFlavor:
    """GnuPG before 2.1: separate secret keyring, keygen writes keyring files."""

    modern = False
    exports_generated_keys = False

    def baseline_args(self) -> tuple[str, ...]:
        return ()

    def prepare_home(self, home: Path) -> None:
        pass

    def keygen_directives(self, public_path: str, secret_path: str) -> list[str]:
        return [f"%secring {secret_path}", f"%pubring {public_path}"]

    def keyring_args(self, keyring: KeyringRef) -> tuple[str, ...]:
        return keyring.args


class LoopbackFlavor:
    """GnuPG 2.1.12 and later: loopback pinentry, keys exported after keygen."""

    modern = True
    exports_generated_keys = True

    def baseline_args(self) -> tuple[str, ...]:
        return ("--pinentry-mode", "loopback")

    def prepare_home(self, home: Path) -> None:
        (home / AGENT_CONF).write_text("allow-loopback-pinentry")

    def keygen_directives(self, public_path: str, secret_path: str) -> list[str]:
        # %pubring/%secring are gone since 2.1; keys are exported instead.
        return []

    def keyring_args(self, keyring: KeyringRef) -> tuple[str, ...]:
        # --secret-keyring is obsolete; secret keys live in gpg-agent.
        if keyring.kind is KeyringKind.PRIVATE:
            return ()
        return keyring.args


def select_flavor(version: EngineVersion | None) -> InvocationFlavor:
    """
    Pick the invocation flavor for an engine version.

    Args:
        version: Detected version, or None if it could not be parsed.

    Returns:
        The flavor to use for every invocation of this engine.

    Raises:
        UnsupportedVersionError: For 2.1.0 up to 2.1.11, which cannot do
            loopback pinentry.
    """
    if version is None:
        logger.warning("Could not detect engine version, assuming legacy behaviour")
        return LegacyFlavor()
    if version < MODERN_VERSION:
        return LegacyFlavor()
    if version < LOOPBACK_MIN_VERSION:
        found = format_version(version)
        msg = (
            f"Unsupported GnuPG version {found} detected. "
            "Only versions < 2.1 and > 2.1.11 are supported."
        )
        raise UnsupportedVersionError(msg, version=found)
    return LoopbackFlavor()
