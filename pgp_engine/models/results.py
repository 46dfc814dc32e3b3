"""
Result models returned by the invoker and the operation services.
"""

from dataclasses import dataclass, field
from enum import StrEnum


class IOMode(StrEnum):
    """How the caller talks to the engine process."""

    READ = "r"
    WRITE = "w"


class KeyringKind(StrEnum):
    """Kinds of scratch keyrings."""

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True, kw_only=True)
class KeyringRef:
    """
    A scratch keyring file, ready to be passed to the engine.

    Attributes:
        kind: Public or private keyring.
        path: Location of the keyring file in the scratch home.
    """

    kind: KeyringKind
    path: str

    @property
    def args(self) -> tuple[str, str]:
        """Command-line arguments selecting this keyring."""
        flag = "--keyring" if self.kind == KeyringKind.PUBLIC else "--secret-keyring"
        return flag, self.path


@dataclass(frozen=True, kw_only=True)
class InvocationResult:
    """
    Outcome of one engine invocation.

    Attributes:
        stdout: Raw stdout (read mode only).
        output: Content of the --output file, if requested.
        stderr: Diagnostic text, if requested.
        status: Raw content of the --status-file.
        returncode: Process exit code.
    """

    stdout: bytes = b""
    output: bytes | None = None
    stderr: str | None = None
    status: str = ""
    returncode: int = 0

    @property
    def stdout_text(self) -> str:
        """Stdout decoded for parsing."""
        return self.stdout.decode("utf-8", errors="replace")


@dataclass(frozen=True, kw_only=True)
class SignatureVerdict:
    """
    Result of a verify or decrypt operation.

    Attributes:
        message: Decrypted message bytes, None for pure verification.
        diagnostic_text: Engine diagnostics the verdict was derived from.
    """

    message: bytes | None
    diagnostic_text: str

    @property
    def is_good(self) -> bool:
        """The diagnostics contain a good-signature line."""
        return "gpg: Good signature" in self.diagnostic_text


@dataclass(frozen=True, kw_only=True)
class GeneratedKeyPair:
    """Armored key material produced by key generation."""

    public: bytes
    private: bytes = field(repr=False)
