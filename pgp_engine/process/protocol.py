"""
Invoker and invocation flavor protocol definitions.

Services only depend on these interfaces, so the subprocess-backed
implementations can be swapped for fakes replaying recorded transcripts.
"""

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from pgp_engine.models.results import InvocationResult, IOMode, KeyringRef

InputLines = str | bytes | Iterable[str | bytes]


@runtime_checkable
class Invoker(Protocol):
    """Runs one engine invocation and collects its streams."""

    def run(
        self,
        args: Sequence[str],
        *,
        mode: IOMode = IOMode.READ,
        input_lines: InputLines | None = None,
        capture_output: bool = False,
        capture_stderr: bool = False,
        parseable: bool = False,
        verbose: bool | None = None,
    ) -> InvocationResult:
        """
        Run the engine with the baseline flags plus `args`.

        Args:
            args: Operation flags and file arguments.
            mode: WRITE feeds `input_lines` to stdin, READ collects stdout.
            input_lines: Lines for stdin; each is newline-terminated.
            capture_output: Request an --output file and return its content.
            capture_stderr: Also return stderr (needs capture_output).
            parseable: Run with a neutral locale.
            verbose: Omit --quiet. Falls back to the configured default.

        Returns:
            InvocationResult for this call.

        Raises:
            ProcessInvocationError: If the engine cannot be run.
        """
        ...


@runtime_checkable
class InvocationFlavor(Protocol):
    """Engine-generation specific invocation behaviour."""

    @property
    def modern(self) -> bool:
        """Engine uses agent-managed secret keys (2.1+)."""
        ...

    @property
    def exports_generated_keys(self) -> bool:
        """Generated keys must be exported from the scratch home."""
        ...

    def baseline_args(self) -> tuple[str, ...]:
        """Flags added to every invocation."""
        ...

    def prepare_home(self, home: Path) -> None:
        """Write any configuration the engine needs into the scratch home."""
        ...

    def keygen_directives(self, public_path: str, secret_path: str) -> list[str]:
        """Batch key generation directives naming output keyrings."""
        ...

    def keyring_args(self, keyring: KeyringRef) -> tuple[str, ...]:
        """Flags selecting a scratch keyring; empty if the engine has no use for it."""
        ...
