"""
Subprocess-backed engine invoker.

Builds the command line for one engine call, feeds stdin, and collects
stdout, the --output file, stderr and the --status-file.
"""

import subprocess
import sys
from collections.abc import Sequence
from contextlib import ExitStack
from pathlib import Path

import structlog

from pgp_engine.exceptions import ProcessInvocationError
from pgp_engine.models.results import InvocationResult, IOMode
from pgp_engine.process.handle import EngineHandle
from pgp_engine.process.protocol import InputLines
from pgp_engine.process.spawn import Runner, sanitize_args, spawn

logger = structlog.get_logger(__name__)

_CRLF = b"\r\n"


def encode_input(lines: InputLines | None, *, normalize_crlf: bool = False) -> bytes:
    """
    Encode stdin lines, newline-terminating each one.

    Args:
        lines: A single line or an iterable of lines. str is UTF-8 encoded.
        normalize_crlf: Split lines containing CRLF and terminate each
            fragment with a bare newline.

    Returns:
        Bytes to write to the child's stdin.
    """
    if lines is None:
        return b""
    if isinstance(lines, (str, bytes)):
        lines = [lines]

    chunks: list[bytes] = []
    for line in lines:
        data = line.encode("utf-8") if isinstance(line, str) else bytes(line)
        if normalize_crlf and _CRLF in data:
            chunks.extend(chunk + b"\n" for chunk in data.split(_CRLF))
        else:
            chunks.append(data + b"\n")
    return b"".join(chunks)


class ProcessInvoker:
    """
    Runs the engine as a child process.

    Example:
        invoker = ProcessInvoker(handle)
        result = invoker.run(["--list-packets", path], parseable=True)
    """

    def __init__(
        self,
        handle: EngineHandle,
        *,
        timeout: float | None = None,
        verbose: bool = False,
        runner: Runner = subprocess.run,
        normalize_crlf: bool | None = None,
    ) -> None:
        """
        Args:
            handle: Engine handle providing the baseline and the scratch home.
            timeout: Seconds to wait for each invocation. None waits forever.
            verbose: Default for omitting --quiet.
            runner: subprocess.run or a compatible fake for testing.
            normalize_crlf: Split CRLF input lines. Defaults to True on Windows.
        """
        self._handle = handle
        self._timeout = timeout
        self._verbose = verbose
        self._runner = runner
        self._normalize_crlf = sys.platform == "win32" if normalize_crlf is None else normalize_crlf

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
        Run the engine once.

        Args:
            args: Operation flags and file arguments.
            mode: WRITE feeds `input_lines` to stdin, READ collects stdout.
            input_lines: Lines for stdin (WRITE mode).
            capture_output: Request an --output file and return its content.
            capture_stderr: Also return stderr (only with capture_output).
            parseable: Run with a neutral locale.
            verbose: Omit --quiet. Falls back to the invoker default.

        Returns:
            InvocationResult for this call.

        Raises:
            ProcessInvocationError: If the engine cannot be started, its
                streams fail, or it times out.
        """
        verbose = self._verbose if verbose is None else verbose
        options = list(args)
        if not verbose:
            options.insert(0, "--quiet")

        with ExitStack() as stack:
            status_path = stack.enter_context(self._handle.scratch_file(prefix="pgp-stat-"))
            options[0:0] = ["--status-file", status_path]

            output_path: str | None = None
            stderr_path: str | None = None
            if capture_output:
                output_path = stack.enter_context(self._handle.scratch_file())
                options[0:0] = ["--output", output_path]
                if capture_stderr:
                    stderr_path = stack.enter_context(self._handle.scratch_file())

            cmd = [*self._handle.baseline_args, *options]
            logger.debug("Invoking engine", args=sanitize_args(options), mode=str(mode))

            with ExitStack() as streams:
                stderr_target = (
                    streams.enter_context(open(stderr_path, "wb"))
                    if stderr_path
                    else subprocess.DEVNULL
                )
                completed = spawn(
                    self._runner,
                    cmd,
                    input=(
                        encode_input(input_lines, normalize_crlf=self._normalize_crlf)
                        if mode is IOMode.WRITE
                        else None
                    ),
                    stdout=subprocess.PIPE if mode is IOMode.READ else subprocess.DEVNULL,
                    stderr=stderr_target,
                    parseable=parseable,
                    timeout=self._timeout,
                )

            try:
                status = Path(status_path).read_text(encoding="utf-8", errors="replace")
                output = Path(output_path).read_bytes() if output_path else None
                stderr = (
                    Path(stderr_path).read_bytes().decode("utf-8", errors="replace")
                    if stderr_path
                    else None
                )
            except OSError as e:
                msg = f"Failed to read engine output: {e}"
                raise ProcessInvocationError(msg) from e

        logger.debug("Engine finished", returncode=completed.returncode)
        return InvocationResult(
            stdout=completed.stdout or b"",
            output=output,
            stderr=stderr,
            status=status,
            returncode=completed.returncode,
        )
