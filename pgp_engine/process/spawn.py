"""
Child process spawning shared by version detection and the invoker.
"""

import os
import subprocess
from collections.abc import Callable, Sequence
from typing import IO, Any

import structlog

from pgp_engine.exceptions import ProcessInvocationError

logger = structlog.get_logger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]

_MASKED_OPTIONS = frozenset({"--passphrase"})


def engine_env(*, parseable: bool) -> dict[str, str]:
    """
    Environment for one engine spawn.

    Parseable calls run with a neutral message locale so diagnostics are not
    translated. The parent's environment is copied, never modified.
    """
    env = os.environ.copy()
    if parseable:
        env["LANGUAGE"] = "C"
    return env


def sanitize_args(args: Sequence[str]) -> list[str]:
    """Mask the values of passphrase-bearing options before logging."""
    result = []
    mask_next = False
    for arg in args:
        result.append("***" if mask_next else arg)
        mask_next = arg in _MASKED_OPTIONS
    return result


def spawn(
    runner: Runner,
    cmd: Sequence[str],
    *,
    input: bytes | None,
    stdout: int | IO[Any],
    stderr: int | IO[Any],
    parseable: bool,
    timeout: float | None,
) -> subprocess.CompletedProcess:
    """
    Run the engine once and wait for it.

    Args:
        runner: subprocess.run or a compatible fake.
        cmd: Full command line.
        input: Bytes for stdin, or None to give the child no stdin.
        stdout: subprocess.PIPE or subprocess.DEVNULL.
        stderr: Open file, subprocess.PIPE or subprocess.DEVNULL.
        parseable: Force the neutral locale.
        timeout: Seconds before the child is killed.

    Returns:
        The completed process.

    Raises:
        ProcessInvocationError: If the child cannot be started, its streams
            fail, or it times out.
    """
    kwargs: dict[str, Any] = {
        "stdout": stdout,
        "stderr": stderr,
        "env": engine_env(parseable=parseable),
        "timeout": timeout,
        "check": False,
    }
    if input is None:
        kwargs["stdin"] = subprocess.DEVNULL
    else:
        kwargs["input"] = input

    try:
        return runner(list(cmd), **kwargs)
    except subprocess.TimeoutExpired as e:
        logger.warning("Engine timed out", timeout=timeout)
        msg = f"Engine did not finish within {timeout} seconds"
        raise ProcessInvocationError(msg, binary=cmd[0]) from e
    except OSError as e:
        msg = f"Error while talking to the engine: {e}"
        raise ProcessInvocationError(msg, binary=cmd[0]) from e
