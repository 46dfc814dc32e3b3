"""
Engine handle: the binary, its scratch home and its invocation flavor.
"""

import os
import shutil
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Self

import structlog

from pgp_engine.config import EngineConfig
from pgp_engine.parsing.version import EngineVersion, format_version, parse_engine_version
from pgp_engine.process.flavor import select_flavor
from pgp_engine.process.protocol import InvocationFlavor
from pgp_engine.process.spawn import Runner, spawn

logger = structlog.get_logger(__name__)

_SCRATCH_PREFIX = "pgp-"


def detect_version(
    binary: str, *, runner: Runner = subprocess.run, timeout: float | None = None
) -> EngineVersion | None:
    """
    Ask the engine for its version.

    Runs without a home directory so nothing is created on disk.

    Raises:
        ProcessInvocationError: If the binary cannot be run.
    """
    completed = spawn(
        runner,
        [binary, "--version"],
        input=None,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        parseable=True,
        timeout=timeout,
    )
    stdout = completed.stdout or b""
    return parse_engine_version(stdout.decode("utf-8", errors="replace"))


class EngineHandle:
    """
    Process-wide engine settings and the private scratch home.

    The scratch home holds keyrings and per-invocation scratch files and is
    removed by close(). One handle serves one operation sequence at a time;
    separate handles share nothing.
    """

    def __init__(
        self,
        *,
        binary: str,
        home: Path,
        flavor: InvocationFlavor,
        version: EngineVersion | None = None,
    ) -> None:
        """
        Args:
            binary: Engine executable.
            home: Existing scratch directory owned by this handle.
            flavor: Invocation flavor for the detected version.
            version: Detected engine version.
        """
        self._binary = binary
        self._home = home
        self._flavor = flavor
        self._version = version
        self._closed = False

    @classmethod
    def create(cls, config: EngineConfig, *, runner: Runner = subprocess.run) -> Self:
        """
        Detect the engine version and set up a scratch home.

        Args:
            config: Engine configuration.
            runner: subprocess.run or a compatible fake.

        Returns:
            A ready handle.

        Raises:
            ProcessInvocationError: If the engine cannot be run.
            UnsupportedVersionError: If the engine version is known broken.
                Nothing has been created on disk in that case.
        """
        version = detect_version(config.binary, runner=runner, timeout=config.timeout)
        flavor = select_flavor(version)

        home = Path(tempfile.mkdtemp(prefix="pgp_engine_", dir=config.temp_dir))
        try:
            flavor.prepare_home(home)
        except OSError:
            shutil.rmtree(home, ignore_errors=True)
            raise

        logger.debug(
            "Engine handle created",
            binary=config.binary,
            version=format_version(version) if version else None,
            modern=flavor.modern,
        )
        return cls(binary=config.binary, home=home, flavor=flavor, version=version)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    @property
    def binary(self) -> str:
        return self._binary

    @property
    def home(self) -> Path:
        return self._home

    @property
    def flavor(self) -> InvocationFlavor:
        return self._flavor

    @property
    def version(self) -> EngineVersion | None:
        return self._version

    @property
    def modern(self) -> bool:
        """Engine is 2.1 or later."""
        return self._flavor.modern

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def baseline_args(self) -> tuple[str, ...]:
        """Command prefix shared by every invocation."""
        return (
            self._binary,
            "--emit-version",
            "--no-tty",
            "--no-secmem-warning",
            "--no-options",
            "--no-default-keyring",
            "--yes",
            "--homedir",
            str(self._home),
            *self._flavor.baseline_args(),
        )

    def scratch_path(self, *, prefix: str = _SCRATCH_PREFIX, suffix: str = "") -> str:
        """
        Create an empty file in the scratch home.

        The file lives until the handle is closed unless removed earlier.
        """
        fd, path = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=self._home)
        os.close(fd)
        return path

    @contextmanager
    def scratch_file(
        self, data: str | bytes | None = None, *, prefix: str = _SCRATCH_PREFIX
    ) -> Iterator[str]:
        """
        Scratch file removed when the block exits, whatever the outcome.

        Args:
            data: Initial content. str is UTF-8 encoded.
            prefix: File name prefix.

        Yields:
            Path of the file.
        """
        path = self.scratch_path(prefix=prefix)
        try:
            if data is not None:
                Path(path).write_bytes(data.encode("utf-8") if isinstance(data, str) else data)
            yield path
        finally:
            Path(path).unlink(missing_ok=True)

    def close(self) -> None:
        """Remove the scratch home. Idempotent."""
        if self._closed:
            return
        shutil.rmtree(self._home, ignore_errors=True)
        self._closed = True
        logger.debug("Engine handle closed")
