"""
PGP engine configuration.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, kw_only=True)
class EngineConfig:
    """
    Attributes:
        binary: Path or name of the gpg executable.
        temp_dir: Base directory for the scratch home. System default if None.
        timeout: Seconds to wait for a single engine invocation. None waits forever.
        verbose: Run the engine without --quiet on every call.
        default_charset: Charset passed to the engine when verifying signatures.
    """

    binary: str = "gpg"
    temp_dir: Path | str | None = None
    timeout: float | None = None
    verbose: bool = False
    default_charset: str = "UTF-8"

    def __post_init__(self) -> None:
        if not self.binary:
            msg = "binary must not be empty"
            raise ValueError(msg)
        if self.timeout is not None and self.timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
        if not self.default_charset:
            msg = "default_charset must not be empty"
            raise ValueError(msg)
