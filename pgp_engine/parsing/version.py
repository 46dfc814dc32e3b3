"""Engine version string parsing."""

import re

_VERSION_RE = re.compile(r"gpg \(GnuPG\) (\d+)\.(\d+)\.(\d+)")

EngineVersion = tuple[int, int, int]


def parse_engine_version(text: str) -> EngineVersion | None:
    """
    Parse the first line of `gpg --version`.

    Args:
        text: Version output.

    Returns:
        (major, minor, patch), or None if the output is not recognized.
    """
    match = _VERSION_RE.search(text)
    if match is None:
        return None
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


def format_version(version: EngineVersion) -> str:
    return ".".join(str(part) for part in version)
