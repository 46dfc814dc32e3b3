"""
Status-file and diagnostic text interpretation.

The status file carries locale-independent "[GNUPG:] KEYWORD args" lines;
stderr carries human-readable diagnostics, which are only reliable when the
engine ran with a neutral locale.
"""

import re

from pgp_engine.exceptions import BadSignatureError
from pgp_engine.models.results import SignatureVerdict

_STATUS_PREFIX = "[GNUPG:] "
_BAD_SIGNATURE_MARKER = "gpg: BAD signature"
_SYMMETRIC_MARKER = "gpg: encrypted with 1 passphrase"

DECRYPTION_OKAY = "DECRYPTION_OKAY"
KEY_CREATED = "KEY_CREATED"

# GnuPG 1 prints a short key id, GnuPG 2 a long key id or the full fingerprint.
_LEGACY_SIGNER_RE = re.compile(r"gpg:\sSignature\smade.*ID\s+([A-F0-9]{8})\s+")
_MODERN_SIGNER_RE = re.compile(
    r"gpg:\sSignature\smade.*using\s+\S+\s+key\s+([A-F0-9]{40}|[A-F0-9]{16})\s", re.S
)


def status_tokens(status: str) -> list[str]:
    """
    Extract the keywords of a status file.

    Args:
        status: Raw status-file content.

    Returns:
        Keywords in the order the engine wrote them.
    """
    tokens = []
    for line in status.splitlines():
        if not line.startswith(_STATUS_PREFIX):
            continue
        keyword = line[len(_STATUS_PREFIX) :].split(" ", 1)[0]
        if keyword:
            tokens.append(keyword)
    return tokens


def has_status_token(status: str, token: str) -> bool:
    """Check whether the status file contains a keyword."""
    return token in status_tokens(status)


def status_arguments(status: str, token: str) -> list[str] | None:
    """
    Arguments of the first status line carrying a keyword.

    Returns:
        The space separated arguments, or None if the keyword is absent.
    """
    for line in status.splitlines():
        if not line.startswith(_STATUS_PREFIX):
            continue
        parts = line[len(_STATUS_PREFIX) :].split()
        if parts and parts[0] == token:
            return parts[1:]
    return None


def parse_created_fingerprint(status: str) -> str | None:
    """
    Fingerprint of the key a --gen-key run created.

    Reads "KEY_CREATED <type> <fingerprint>" from the status file.
    """
    args = status_arguments(status, KEY_CREATED)
    if args is None or len(args) < 2:
        return None
    return args[1]


def clean_diagnostic(stderr: str | None) -> str:
    """Turn multi-line engine diagnostics into a one-line error message."""
    if not stderr:
        return ""
    text = stderr[5:] if stderr.startswith("gpg: ") else stderr
    return text.replace("\n", ". ")


def check_signature_verdict(diagnostic_text: str, message: bytes | None = None) -> SignatureVerdict:
    """
    Derive a verdict from signature diagnostics.

    Good and good-but-untrusted signatures are not distinguished here;
    callers inspect SignatureVerdict.diagnostic_text for trust details.

    Args:
        diagnostic_text: Engine stderr.
        message: Decrypted payload, if any.

    Returns:
        SignatureVerdict wrapping the payload and diagnostics.

    Raises:
        BadSignatureError: If the diagnostics report a bad signature.
    """
    if _BAD_SIGNATURE_MARKER in diagnostic_text:
        raise BadSignatureError(diagnostic_text)
    return SignatureVerdict(message=message, diagnostic_text=diagnostic_text)


def is_symmetric_marker_present(diagnostic_text: str | None) -> bool:
    """Check for the "encrypted with 1 passphrase" diagnostic."""
    return bool(diagnostic_text) and _SYMMETRIC_MARKER in diagnostic_text


def parse_signer_key_id(diagnostic_text: str | None) -> str | None:
    """
    Extract the signer's short key id from verify diagnostics.

    Args:
        diagnostic_text: Engine stderr of a --verify run.

    Returns:
        8 hex digit key id, or None if no signature line was found.
    """
    if not diagnostic_text:
        return None
    if match := _LEGACY_SIGNER_RE.search(diagnostic_text):
        return match.group(1)
    if match := _MODERN_SIGNER_RE.search(diagnostic_text):
        return match.group(1)[-8:]
    return None
