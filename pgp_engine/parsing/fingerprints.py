"""
Colon-delimited key listing parser.

Correlates each "pub" record with the "fpr" record that follows it.
"""

import re

_PUB_RECORD = "pub"
_FPR_RECORD = "fpr"
_KEYID_FIELD = 4
_FINGERPRINT_FIELD = 9

_LISTING_FINGERPRINT_RE = re.compile(r"key fingerprint = ([0-9A-Z ]+)", re.I)


def parse_fingerprints(listing: str) -> dict[str, str]:
    """
    Build a key id to fingerprint map from `--with-colons` output.

    Args:
        listing: Output of `--fingerprint --with-colons --fixed-list-mode`.

    Returns:
        Mapping of "0x"-prefixed 16 hex digit key id to fingerprint. Empty if
        no pub/fpr pair was found.
    """
    fingerprints: dict[str, str] = {}
    pending: str | None = None

    for line in listing.splitlines():
        fields = line.split(":")
        if fields[0] == _PUB_RECORD and len(fields) > _KEYID_FIELD:
            pending = "0x" + fields[_KEYID_FIELD][-16:]
        elif pending and fields[0] == _FPR_RECORD and len(fields) > _FINGERPRINT_FIELD:
            fingerprints[pending] = fields[_FINGERPRINT_FIELD]
            pending = None

    return fingerprints


def parse_listing_keyid(listing: str) -> str | None:
    """
    Extract a key id from human-readable `--with-fingerprint` output.

    Args:
        listing: Output containing a "Key fingerprint = ..." line.

    Returns:
        Last 16 hex digits of the first fingerprint, or None.
    """
    match = _LISTING_FINGERPRINT_RE.search(listing)
    if match is None:
        return None
    return match.group(1).replace(" ", "")[-16:]
