"""
Parsers for the engine's textual output.

All functions here are pure: text in, typed records out. Running the engine
is the invoker's job.
"""

from pgp_engine.parsing.fingerprints import parse_fingerprints, parse_listing_keyid
from pgp_engine.parsing.packets import PacketParser, Section, packet_info, parse_packets
from pgp_engine.parsing.status import (
    DECRYPTION_OKAY,
    KEY_CREATED,
    check_signature_verdict,
    clean_diagnostic,
    has_status_token,
    is_symmetric_marker_present,
    parse_created_fingerprint,
    parse_signer_key_id,
    status_arguments,
    status_tokens,
)
from pgp_engine.parsing.version import EngineVersion, format_version, parse_engine_version

__all__ = [
    "DECRYPTION_OKAY",
    "EngineVersion",
    "KEY_CREATED",
    "PacketParser",
    "Section",
    "check_signature_verdict",
    "clean_diagnostic",
    "format_version",
    "has_status_token",
    "is_symmetric_marker_present",
    "packet_info",
    "parse_created_fingerprint",
    "parse_engine_version",
    "parse_fingerprints",
    "parse_listing_keyid",
    "parse_packets",
    "parse_signer_key_id",
    "status_arguments",
    "status_tokens",
]
