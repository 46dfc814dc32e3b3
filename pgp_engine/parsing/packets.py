"""
Packet dump (`--list-packets`) parser.

The dump is a sequence of header lines starting with ":" (e.g.
":public key packet:") each followed by indented detail lines. The parser is
a small state machine: header lines select the current Section, detail lines
are handled by the current Section's handler, and lines no handler
recognizes are ignored.

Example dump fragment:

    :public key packet:
        version 4, algo 1, created 1600000000, expires 0
        pkey[0]: [2048 bits]
        keyid: 0123456789ABCDEF
    :user id packet: "Jane Doe (work) <jane@example.com>"
    :signature packet: algo 1, keyid 0123456789ABCDEF
        version 4, created 1600000000, md5len 0, sigclass 0x13
        digest algo 8, begin of digest 12 34
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum, auto

import structlog

from pgp_engine.models.packets import (
    ANONYMOUS_BLOCK,
    HashAlgorithm,
    KeyMaterial,
    KeyPacketInfo,
    SignatureBlock,
    SignatureRecord,
)

logger = structlog.get_logger(__name__)

KeyIdResolver = Callable[[], str | None]


class Section(Enum):
    """Packet dump sections the parser tracks."""

    NONE = auto()
    PUBLIC_KEY = auto()
    SECRET_KEY = auto()
    USER_ID = auto()
    ANONYMOUS_SIGNATURE = auto()
    LITERAL = auto()
    ENCRYPTED = auto()


# Header substring -> handler name. Checked in order, first match wins.
_HEADERS: tuple[tuple[str, str], ...] = (
    (":public key packet:", "_enter_public_key"),
    (":secret key packet:", "_enter_secret_key"),
    (":user id packet:", "_enter_user_id"),
    (":signature packet:", "_enter_signature"),
    (":literal data packet:", "_enter_literal"),
    (":encrypted data packet:", "_enter_encrypted"),
)

_HEX_ESCAPE_RE = re.compile(rb"\\x([0-9a-f]{2})")
_USER_ID_RE = re.compile(r'"([^<]+)<([^>]+)>"')
_COMMENT_RE = re.compile(r"([^(]+)\((.+)\)$")
_SIG_KEYID_RE = re.compile(r"keyid\s+([0-9A-F]+)", re.I)

_KEY_CREATED_RE = re.compile(r"created\s+(\d+),\s+expires\s+(\d+)", re.I)
_KEY_SIZE_RE = re.compile(r"\s+[sp]key\[0\]:\s+\[(\d+)", re.I)
_KEY_KEYID_RE = re.compile(r"\s+keyid:\s+([0-9A-F]+)", re.I)

_SIG_CREATED_RE = re.compile(r"version\s+\d+,\s+created\s+(\d+)", re.I)
_SIG_EXPIRES_RE = re.compile(r"expires after (?:(?:(\d+)y)?(\d+)d)?(\d+)h(\d+)m\)$")
_DIGEST_ALGO_RE = re.compile(r"digest algo\s+(\d{1,2})")


@dataclass
class _BlockBuilder:
    name: str | None = None
    comment: str | None = None
    email: str | None = None
    keyid: str | None = None
    micalg: str | None = None
    signatures: dict[str, dict] = field(default_factory=dict)

    def build(self) -> SignatureBlock:
        return SignatureBlock(
            name=self.name,
            comment=self.comment,
            email=self.email,
            keyid=self.keyid,
            micalg=self.micalg,
            signatures={
                sig_id: SignatureRecord(**record) for sig_id, record in self.signatures.items()
            },
        )


@dataclass
class _KeyBuilder:
    keyid: str | None = None
    public_key: dict | None = None
    secret_key: dict | None = None
    blocks: dict[str, _BlockBuilder] = field(default_factory=dict)
    literal: bool = False
    encrypted: bool = False

    def block(self, name: str) -> _BlockBuilder:
        return self.blocks.setdefault(name, _BlockBuilder())

    def build(self) -> KeyPacketInfo:
        return KeyPacketInfo(
            keyid=self.keyid,
            public_key=KeyMaterial(**self.public_key) if self.public_key is not None else None,
            secret_key=KeyMaterial(**self.secret_key) if self.secret_key is not None else None,
            signature={name: block.build() for name, block in self.blocks.items()},
            literal=self.literal,
            encrypted=self.encrypted,
        )


def parse_packets(text: str, *, keyid_resolver: KeyIdResolver | None = None) -> list[KeyPacketInfo]:
    """
    Parse a packet dump into one record per key, in listing order.

    Args:
        text: Output of `gpg --list-packets`.
        keyid_resolver: Called when a user id is seen before any key id;
            should return the key's 16 hex digit id. Older engines omit the
            key id from the key packet section.

    Returns:
        One KeyPacketInfo per key (or per signature/message block).
    """
    parser = PacketParser(keyid_resolver)
    parser.feed(text)
    return parser.records()


def packet_info(text: str, *, keyid_resolver: KeyIdResolver | None = None) -> KeyPacketInfo | None:
    """Parse a packet dump and return only the first record."""
    records = parse_packets(text, keyid_resolver=keyid_resolver)
    return records[0] if records else None


def unescape_user_id(line: str) -> str:
    """Decode the engine's \\xNN escapes (raw UTF-8 bytes) in a user id line."""
    raw = _HEX_ESCAPE_RE.sub(lambda m: bytes.fromhex(m.group(1).decode()), line.encode("utf-8"))
    return raw.decode("utf-8", errors="replace")


def add_expiry(created: int, *, years: int = 0, days: int = 0, hours: int = 0, minutes: int = 0) -> int:
    """
    Add a calendar duration to a Unix timestamp.

    Years are calendar years; Feb 29 rolls over to Mar 1 in non-leap years.
    """
    start = datetime.fromtimestamp(created, tz=UTC)
    if years:
        try:
            start = start.replace(year=start.year + years)
        except ValueError:
            start = start.replace(year=start.year + years, month=3, day=1)
    return int((start + timedelta(days=days, hours=hours, minutes=minutes)).timestamp())


class PacketParser:
    """
    Incremental packet dump parser.

    Feed it text (or single lines) and collect the records at the end.
    """

    def __init__(self, keyid_resolver: KeyIdResolver | None = None) -> None:
        """
        Args:
            keyid_resolver: Fallback used when a user id precedes any key id.
        """
        self._resolve_keyid = keyid_resolver
        self._keys: list[_KeyBuilder] = []
        self._section = Section.NONE
        self._block: str | None = None
        self._uid_idx = 0
        self._sig_id: str | None = None
        self._keyid: str | None = None

    @property
    def section(self) -> Section:
        """The section detail lines are currently attributed to."""
        return self._section

    def feed(self, text: str) -> None:
        """Feed a whole dump."""
        for line in text.split("\n"):
            self.feed_line(line)

    def feed_line(self, line: str) -> None:
        """Feed one line; header lines start with ":"."""
        if line.startswith(":"):
            self._enter_header(line)
        else:
            self._handle_line(line)

    def records(self) -> list[KeyPacketInfo]:
        """Build the records parsed so far."""
        return [key.build() for key in self._keys]

    def _current(self) -> _KeyBuilder:
        if not self._keys:
            self._keys.append(_KeyBuilder())
        return self._keys[-1]

    def _enter_header(self, line: str) -> None:
        lower = line.lower()
        for marker, handler in _HEADERS:
            if marker in lower:
                getattr(self, handler)(line)
                return
        self._section = Section.NONE
        self._block = None

    def _start_key(self, section: Section) -> None:
        self._keys.append(_KeyBuilder())
        self._section = section
        self._block = None
        self._uid_idx = 0
        self._sig_id = None
        self._keyid = None

    def _enter_public_key(self, _line: str) -> None:
        self._start_key(Section.PUBLIC_KEY)

    def _enter_secret_key(self, _line: str) -> None:
        self._start_key(Section.SECRET_KEY)

    def _enter_user_id(self, line: str) -> None:
        self._uid_idx += 1
        self._section = Section.USER_ID
        self._block = None
        self._sig_id = None

        match = _USER_ID_RE.search(unescape_user_id(line))
        if match is None:
            logger.warning("Skipping unrecognized user id", index=self._uid_idx)
            return

        name, email = match.group(1).strip(), match.group(2)
        comment = ""
        if comment_match := _COMMENT_RE.match(name):
            name, comment = comment_match.group(1).strip(), comment_match.group(2)

        if not self._keyid and self._resolve_keyid is not None:
            self._keyid = self._resolve_keyid()

        self._block = f"id{self._uid_idx}"
        block = self._current().block(self._block)
        block.name = name
        block.comment = comment
        block.email = email
        block.keyid = self._keyid

    def _enter_signature(self, line: str) -> None:
        if self._section is not Section.USER_ID:
            self._section = Section.ANONYMOUS_SIGNATURE
            self._block = ANONYMOUS_BLOCK

        match = _SIG_KEYID_RE.search(line)
        if match is None:
            self._sig_id = None
            return

        self._sig_id = match.group(1)
        key = self._current()
        key.keyid = self._sig_id
        if self._block is not None:
            key.block(self._block).signatures[self._sig_id] = {"keyid": self._sig_id}

    def _enter_literal(self, _line: str) -> None:
        self._section = Section.LITERAL
        self._block = None

    def _enter_encrypted(self, _line: str) -> None:
        self._section = Section.ENCRYPTED
        self._block = None

    def _handle_line(self, line: str) -> None:
        match self._section:
            case Section.PUBLIC_KEY | Section.SECRET_KEY:
                self._handle_key_line(line)
            case Section.LITERAL:
                self._current().literal = True
            case Section.ENCRYPTED:
                self._current().encrypted = True
            case Section.USER_ID | Section.ANONYMOUS_SIGNATURE:
                self._handle_signature_line(line)
            case _:
                pass

    def _handle_key_line(self, line: str) -> None:
        if match := _KEY_CREATED_RE.search(line):
            values = {"created": int(match.group(1)), "expires": int(match.group(2))}
        elif match := _KEY_SIZE_RE.search(line):
            values = {"size": int(match.group(1))}
        elif match := _KEY_KEYID_RE.search(line):
            self._keyid = match.group(1)
            values = {"keyid": self._keyid}
        else:
            return

        key = self._current()
        attr = "public_key" if self._section is Section.PUBLIC_KEY else "secret_key"
        material = getattr(key, attr) or {}
        material.update(values)
        setattr(key, attr, material)

    def _handle_signature_line(self, line: str) -> None:
        if self._block is None or self._sig_id is None:
            return
        key = self._current()
        block = key.block(self._block)
        record = block.signatures.get(self._sig_id)
        if record is None:
            return

        if match := _SIG_CREATED_RE.search(line):
            record["created"] = int(match.group(1))
            return

        if "created" in record and (match := _SIG_EXPIRES_RE.search(line)):
            years, days, hours, minutes = (int(part or 0) for part in match.groups())
            record["expires"] = add_expiry(
                record["created"], years=years, days=days, hours=hours, minutes=minutes
            )
            return

        if match := _DIGEST_ALGO_RE.search(line):
            micalg = HashAlgorithm.micalg_for(int(match.group(1)))
            if micalg is None:
                return
            record["micalg"] = micalg
            if self._block == ANONYMOUS_BLOCK:
                block.micalg = micalg
            if self._keyid and self._sig_id.upper() == self._keyid.upper():
                # Self signature: its digest is the key's preferred one.
                key.block(ANONYMOUS_BLOCK).micalg = micalg
                block.micalg = micalg
