"""
Packet listing domain models.

These describe what the engine's packet dump reveals about a key or a
signature block.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum

ANONYMOUS_BLOCK = "anonymous"


class HashAlgorithm(IntEnum):
    """OpenPGP hash algorithm identifiers."""

    MD5 = 1
    SHA1 = 2
    RIPEMD160 = 3
    MD2 = 5
    TIGER192 = 6
    HAVAL_5_160 = 7
    SHA256 = 8
    SHA384 = 9
    SHA512 = 10
    SHA224 = 11

    @property
    def micalg(self) -> str:
        """Get the RFC 3156 micalg name for this algorithm."""
        match self:
            case self.MD5:
                return "pgp-md5"
            case self.SHA1:
                return "pgp-sha1"
            case self.RIPEMD160:
                return "pgp-ripemd160"
            case self.MD2:
                return "pgp-md2"
            case self.TIGER192:
                return "pgp-tiger192"
            case self.HAVAL_5_160:
                return "pgp-haval-5-160"
            case self.SHA256:
                return "pgp-sha256"
            case self.SHA384:
                return "pgp-sha384"
            case self.SHA512:
                return "pgp-sha512"
            case self.SHA224:
                return "pgp-sha224"

    @classmethod
    def micalg_for(cls, code: int) -> str | None:
        """Map a numeric digest code to its micalg name, or None if unknown."""
        try:
            return cls(code).micalg
        except ValueError:
            return None


@dataclass(frozen=True, kw_only=True)
class KeyMaterial:
    """
    Public or secret key packet attributes.

    Attributes:
        created: Creation time as a Unix timestamp.
        expires: Expiry time as a Unix timestamp (0 means never).
        size: Key size in bits.
        keyid: 16 hex digit key id, if the engine printed one.
    """

    created: int | None = None
    expires: int | None = None
    size: int | None = None
    keyid: str | None = None


@dataclass(frozen=True, kw_only=True)
class SignatureRecord:
    """
    A single signature packet.

    Attributes:
        keyid: Key id of the signing key.
        created: Signature creation time as a Unix timestamp.
        expires: Computed expiry time as a Unix timestamp.
        micalg: Digest algorithm name (e.g. "pgp-sha256").
    """

    keyid: str
    created: int | None = None
    expires: int | None = None
    micalg: str | None = None


@dataclass(frozen=True, kw_only=True)
class SignatureBlock:
    """
    Signatures grouped under one user id, or the anonymous block.

    The anonymous block has no name or email; it collects signatures that do
    not follow a user id (detached signatures, subkey bindings).
    """

    name: str | None = None
    comment: str | None = None
    email: str | None = None
    keyid: str | None = None
    micalg: str | None = None
    signatures: Mapping[str, SignatureRecord] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class KeyPacketInfo:
    """
    Everything the packet dump says about one key (or signature block).

    Attributes:
        keyid: Key id of the last signature seen for this key.
        public_key: Public key packet attributes.
        secret_key: Secret key packet attributes.
        signature: Blocks keyed "id1", "id2", ... and ANONYMOUS_BLOCK.
        literal: A literal data packet was present.
        encrypted: An encrypted data packet was present.
    """

    keyid: str | None = None
    public_key: KeyMaterial | None = None
    secret_key: KeyMaterial | None = None
    signature: Mapping[str, SignatureBlock] = field(default_factory=dict)
    literal: bool = False
    encrypted: bool = False

    @property
    def micalg(self) -> str | None:
        """Digest algorithm of the key's self signature or of a bare signature."""
        block = self.signature.get(ANONYMOUS_BLOCK)
        return block.micalg if block else None

    @property
    def user_ids(self) -> list[SignatureBlock]:
        """User id blocks in listing order."""
        return [block for name, block in self.signature.items() if name != ANONYMOUS_BLOCK]
