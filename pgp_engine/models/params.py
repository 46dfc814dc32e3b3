"""
Per-operation parameter objects.

Required values may be left unset here; each service checks what it needs
before touching the filesystem and raises MissingParameterError.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum

KeyData = str | bytes


class SignatureType(StrEnum):
    """Signature shapes understood by sign and verify."""

    DETACHED = "detached-signature"
    CLEARTEXT = "cleartext"
    INLINE = "signature"


@dataclass(frozen=True, kw_only=True)
class KeyGenerationParams:
    """
    Attributes:
        name: Real name of the identity.
        email: Email address of the identity.
        passphrase: Passphrase protecting the secret key.
        comment: Optional user id comment.
        key_type: Primary key algorithm.
        subkey_type: Encryption subkey algorithm.
        key_length: Key length in bits (primary and subkey).
        expire: Absolute expiry as a Unix timestamp. None never expires.
        created: Creation time as a Unix timestamp. None uses the current time.
    """

    name: str | None = None
    email: str | None = None
    passphrase: str | None = field(default=None, repr=False)
    comment: str | None = None
    key_type: str = "RSA"
    subkey_type: str = "RSA"
    key_length: int = 2048
    expire: int | None = None
    created: int | None = None


@dataclass(frozen=True, kw_only=True)
class EncryptParams:
    """
    Attributes:
        recipients: Recipient identifier (email or key id) mapped to its public key.
        symmetric: Encrypt with a passphrase instead of recipient keys.
        passphrase: Passphrase for symmetric encryption.
    """

    recipients: Mapping[str, KeyData] = field(default_factory=dict)
    symmetric: bool = False
    passphrase: str | None = field(default=None, repr=False)


@dataclass(frozen=True, kw_only=True)
class SignParams:
    """
    Attributes:
        pubkey: Signer's public key.
        privkey: Signer's private key.
        passphrase: Passphrase unlocking the private key.
        sigtype: DETACHED (default) or CLEARTEXT.
    """

    pubkey: KeyData | None = None
    privkey: KeyData | None = field(default=None, repr=False)
    passphrase: str | None = field(default=None, repr=False)
    sigtype: SignatureType = SignatureType.DETACHED


@dataclass(frozen=True, kw_only=True)
class DecryptParams:
    """
    Attributes:
        passphrase: Passphrase for the private key or the symmetric message.
        pubkey: Signer's public key, used to check an embedded signature.
        privkey: Recipient's private key.
        no_passphrase: The message needs no passphrase.
    """

    passphrase: str | None = field(default=None, repr=False)
    pubkey: KeyData | None = None
    privkey: KeyData | None = field(default=None, repr=False)
    no_passphrase: bool = False


@dataclass(frozen=True, kw_only=True)
class VerifyParams:
    """
    Attributes:
        pubkey: Signer's public key.
        sigtype: DETACHED or INLINE.
        signature: Detached signature bytes (DETACHED only).
        charset: Charset of the signed text. Engine default if None.
    """

    pubkey: KeyData | None = None
    sigtype: SignatureType = SignatureType.DETACHED
    signature: KeyData | None = None
    charset: str | None = None
