import pytest

from pgp_engine.exceptions import BadSignatureError
from pgp_engine.parsing.status import (
    DECRYPTION_OKAY,
    check_signature_verdict,
    clean_diagnostic,
    has_status_token,
    is_symmetric_marker_present,
    parse_created_fingerprint,
    parse_signer_key_id,
    status_arguments,
    status_tokens,
)

STATUS = """\
[GNUPG:] ENC_TO FEDCBA9876543210 1 0
[GNUPG:] BEGIN_DECRYPTION
[GNUPG:] DECRYPTION_INFO 2 9
[GNUPG:] PLAINTEXT 62 1600000000
[GNUPG:] DECRYPTION_OKAY
[GNUPG:] GOODMDC
[GNUPG:] END_DECRYPTION
"""


def test_status_tokens_in_order() -> None:
    assert status_tokens(STATUS) == [
        "ENC_TO",
        "BEGIN_DECRYPTION",
        "DECRYPTION_INFO",
        "PLAINTEXT",
        "DECRYPTION_OKAY",
        "GOODMDC",
        "END_DECRYPTION",
    ]


def test_status_tokens_ignore_other_lines() -> None:
    assert status_tokens("gpg: some diagnostic\n\n[GNUPG:] NODATA 1\n") == ["NODATA"]


def test_has_status_token_matches_whole_keyword() -> None:
    assert has_status_token(STATUS, DECRYPTION_OKAY)
    assert not has_status_token("[GNUPG:] DECRYPTION_FAILED\n", DECRYPTION_OKAY)
    assert not has_status_token("", DECRYPTION_OKAY)


def test_status_arguments_of_first_matching_line() -> None:
    assert status_arguments(STATUS, "ENC_TO") == ["FEDCBA9876543210", "1", "0"]
    assert status_arguments(STATUS, "BEGIN_DECRYPTION") == []
    assert status_arguments(STATUS, "KEY_CREATED") is None
    assert status_arguments("[GNUPG:] \n", "ENC_TO") is None


def test_parse_created_fingerprint() -> None:
    status = (
        "[GNUPG:] KEY_CONSIDERED AAAABBBBCCCCDDDDEEEEFFFF0123456789ABCDEF 0\n"
        "[GNUPG:] KEY_CREATED B AAAABBBBCCCCDDDDEEEEFFFF0123456789ABCDEF\n"
    )

    assert parse_created_fingerprint(status) == "AAAABBBBCCCCDDDDEEEEFFFF0123456789ABCDEF"


@pytest.mark.parametrize("status", ["", "[GNUPG:] KEY_CREATED B\n", STATUS])
def test_parse_created_fingerprint_missing(status: str) -> None:
    assert parse_created_fingerprint(status) is None


def test_clean_diagnostic_strips_prefix_and_joins_lines() -> None:
    stderr = "gpg: decryption failed: No secret key\ngpg: another line"

    assert clean_diagnostic(stderr) == "decryption failed: No secret key. gpg: another line"


def test_clean_diagnostic_empty() -> None:
    assert clean_diagnostic(None) == ""
    assert clean_diagnostic("") == ""


def test_check_signature_verdict_good_signature() -> None:
    text = 'gpg: Signature made Sun Sep 13 12:26:40 2020 UTC\ngpg: Good signature from "Jane"\n'

    verdict = check_signature_verdict(text, b"payload")

    assert verdict.message == b"payload"
    assert verdict.diagnostic_text == text
    assert verdict.is_good


def test_check_signature_verdict_untrusted_signature_is_not_an_error() -> None:
    text = (
        'gpg: Good signature from "Jane"\n'
        "gpg: WARNING: This key is not certified with a trusted signature!\n"
    )

    verdict = check_signature_verdict(text)

    assert verdict.message is None
    assert "WARNING" in verdict.diagnostic_text


def test_check_signature_verdict_bad_signature_raises() -> None:
    text = 'gpg: BAD signature from "Jane Doe <jane@example.com>"\n'

    with pytest.raises(BadSignatureError) as exc_info:
        check_signature_verdict(text)

    assert exc_info.value.diagnostic_text == text


def test_is_symmetric_marker_present() -> None:
    stderr = (
        "gpg: AES256.CFB encrypted data\n"
        "gpg: encrypted with 1 passphrase\n"
        "gpg: decryption failed: Bad session key\n"
    )

    assert is_symmetric_marker_present(stderr)
    assert not is_symmetric_marker_present("gpg: encrypted with 2048-bit RSA key\n")
    assert not is_symmetric_marker_present(None)


def test_parse_signer_key_id_legacy_engine() -> None:
    stderr = "gpg: Signature made Sun Sep 13 12:26:40 2020 UTC using RSA key ID 89ABCDEF\n"

    assert parse_signer_key_id(stderr) == "89ABCDEF"


def test_parse_signer_key_id_long_key_id() -> None:
    stderr = (
        "gpg: Signature made Sun Sep 13 12:26:40 2020 UTC\n"
        "gpg:                using RSA key 0123456789ABCDEF\n"
        "gpg: Can't check signature: No public key\n"
    )

    assert parse_signer_key_id(stderr) == "89ABCDEF"


def test_parse_signer_key_id_fingerprint() -> None:
    stderr = (
        "gpg: Signature made Sun Sep 13 12:26:40 2020 UTC\n"
        "gpg:                using RSA key AAAABBBBCCCCDDDDEEEEFFFF0123456789ABCDEF\n"
        "gpg: Can't check signature: No public key\n"
    )

    assert parse_signer_key_id(stderr) == "89ABCDEF"


def test_parse_signer_key_id_none_without_signature_line() -> None:
    assert parse_signer_key_id("gpg: no valid OpenPGP data found.\n") is None
    assert parse_signer_key_id(None) is None
