from pgp_engine.parsing.fingerprints import parse_fingerprints, parse_listing_keyid

COLON_LISTING = """\
tru::1:1600000000:0:3:1:5
pub:-:2048:1:0123456789ABCDEF:1600000000:::-:::scESC::::::23::0:
fpr:::::::::AAAABBBBCCCCDDDDEEEEFFFF0123456789ABCDEF:
uid:-::::1600000000::HASH::Jane Doe <jane@example.com>::::::::::0:
sub:-:2048:1:FEDCBA9876543210:1600000000::::::e::::::23:
fpr:::::::::11112222333344445555666677778888FEDCBA98:
pub:-:2048:1:1111222233334444:1600000000:::-:::scESC::::::23::0:
fpr:::::::::99998888777766665555444433331111222233334444:
"""


def test_parse_fingerprints_pairs_pub_with_next_fpr() -> None:
    fingerprints = parse_fingerprints(COLON_LISTING)

    assert fingerprints == {
        "0x0123456789ABCDEF": "AAAABBBBCCCCDDDDEEEEFFFF0123456789ABCDEF",
        "0x1111222233334444": "99998888777766665555444433331111222233334444",
    }


def test_parse_fingerprints_ignores_subkey_fingerprints() -> None:
    fingerprints = parse_fingerprints(COLON_LISTING)

    assert "11112222333344445555666677778888FEDCBA98" not in fingerprints.values()


def test_parse_fingerprints_keeps_last_16_digits_of_keyid() -> None:
    listing = "pub:-:2048:1:XXXX0123456789ABCDEF:::\nfpr:::::::::FPR:\n"

    assert parse_fingerprints(listing) == {"0x0123456789ABCDEF": "FPR"}


def test_parse_fingerprints_empty_when_nothing_matches() -> None:
    assert parse_fingerprints("") == {}
    assert parse_fingerprints("tru::1:1600000000:0:3:1:5\n") == {}
    assert parse_fingerprints("fpr:::::::::ORPHAN:\n") == {}


def test_parse_listing_keyid_takes_last_16_digits() -> None:
    listing = (
        "pub  2048R/89ABCDEF 2020-09-13 Jane Doe <jane@example.com>\n"
        "      Key fingerprint = AAAA BBBB CCCC DDDD EEEE  FFFF 0123 4567 89AB CDEF\n"
    )

    assert parse_listing_keyid(listing) == "0123456789ABCDEF"


def test_parse_listing_keyid_is_case_insensitive() -> None:
    listing = "      key fingerprint = AAAA BBBB CCCC DDDD EEEE  FFFF 0123 4567 89AB CDEF\n"

    assert parse_listing_keyid(listing) == "0123456789ABCDEF"


def test_parse_listing_keyid_none_without_fingerprint() -> None:
    assert parse_listing_keyid("gpg: no valid OpenPGP data found.\n") is None
