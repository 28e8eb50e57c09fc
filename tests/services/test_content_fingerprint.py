import doctest

from doc_locator.services import compute_fingerprint, content_fingerprint


def test_doctests():
    failures, _ = doctest.testmod(content_fingerprint)
    assert failures == 0


def test_known_values():
    assert compute_fingerprint("") == "0"
    assert compute_fingerprint("a") == "2p"
    # 97 * 31 + 98 = 3105
    assert compute_fingerprint("ab") == "2e9"


def test_only_leading_characters_count():
    prefix = "x" * 100
    assert compute_fingerprint(prefix + "tail one") == compute_fingerprint(prefix + "tail two")
    assert compute_fingerprint("abc", length=2) == compute_fingerprint("abd", length=2)


def test_long_text_wraps_to_signed_32_bit():
    value = compute_fingerprint("The quick brown fox jumps over the lazy dog")
    digits = value.lstrip("-")
    assert digits and all(ch in "0123456789abcdefghijklmnopqrstuvwxyz" for ch in digits)
    assert int(value, 36) >= -(2 ** 31)
    assert int(value, 36) < 2 ** 31


def test_different_text_gives_different_fingerprint():
    assert compute_fingerprint("Hello world") != compute_fingerprint("Hello World")


def test_astral_characters_hash_as_surrogate_pairs():
    # U+1F600 is 0xD83D 0xDE00 in UTF-16: 55357 * 31 + 56832 = 1772899
    assert compute_fingerprint("\U0001F600") == "11zz7"
    assert compute_fingerprint("\U0001F600 tail", length=2) == compute_fingerprint("\U0001F600")
