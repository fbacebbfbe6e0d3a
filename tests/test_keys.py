import pytest

from data_intake.keys import generate_key

HASH = "9a0364b9e99bb480dd25e1f0284c8555"


def test_key_with_extension():
    assert generate_key(HASH, "png") == f"9a/03/{HASH}.png"


def test_key_without_extension():
    assert generate_key(HASH) == f"9a/03/{HASH}"
    assert generate_key(HASH, "") == f"9a/03/{HASH}"


def test_key_is_deterministic():
    assert generate_key(HASH, "txt") == generate_key(HASH, "txt")


def test_minimum_length_hash():
    assert generate_key("abcd", "bin") == "ab/cd/abcd.bin"


def test_short_hash_is_rejected():
    with pytest.raises(ValueError):
        generate_key("abc")
