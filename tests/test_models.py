from pathlib import Path

import pytest

from data_intake.exceptions import ConfigurationError, ErrorKind, InvalidInputError
from data_intake.models import InputSpec


def test_defaults():
    spec = InputSpec(raw="data:,x")
    assert spec.hash_algorithm == "sha256"
    assert spec.auto_delete is True
    assert spec.delete_original is False
    assert spec.assume_base64 is False
    assert spec.temp_dir is None


def test_normalizes_fields(tmp_path):
    spec = InputSpec(raw="data:,x", hash_algorithm=" SHA1 ", display_name="   ", temp_dir=str(tmp_path))
    assert spec.hash_algorithm == "sha1"
    assert spec.display_name is None
    assert spec.temp_dir == Path(tmp_path)


@pytest.mark.parametrize("algo", ["not-a-real-algo", "", "shake_128"])
def test_rejects_unsupported_hash_algorithm(algo):
    with pytest.raises(ConfigurationError) as exc:
        InputSpec(raw="data:,x", hash_algorithm=algo)
    assert exc.value.kind == ErrorKind.INVALID_HASH_ALGORITHM
    assert exc.value.algorithm == algo


def test_rejects_non_string_data():
    with pytest.raises(InvalidInputError):
        InputSpec(raw=None)


def test_is_immutable():
    spec = InputSpec(raw="data:,x")
    with pytest.raises(AttributeError):
        spec.raw = "other"
