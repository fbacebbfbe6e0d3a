import pytest

from data_intake.filetypes import (
    FileType, classify, extension_for, is_binary, is_document, is_image,
    is_text, is_valid_mime_type, mime_type_for,
)


@pytest.mark.parametrize(
    "token,expected",
    [
        ("png", FileType.PNG),
        (".PNG", FileType.PNG),
        ("jpg", FileType.JPEG),
        ("image/jpeg", FileType.JPEG),
        ("tif", FileType.TIFF),
        ("text/plain; charset=utf-8", FileType.TXT),
        ("application/x-empty", FileType.TXT),
        ("application/json", FileType.JSON),
        ("jsonl", FileType.JSONL),
        ("application/octet-stream", FileType.BIN),
        ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", FileType.XLSX),
        ("xyz", FileType.OTHER),
        ("audio/mpeg", FileType.OTHER),
        ("", FileType.OTHER),
        (None, FileType.OTHER),
    ],
)
def test_classify(token, expected):
    assert classify(token) == expected


def test_extension_and_mime_lookup():
    assert extension_for(FileType.JPEG) == "jpeg"
    assert mime_type_for(FileType.PNG) == "image/png"
    assert extension_for(FileType.OTHER) is None
    assert mime_type_for(FileType.OTHER) is None


def test_predicates():
    assert is_image(FileType.PNG)
    assert not is_image(FileType.PDF)
    assert is_document(FileType.PDF)
    assert is_text(FileType.JSON)
    assert not is_text(FileType.PNG)
    assert is_binary(FileType.BIN)
    assert is_binary(FileType.OTHER)
    assert not is_binary(FileType.TXT)


@pytest.mark.parametrize(
    "value,valid",
    [
        ("image/png", True),
        ("image/svg+xml", True),
        ("application/vnd.ms-excel", True),
        ("Image/PNG", False),
        ("text/plain; charset=utf-8", False),
        ("png", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_mime_type(value, valid):
    assert is_valid_mime_type(value) is valid
