"""
File type classification.

A single lookup table maps extension and MIME tokens onto a FileType tag.
Lookups are total: anything unrecognised classifies as FileType.OTHER.
"""
import re
from enum import Enum
from typing import Optional

from . import config


class FileType(Enum):
    BIN = 'bin'
    BMP = 'bmp'
    CSS = 'css'
    CSV = 'csv'
    DOC = 'doc'
    DOCX = 'docx'
    GIF = 'gif'
    HEIC = 'heic'
    HEIF = 'heif'
    HTML = 'html'
    JPEG = 'jpeg'
    JSON = 'json'
    JSONL = 'jsonl'
    PDF = 'pdf'
    PNG = 'png'
    SVG = 'svg'
    TIFF = 'tiff'
    TXT = 'txt'
    WEBP = 'webp'
    XLSX = 'xlsx'
    XML = 'xml'
    ZIP = 'zip'
    OTHER = 'other'


# Canonical MIME type per tag
TYPE_TO_MIME = {
    FileType.BIN: 'application/octet-stream',
    FileType.BMP: 'image/bmp',
    FileType.CSS: 'text/css',
    FileType.CSV: 'text/csv',
    FileType.DOC: 'application/msword',
    FileType.DOCX: 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    FileType.GIF: 'image/gif',
    FileType.HEIC: 'image/heic',
    FileType.HEIF: 'image/heif',
    FileType.HTML: 'text/html',
    FileType.JPEG: 'image/jpeg',
    FileType.JSON: 'application/json',
    FileType.JSONL: 'application/jsonl',
    FileType.PDF: 'application/pdf',
    FileType.PNG: 'image/png',
    FileType.SVG: 'image/svg+xml',
    FileType.TIFF: 'image/tiff',
    FileType.TXT: 'text/plain',
    FileType.WEBP: 'image/webp',
    FileType.XLSX: 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    FileType.XML: 'application/xml',
    FileType.ZIP: 'application/zip',
}

# Alternate spellings seen in file names and in the wild
EXTENSION_ALIASES = {
    'jpg': FileType.JPEG,
    'jpe': FileType.JPEG,
    'tif': FileType.TIFF,
    'htm': FileType.HTML,
    'text': FileType.TXT,
    'ndjson': FileType.JSONL,
}

MIME_ALIASES = {
    'application/x-empty': FileType.TXT,
    'image/jpg': FileType.JPEG,
    'image/x-ms-bmp': FileType.BMP,
    'text/xml': FileType.XML,
    'application/x-ndjson': FileType.JSONL,
    'application/x-zip-compressed': FileType.ZIP,
}

# Token -> Type Mapping
# Extensions and MIME strings share one table; MIME strings always contain '/'
TOKEN_TO_TYPE = {}
for ftype, mime in TYPE_TO_MIME.items():
    TOKEN_TO_TYPE[ftype.value] = ftype
    TOKEN_TO_TYPE[mime] = ftype
for token, ftype in EXTENSION_ALIASES.items(): TOKEN_TO_TYPE[token] = ftype
for token, ftype in MIME_ALIASES.items(): TOKEN_TO_TYPE[token] = ftype

MIME_TYPE_PATTERN = re.compile(r"^[a-z0-9][a-z0-9!#$&^_.+-]*/[a-z0-9][a-z0-9!#$&^_.+-]*$")


def classify(token: Optional[str]) -> FileType:
    """Classifies an extension ('png', '.PNG') or MIME string ('image/png; q=1')."""
    if not token:
        return FileType.OTHER

    token = token.strip().lower()
    if '/' in token:
        # Drop MIME parameters such as charset
        token = token.split(';', 1)[0].strip()
    else:
        token = token.lstrip('.')

    return TOKEN_TO_TYPE.get(token, FileType.OTHER)


def extension_for(ftype: FileType) -> Optional[str]:
    if ftype is FileType.OTHER:
        return None
    return ftype.value


def mime_type_for(ftype: FileType) -> Optional[str]:
    return TYPE_TO_MIME.get(ftype)


def is_image(ftype: FileType) -> bool:
    return ftype.value in config.IMAGE_EXTS


def is_document(ftype: FileType) -> bool:
    return ftype.value in config.DOCUMENT_EXTS


def is_text(ftype: FileType) -> bool:
    return ftype.value in config.TEXT_EXTS


def is_archive(ftype: FileType) -> bool:
    return ftype.value in config.ARCHIVE_EXTS


def is_binary(ftype: FileType) -> bool:
    """Opaque bytes: either sniffed as octet-stream or not classified at all."""
    return ftype in (FileType.BIN, FileType.OTHER)


def is_valid_mime_type(value: Optional[str]) -> bool:
    """True for lowercase 'token/token' strings without parameters."""
    return bool(value) and MIME_TYPE_PATTERN.match(value) is not None
