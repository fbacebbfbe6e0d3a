import csv
import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import filetype
from PIL import Image

from .. import config
from ..exceptions import ErrorKind, InspectionError, StagingError
from ..filetypes import FileType, classify, extension_for, is_valid_mime_type, mime_type_for
from ..models import SniffResult, StagedFile
from ..staging.filesystem import LocalFilesystem

# (mime_type, extension hint)
Guess = Tuple[str, Optional[str]]

# Control characters tolerated in text files
TEXT_CONTROL_CHARS = {'\t', '\n', '\r', '\f', '\b', '\x1b'}


class ContentSniffer:
    """
    Determines the media type and extension of a staged file from its bytes.

    Strategies, first match wins:
      1. Magic bytes via 'filetype' (binary formats: images, PDF, archives, Office).
      2. Text inspection (JSON, JSON Lines, XML, SVG, HTML, CSV, plain text).
      3. Pillow, for image formats 'filetype' has no signature for.
      4. Fallback to bin / application/octet-stream.
    Unknown content is a normal outcome; only I/O errors raise.
    """

    def __init__(self, filesystem: Optional[LocalFilesystem] = None):
        self.fs = filesystem or LocalFilesystem()

    def sniff(self, staged: StagedFile) -> SniffResult:
        try:
            size = self.fs.size(staged.path)
            head = self.fs.read_head(staged.path, max(config.SNIFF_HEADER_SIZE, config.TEXT_SNIFF_MAX_BYTES))
        except OSError as e:
            raise InspectionError(ErrorKind.GENERATING_MIME_TYPE_FAILED, path=staged.path) from e

        guess = (
            self._match_magic(head)
            or self._match_text(head, truncated=size > len(head))
            or self._match_image(staged.path)
        )

        result = self._resolve(guess)
        logging.debug(f"Sniffed {staged.path}: {result.mime_type} (.{result.extension})")
        return result

    def apply_extension(self, staged: StagedFile, result: SniffResult) -> StagedFile:
        """Renames the staged file to <tempname>.<ext>. The file is removed if this fails."""
        target = staged.path.with_name(f"{staged.basename}.{result.extension}")
        try:
            self.fs.rename(staged.path, target)
        except OSError as e:
            self.fs.discard(staged.path)
            raise StagingError(
                ErrorKind.RENAMING_TEMPORARY_FILE_FAILED,
                f'Renaming "{staged.path}" to "{target}" failed.',
                path=staged.path,
            ) from e
        return StagedFile(target)

    # --- Strategies ---

    def _match_magic(self, head: bytes) -> Optional[Guess]:
        if not head:
            return None
        kind = filetype.guess(head[:config.SNIFF_HEADER_SIZE])
        if kind is None:
            return None
        return kind.mime, kind.extension

    def _match_text(self, head: bytes, truncated: bool) -> Optional[Guess]:
        if not head:
            return mime_type_for(FileType.TXT), None

        if b'\x00' in head:
            return None

        try:
            text = head.decode('utf-8')
        except UnicodeDecodeError as e:
            # A multi-byte character may be cut off at the sample boundary
            if not truncated or e.start < len(head) - 3:
                return None
            text = head[:e.start].decode('utf-8')

        if any(ord(ch) < 32 and ch not in TEXT_CONTROL_CHARS or ord(ch) == 127 for ch in text):
            return None

        body = text.strip()
        if truncated:
            # Only whole lines are meaningful in a sample
            body = body.rsplit('\n', 1)[0]

        if not truncated:
            if _is_json(body):
                return mime_type_for(FileType.JSON), None
            if _is_json_lines(body):
                return mime_type_for(FileType.JSONL), None

        prefix = body[:1024].lower()
        if prefix.startswith('<?xml') or prefix.startswith('<svg'):
            if '<svg' in prefix:
                return mime_type_for(FileType.SVG), None
            return mime_type_for(FileType.XML), None
        if prefix.startswith('<!doctype html') or prefix.startswith('<html'):
            return mime_type_for(FileType.HTML), None
        if _is_csv(body):
            return mime_type_for(FileType.CSV), None

        return mime_type_for(FileType.TXT), None

    def _match_image(self, path: Path) -> Optional[Guess]:
        try:
            with self.fs.open_binary(path) as fp, Image.open(fp) as img:
                mime = img.get_format_mimetype()
                fmt = img.format
        except Exception as e:
            logging.debug(f"Pillow could not identify {path}: {e}")
            return None

        if not mime:
            return None
        return mime, (fmt or '').lower() or None

    def _resolve(self, guess: Optional[Guess]) -> SniffResult:
        fallback = SniffResult(config.FALLBACK_EXTENSION, config.FALLBACK_MIME_TYPE)
        if guess is None:
            return fallback

        mime, ext_hint = guess
        mime = mime.split(';', 1)[0].strip().lower()
        if not is_valid_mime_type(mime):
            return fallback

        ftype = classify(mime)
        if ftype is not FileType.OTHER:
            return SniffResult(extension_for(ftype), mime_type_for(ftype))

        # Recognised by a probe but not in our table: trust the probe's extension
        ext = (ext_hint or '').strip().lower().lstrip('.')
        if not ext.isalnum():
            ext = config.FALLBACK_EXTENSION
        return SniffResult(ext, mime)


def _is_json(body: str) -> bool:
    if not body or body[0] not in '{[':
        return False
    try:
        return isinstance(json.loads(body), (dict, list))
    except ValueError:
        return False


def _is_json_lines(body: str) -> bool:
    lines = [line for line in body.splitlines() if line.strip()]
    if len(lines) < 2:
        return False
    return all(_is_json(line.strip()) for line in lines)


def _is_csv(body: str) -> bool:
    lines = [line for line in body.splitlines() if line.strip()]
    if len(lines) < 2:
        return False
    try:
        widths = {len(row) for row in csv.reader(lines)}
    except csv.Error:
        return False
    return len(widths) == 1 and widths.pop() > 1
