import base64
import logging
import os
import weakref
from dataclasses import InitVar, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from . import config
from .exceptions import ErrorKind, ReadError, StagingError
from .filetypes import FileType, classify, is_valid_mime_type
from .keys import generate_key


def encode_file(path: Path, mime_type: str) -> str:
    """Reads a file and renders it as a base64 data URI."""
    try:
        with open(path, 'rb') as f:
            payload = base64.b64encode(f.read()).decode('ascii')
    except OSError as e:
        raise ReadError(ErrorKind.ENCODING_FILE_FAILED, path=path) from e
    return f"data:{mime_type.lower()};base64,{payload}"


def _remove_if_exists(path: str) -> None:
    # Runs from a finalizer: nobody is left to handle an error
    try:
        if os.path.lexists(path):
            os.remove(path)
    except OSError as e:
        logging.debug(f"Auto-delete of {path} failed: {e}")


@dataclass(frozen=True, eq=False)
class SmartFile:
    """
    The result of a successful ingestion: a staged file plus what is known
    about its content.

    When auto_delete is set the file is removed once the SmartFile is
    released, whether by delete(), leaving a `with` block, or garbage
    collection. Removal always checks for existence first, so doing more than
    one of these (or deleting the file out-of-band) is harmless.
    """
    hash: str
    path: Path
    name: Optional[str] = None
    mime_type: str = config.FALLBACK_MIME_TYPE
    size: Optional[int] = None
    auto_delete: bool = True
    extension: Optional[str] = None
    check_path: InitVar[bool] = True

    file_type: FileType = field(init=False)
    key: str = field(init=False)
    _finalizer: Any = field(init=False, repr=False)

    def __post_init__(self, check_path: bool):
        hash_value = (self.hash or '').strip().lower()
        if len(hash_value) < config.MINIMUM_HASH_LENGTH:
            raise ValueError(f'The hash "{hash_value}" must be {config.MINIMUM_HASH_LENGTH} or more characters.')

        if not str(self.path or '').strip():
            raise ValueError("The path cannot be empty.")
        path = Path(self.path)

        if check_path:
            if not path.exists():
                raise ValueError(f'The file "{path}" does not exist.')
            if not path.is_file():
                raise ValueError(f'The path "{path}" is not a file.')
            if not os.access(path, os.R_OK):
                raise ValueError(f'The file "{path}" is not readable.')

        name = (self.name or '').strip() or path.name

        # Extension comes from the sniffed type, or the file name when built by hand
        extension = (self.extension or path.suffix).strip().lower().lstrip('.') or None
        file_type = classify(extension)

        mime_type = (self.mime_type or '').strip().lower()
        # The sniffer already yields this; it matters for SmartFiles built by hand
        if file_type is FileType.JSONL:
            mime_type = 'application/jsonl'
        if not is_valid_mime_type(mime_type):
            raise ValueError(f'The MIME type "{mime_type}" is not valid.')

        size = self.size
        if size is None:
            if not check_path:
                raise ValueError("The size is required when the path is not checked.")
            size = path.stat().st_size

        # Frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, 'hash', hash_value)
        object.__setattr__(self, 'path', path)
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'mime_type', mime_type)
        object.__setattr__(self, 'size', max(0, size or 0))
        object.__setattr__(self, 'extension', extension)
        object.__setattr__(self, 'file_type', file_type)
        object.__setattr__(self, 'key', generate_key(hash_value, extension))

        finalizer = None
        if self.auto_delete:
            finalizer = weakref.finalize(self, _remove_if_exists, str(path))
        object.__setattr__(self, '_finalizer', finalizer)

    def __str__(self) -> str:
        return str(self.path)

    def __enter__(self) -> 'SmartFile':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def basename(self) -> str:
        return self.path.name

    @property
    def directory(self) -> Path:
        return self.path.resolve().parent

    def equals(self, other: 'SmartFile', strict: bool = False) -> bool:
        """Same content (hash). With strict, also the same copy on disk (path)."""
        if self.hash != other.hash:
            return False
        return not strict or self.path == other.path

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise ReadError(ErrorKind.READING_FILE_FAILED, f'Reading the file "{self.path}" failed.', path=self.path) from e

    def to_base64(self) -> str:
        try:
            return base64.b64encode(self.read()).decode('ascii')
        except ReadError as e:
            raise ReadError(ErrorKind.ENCODING_FILE_FAILED, f'Encoding the file "{self.path}" failed.', path=self.path) from e

    def to_data_uri(self) -> str:
        return encode_file(self.path, self.mime_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hash': self.hash,
            'path': str(self.path),
            'name': self.name,
            'mime_type': self.mime_type,
            'extension': self.extension,
            'file_type': self.file_type.value,
            'size': self.size,
            'key': self.key,
            'auto_delete': self.auto_delete,
        }

    def close(self) -> None:
        """Releases the file: removes it now if auto_delete is set, otherwise leaves it alone."""
        if self._finalizer is not None:
            # Calling a finalizer runs it at most once
            self._finalizer()

    def delete(self) -> bool:
        """
        Removes the file regardless of auto_delete. Returns False if it was
        already gone. Safe to call repeatedly and alongside auto-delete.
        """
        try:
            self.path.unlink()
            deleted = True
        except FileNotFoundError:
            deleted = False
        except OSError as e:
            # Leave the finalizer armed so auto-delete can still try later
            raise StagingError(ErrorKind.DELETING_FILE_FAILED, f'Deleting the file "{self.path}" failed.', path=self.path) from e

        if self._finalizer is not None:
            self._finalizer.detach()
        if deleted:
            logging.debug(f"Deleted {self.path}")
        return deleted
