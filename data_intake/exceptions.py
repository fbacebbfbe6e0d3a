"""
Exception hierarchy for the data intake pipeline.

Every failure carries an ErrorKind plus whatever context is needed to
diagnose it (the offending path, the requested hash algorithm). The five
subclasses group the kinds by who can fix the problem.
"""
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class ErrorKind(Enum):
    # Invalid input
    EMPTY_INPUT = "empty input"
    NON_PRINTABLE_INPUT = "non-printable input"
    INVALID_RFC2397_ENCODING = "invalid RFC2397 encoding"
    INVALID_BASE64_ENCODING = "invalid base64 encoding"
    PATH_TOO_LONG = "path too long"
    INVALID_FILE_PATH = "invalid file path"
    INVALID_DATA_PROVIDED = "invalid data provided"

    # Configuration
    TEMP_DIRECTORY_NOT_WRITABLE = "temp directory not writable"
    INVALID_HASH_ALGORITHM = "invalid hash algorithm"

    # Staging
    TEMPORARY_FILE_NOT_WRITTEN = "temporary file not written"
    WRITING_TEMPORARY_FILE_FAILED = "writing temporary file failed"
    RENAMING_TEMPORARY_FILE_FAILED = "renaming temporary file failed"
    DELETING_FILE_FAILED = "deleting file failed"

    # Inspection
    GENERATING_MIME_TYPE_FAILED = "generating mime type failed"
    GENERATING_HASH_FAILED = "generating hash failed"
    CALCULATING_FILE_SIZE_FAILED = "calculating file size failed"

    # Reading
    READING_FILE_FAILED = "reading file failed"
    ENCODING_FILE_FAILED = "encoding file failed"


class DataIntakeError(Exception):
    """Base exception for all data intake errors."""

    def __init__(self,
                 kind: ErrorKind,
                 message: Optional[str] = None,
                 path: Optional[Union[str, Path]] = None,
                 algorithm: Optional[str] = None):
        self.kind = kind
        self.path = Path(path) if path is not None else None
        self.algorithm = algorithm
        super().__init__(message or self._default_message())

    def _default_message(self) -> str:
        msg = self.kind.value[0].upper() + self.kind.value[1:]
        if self.path is not None:
            msg += f' for "{self.path}"'
        if self.algorithm is not None:
            msg += f' using "{self.algorithm}"'
        return msg + '.'


class InvalidInputError(DataIntakeError):
    """Raised when the data to ingest is empty, malformed or not a usable file."""
    pass


class ConfigurationError(DataIntakeError):
    """Raised when the temp directory or hash algorithm cannot be used."""
    pass


class StagingError(DataIntakeError):
    """Raised when creating, writing, renaming or deleting a staged file fails."""
    pass


class InspectionError(DataIntakeError):
    """Raised when the media type, hash or size of a staged file cannot be computed."""
    pass


class ReadError(DataIntakeError):
    """Raised when a descriptor's file can no longer be read or encoded."""
    pass
