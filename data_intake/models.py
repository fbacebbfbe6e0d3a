from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import config
from .exceptions import ConfigurationError, ErrorKind, InvalidInputError
from .inspection.hasher import supported_algorithms


@dataclass(frozen=True)
class InputSpec:
    """
    Everything the caller hands to the pipeline. Validated once, on creation.
    """
    raw: str
    display_name: Optional[str] = None
    hash_algorithm: str = config.DEFAULT_HASH_ALGORITHM
    temp_dir: Optional[Path] = None
    assume_base64: bool = False
    delete_original: bool = False
    auto_delete: bool = True

    def __post_init__(self):
        if not isinstance(self.raw, str):
            raise InvalidInputError(
                ErrorKind.INVALID_DATA_PROVIDED,
                f"The data must be a string, got {type(self.raw).__name__}.",
            )

        algorithm = (self.hash_algorithm or '').strip().lower()
        if algorithm not in supported_algorithms():
            raise ConfigurationError(ErrorKind.INVALID_HASH_ALGORITHM, algorithm=self.hash_algorithm)

        name = (self.display_name or '').strip() or None

        # Frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, 'hash_algorithm', algorithm)
        object.__setattr__(self, 'display_name', name)
        if self.temp_dir is not None:
            object.__setattr__(self, 'temp_dir', Path(self.temp_dir))


@dataclass
class RawPayload:
    """
    Resolved input. Exactly one of `data` / `source_path` is set: decoded URIs
    carry their bytes, local files are copied into staging straight from disk.
    """
    data: Optional[bytes] = None
    source_path: Optional[Path] = None
    name: Optional[str] = None
    declared_type: Optional[str] = None  # informational only, never trusted


@dataclass(frozen=True)
class StagedFile:
    path: Path

    @property
    def basename(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class SniffResult:
    extension: str   # lowercase, no leading dot
    mime_type: str   # lowercase token/token
