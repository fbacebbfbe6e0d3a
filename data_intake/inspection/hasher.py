import hashlib
import logging
from pathlib import Path
from typing import Optional, Set

from .. import config
from ..exceptions import ErrorKind, InspectionError
from ..staging.filesystem import LocalFilesystem


def supported_algorithms() -> Set[str]:
    """
    Algorithms that produce a fixed-length hex digest.

    SHAKE variants are excluded because their hexdigest() needs a length.
    """
    return {
        name.lower() for name in hashlib.algorithms_available
        if not name.lower().startswith('shake')
    }


class FileHasher:
    def __init__(self, filesystem: Optional[LocalFilesystem] = None):
        self.fs = filesystem or LocalFilesystem()

    def compute_hash(self, path: Path, algorithm: str = config.DEFAULT_HASH_ALGORITHM) -> str:
        """
        Computes the lowercase hex fingerprint of the file's bytes.

        The file is streamed in HASH_CHUNK_SIZE pieces so large staged
        files are never held in memory twice.
        """
        try:
            h = hashlib.new(algorithm)
        except (ValueError, TypeError) as e:
            raise InspectionError(ErrorKind.GENERATING_HASH_FAILED, path=path, algorithm=algorithm) from e

        try:
            with self.fs.open_binary(path) as f:
                while chunk := f.read(config.HASH_CHUNK_SIZE):
                    h.update(chunk)
        except OSError as e:
            raise InspectionError(ErrorKind.GENERATING_HASH_FAILED, path=path, algorithm=algorithm) from e

        digest = h.hexdigest().lower()
        logging.debug(f"{algorithm} of {path}: {digest}")
        return digest

    def compute_size(self, path: Path) -> int:
        try:
            return self.fs.size(path)
        except OSError as e:
            raise InspectionError(ErrorKind.CALCULATING_FILE_SIZE_FAILED, path=path) from e
