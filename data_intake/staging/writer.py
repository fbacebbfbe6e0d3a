import logging
import secrets
import tempfile
from pathlib import Path
from typing import Optional

from .. import config
from ..exceptions import ConfigurationError, ErrorKind, StagingError
from ..models import RawPayload, StagedFile
from .filesystem import LocalFilesystem


def random_name(length: int = config.RANDOM_NAME_LENGTH) -> str:
    return ''.join(secrets.choice(config.RANDOM_NAME_ALPHABET) for _ in range(max(1, length)))


class StagingWriter:
    """
    Materializes a RawPayload as a uniquely named file in the temp directory.

    Postcondition of stage(): exactly one new file exists, holding exactly the
    payload's bytes. On any failure the partially written file is removed
    before the error is raised.
    """

    def __init__(self, filesystem: Optional[LocalFilesystem] = None):
        self.fs = filesystem or LocalFilesystem()

    def check_directory(self, temp_dir: Optional[Path] = None) -> Path:
        """Resolves the staging directory, failing if files cannot be created there."""
        directory = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())

        if not self.fs.is_writable_directory(directory):
            raise ConfigurationError(
                ErrorKind.TEMP_DIRECTORY_NOT_WRITABLE,
                f'The temp directory "{directory}" does not exist or is not writable.',
                path=directory,
            )
        return directory

    def stage(self, payload: RawPayload, directory: Path) -> StagedFile:
        staged = self._reserve(directory)

        try:
            if payload.source_path is not None:
                # Copy straight from disk instead of reading the file into memory
                self.fs.copy(payload.source_path, staged.path)
                expected = self.fs.size(payload.source_path)
            else:
                self.fs.write_all(staged.path, payload.data or b'')
                expected = len(payload.data or b'')

            written = self.fs.size(staged.path)
            if written != expected:
                raise OSError(f"Short write: {written} of {expected} bytes")
        except OSError as e:
            self.fs.discard(staged.path)
            raise StagingError(ErrorKind.WRITING_TEMPORARY_FILE_FAILED, path=staged.path) from e
        except BaseException:
            self.fs.discard(staged.path)
            raise

        logging.debug(f"Staged {expected} bytes at {staged.path}")
        return staged

    def _reserve(self, directory: Path) -> StagedFile:
        """Creates the staging file exclusively, retrying once on a name collision."""
        last_error: Optional[OSError] = None

        for _ in range(config.TEMP_FILE_ATTEMPTS):
            path = directory / f"{config.TEMP_FILE_PREFIX}{random_name()}"
            try:
                self.fs.create_exclusive(path)
                return StagedFile(path)
            except FileExistsError as e:
                logging.debug(f"Temp name collision on {path}, retrying")
                last_error = e
            except OSError as e:
                raise StagingError(ErrorKind.TEMPORARY_FILE_NOT_WRITTEN, path=path) from e

        raise StagingError(ErrorKind.TEMPORARY_FILE_NOT_WRITTEN, path=directory) from last_error
