"""
Filesystem primitives used by the pipeline.

The pipeline receives a LocalFilesystem instance instead of calling os and
shutil directly, so a test (or an embedding application) can substitute one
that fails at a chosen step. Every method reports problems as OSError.
"""
import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO


class LocalFilesystem:
    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def is_directory(self, path: Path) -> bool:
        return os.path.isdir(path)

    def is_file(self, path: Path) -> bool:
        return os.path.isfile(path)

    def is_readable(self, path: Path) -> bool:
        return os.access(path, os.R_OK)

    def is_writable_directory(self, path: Path) -> bool:
        # Creating entries needs both write and search permission
        return os.path.isdir(path) and os.access(path, os.W_OK | os.X_OK)

    def create_exclusive(self, path: Path) -> None:
        """Creates an empty file, raising FileExistsError if the name is taken."""
        fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o600)
        os.close(fd)

    def open_binary(self, path: Path) -> BinaryIO:
        return open(path, 'rb')

    def read_head(self, path: Path, size: int) -> bytes:
        with open(path, 'rb') as f:
            return f.read(size)

    def write_all(self, path: Path, data: bytes) -> None:
        """Writes and fsyncs the bytes so they are durable once this returns."""
        with open(path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

    def copy(self, src: Path, dest: Path) -> None:
        shutil.copyfile(src, dest)

    def rename(self, src: Path, dest: Path) -> None:
        # os.rename silently replaces an existing target on POSIX
        if os.path.lexists(dest):
            raise FileExistsError(f"Rename target already exists: {dest}")
        os.rename(src, dest)

    def remove(self, path: Path) -> bool:
        """Removes the file if present. Returns False when there was nothing to remove."""
        if not os.path.lexists(path):
            return False
        try:
            os.remove(path)
        except FileNotFoundError:
            # Deleted by someone else in the meantime
            return False
        return True

    def size(self, path: Path) -> int:
        return os.stat(path).st_size

    def discard(self, path: Path) -> None:
        """Best-effort removal for failure paths; logs instead of masking the original error."""
        try:
            self.remove(path)
        except OSError as e:
            logging.warning(f"Failed to remove staged file {path}: {e}")
