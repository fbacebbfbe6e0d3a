import logging
from pathlib import Path
from typing import Optional, Union

from . import config
from .decoding.resolver import ByteSourceResolver
from .descriptor import SmartFile
from .inspection.hasher import FileHasher
from .inspection.sniffer import ContentSniffer
from .models import InputSpec
from .staging.filesystem import LocalFilesystem
from .staging.writer import StagingWriter


class DataIngestor:
    def __init__(self, filesystem: Optional[LocalFilesystem] = None):
        self.fs = filesystem or LocalFilesystem()
        self.resolver = ByteSourceResolver(self.fs)
        self.writer = StagingWriter(self.fs)
        self.sniffer = ContentSniffer(self.fs)
        self.hasher = FileHasher(self.fs)

    def ingest(self, spec: InputSpec) -> SmartFile:
        """
        Runs the ingestion pipeline.
        1. Check the staging directory (no side effects yet)
        2. Resolve the input to bytes or a source file
        3. Stage it under a random temp name
        4. Sniff the content type and rename to carry the extension
        5. Hash and measure the final file
        6. Hand the file over to a SmartFile

        Any failure after step 3 removes the staged file before the error
        propagates. The caller's original file is only deleted (when asked)
        after every step has succeeded.
        """
        # --- Step 1: Configuration ---
        temp_dir = self.writer.check_directory(spec.temp_dir)

        # --- Step 2: Resolution ---
        payload = self.resolver.resolve(spec)

        # --- Step 3: Staging ---
        staged = self.writer.stage(payload, temp_dir)

        try:
            # --- Step 4: Sniffing ---
            sniffed = self.sniffer.sniff(staged)
            staged = self.sniffer.apply_extension(staged, sniffed)

            # --- Step 5: Fingerprint & Size ---
            fingerprint = self.hasher.compute_hash(staged.path, spec.hash_algorithm)
            size = self.hasher.compute_size(staged.path)

            # --- Step 6: Hand-off ---
            descriptor = SmartFile(
                hash=fingerprint,
                path=staged.path,
                name=payload.name,
                mime_type=sniffed.mime_type,
                size=size,
                auto_delete=spec.auto_delete,
                extension=sniffed.extension,
                check_path=False,
            )
        except BaseException:
            # Also on KeyboardInterrupt; apply_extension already removed the file if the rename failed
            self.fs.discard(staged.path)
            raise

        logging.info(f"Ingested {descriptor.name} as {descriptor.mime_type} ({descriptor.size} bytes) -> {descriptor.path}")

        if spec.delete_original and payload.source_path is not None:
            self._delete_original(payload.source_path)

        return descriptor

    def _delete_original(self, path: Path):
        # The ingested copy is already complete; a failure here must not undo it
        try:
            self.fs.remove(path)
            logging.debug(f"Deleted original {path}")
        except OSError as e:
            logging.warning(f"Failed to delete original file {path}: {e}")


def ingest(data: str,
           temp_dir: Optional[Union[str, Path]] = None,
           hash_algorithm: str = config.DEFAULT_HASH_ALGORITHM,
           assume_base64: bool = False,
           delete_original: bool = False,
           auto_delete: bool = True,
           display_name: Optional[str] = None,
           filesystem: Optional[LocalFilesystem] = None) -> SmartFile:
    """
    Ingests a data URI, a bare base64 payload (with assume_base64) or a local
    file path and returns a SmartFile describing the staged copy.

    Raises a DataIntakeError subclass on failure; see exceptions.py.
    """
    spec = InputSpec(
        raw=data,
        display_name=display_name,
        hash_algorithm=hash_algorithm,
        temp_dir=Path(temp_dir) if temp_dir is not None else None,
        assume_base64=assume_base64,
        delete_original=delete_original,
        auto_delete=auto_delete,
    )
    return DataIngestor(filesystem).ingest(spec)
