import base64
import binascii
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote_to_bytes

from .. import config
from ..exceptions import ErrorKind, InvalidInputError
from ..filetypes import is_valid_mime_type
from ..models import InputSpec, RawPayload
from ..staging.filesystem import LocalFilesystem

DATA_URI_SCHEME = 'data:'
BASE64_MARKER = ';base64'


class ByteSourceResolver:
    """
    Turns the caller's string into raw bytes (or a readable source file).

    Accepted shapes, checked in this order:
      - RFC2397 data URI:  data:[<mediatype>][;base64],<data>
      - bare base64 payload, when the spec sets assume_base64
      - path to an existing, readable regular file
    Resolution is read-only; nothing is written here.
    """

    def __init__(self, filesystem: Optional[LocalFilesystem] = None):
        self.fs = filesystem or LocalFilesystem()

    def resolve(self, spec: InputSpec) -> RawPayload:
        data = spec.raw.strip()

        if not data:
            raise InvalidInputError(ErrorKind.EMPTY_INPUT, "The data cannot be empty.")

        if not data.isprintable():
            raise InvalidInputError(
                ErrorKind.NON_PRINTABLE_INPUT,
                "The data cannot contain non-printable, control, or NULL characters.",
            )

        is_data_uri = data[:len(DATA_URI_SCHEME)].lower() == DATA_URI_SCHEME

        if spec.assume_base64 and not is_data_uri:
            data = f"data:{config.FALLBACK_MIME_TYPE};base64,{data}"
            is_data_uri = True

        if is_data_uri:
            payload = self._decode_data_uri(data)
        else:
            payload = self._resolve_file(data)

        if spec.display_name:
            payload.name = spec.display_name

        return payload

    def _decode_data_uri(self, uri: str) -> RawPayload:
        # Everything up to the first comma is the media type segment
        header, sep, encoded = uri[len(DATA_URI_SCHEME):].partition(',')
        if not sep:
            raise InvalidInputError(
                ErrorKind.INVALID_RFC2397_ENCODING,
                "The data URI has no ',' separating the media type from the data.",
            )

        is_base64 = header.lower().endswith(BASE64_MARKER)
        if is_base64:
            header = header[:-len(BASE64_MARKER)]

        media_type = header.split(';', 1)[0].strip().lower()
        if media_type and not is_valid_mime_type(media_type):
            raise InvalidInputError(
                ErrorKind.INVALID_RFC2397_ENCODING,
                f'The data URI media type "{media_type}" is not a valid MIME type.',
            )

        if is_base64:
            try:
                # validate=True rejects characters outside the alphabet
                data = base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as e:
                raise InvalidInputError(
                    ErrorKind.INVALID_BASE64_ENCODING,
                    f"The data URI payload is not valid base64: {e}",
                ) from e
        else:
            data = unquote_to_bytes(encoded)

        if not data:
            raise InvalidInputError(ErrorKind.EMPTY_INPUT, "The data URI payload is empty.")

        logging.debug(f"Decoded data URI ({'base64' if is_base64 else 'literal'}): {len(data)} bytes")
        return RawPayload(data=data, declared_type=media_type or None)

    def _resolve_file(self, data: str) -> RawPayload:
        if len(data) > config.MAX_PATH_LENGTH:
            raise InvalidInputError(
                ErrorKind.PATH_TOO_LONG,
                f"The data is longer than the maximum path length of {config.MAX_PATH_LENGTH} characters.",
            )

        path = Path(data)

        if not self.fs.exists(path):
            # Neither a data URI nor something on disk
            raise InvalidInputError(ErrorKind.INVALID_DATA_PROVIDED)

        if self.fs.is_directory(path):
            raise InvalidInputError(ErrorKind.INVALID_FILE_PATH, f'The path "{path}" is a directory.', path=path)

        if not self.fs.is_file(path):
            raise InvalidInputError(ErrorKind.INVALID_FILE_PATH, f'The path "{path}" is not a regular file.', path=path)

        if not self.fs.is_readable(path):
            raise InvalidInputError(ErrorKind.INVALID_FILE_PATH, f'The file "{path}" is not readable.', path=path)

        try:
            empty = self.fs.size(path) == 0
        except OSError as e:
            raise InvalidInputError(ErrorKind.INVALID_FILE_PATH, f'The file "{path}" could not be inspected.', path=path) from e
        if empty:
            raise InvalidInputError(ErrorKind.EMPTY_INPUT, f'The file "{path}" is empty.', path=path)

        logging.debug(f"Resolved local file {path}")
        return RawPayload(source_path=path, name=path.name)
