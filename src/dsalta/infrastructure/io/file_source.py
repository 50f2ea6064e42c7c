from __future__ import annotations

import mimetypes
import os
from typing import Any

from ...domain.models import FileInfo, FileReference
from ..http.exceptions import FileReadError

DEFAULT_FILENAME = "file"
DEFAULT_FILE_TYPE = "application/octet-stream"
CHUNK_SIZE = 8192

_BUFFER_TYPES = (bytes, bytearray, memoryview)


def _is_path(file: Any) -> bool:
    return isinstance(file, (str, os.PathLike))


def _is_stream(file: Any) -> bool:
    return callable(getattr(file, "read", None))


def _info_from_name(name: str) -> FileInfo:
    filename = os.path.basename(name) or DEFAULT_FILENAME
    file_type, _ = mimetypes.guess_type(filename)
    return FileInfo(filename=filename, file_type=file_type or DEFAULT_FILE_TYPE)


def resolve_file_info(file: Any) -> FileInfo:
    """
    Derive the display filename and MIME type of a file reference.

    Paths use their last segment and an extension lookup. Streams opened from
    disk carry a string `.name` and are treated the same way. Anything else
    (buffers, anonymous streams, unknown objects) gets the defaults.
    """
    if _is_path(file):
        return _info_from_name(os.fspath(file))

    if not isinstance(file, _BUFFER_TYPES) and _is_stream(file):
        name = getattr(file, "name", None)
        if isinstance(name, str) and name:
            return _info_from_name(name)

    return FileInfo(filename=DEFAULT_FILENAME, file_type=DEFAULT_FILE_TYPE)


def file_to_bytes(file: FileReference) -> bytes:
    """Return the full content of a path, buffer, or binary stream."""
    if isinstance(file, _BUFFER_TYPES):
        return bytes(file)

    if _is_path(file):
        try:
            with open(file, "rb") as f:
                return f.read()
        except (OSError, ValueError) as e:
            raise FileReadError(f"Failed to read file: {e}") from e

    if _is_stream(file):
        chunks: list[bytes] = []
        try:
            for chunk in iter(lambda: file.read(CHUNK_SIZE), b""):
                if not chunk:
                    break
                if isinstance(chunk, str):
                    raise TypeError("Stream must be opened in binary mode")
                chunks.append(bytes(chunk))
        except Exception as e:
            raise FileReadError(f"Failed to read file: {e}") from e
        return b"".join(chunks)

    raise TypeError(
        f"Unsupported file reference {type(file).__name__}; "
        "expected a path, bytes, or a binary stream"
    )
