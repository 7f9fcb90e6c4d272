"""
Functions for encoding build requests into HTTP request bodies.

URL-only requests are sent as a JSON document. Anything referencing local
data is sent as multipart/form-data: an ``instructions`` part followed by
one part per uploaded file.
"""

import os
import secrets
from pathlib import Path
from typing import Any, Iterator, Tuple, Union

from ..exceptions import UnsupportedFileTypeError
from ..models import (
    BuildRequest,
    FileReference,
    InMemoryHandle,
    LocalPath,
    RemoteURL,
)

JSON_CONTENT_TYPE = "application/json"
OCTET_STREAM = "application/octet-stream"
DEFAULT_FILENAME = "document"
CRLF = b"\r\n"


def new_boundary() -> str:
    """Generate a multipart boundary token."""
    return secrets.token_hex(16)


def _check_reference(file: Any) -> FileReference:
    if not isinstance(file, (LocalPath, InMemoryHandle, RemoteURL)):
        raise UnsupportedFileTypeError(
            f"Unsupported file type: {type(file).__name__}",
            {"type": type(file).__name__},
        )
    return file


def requires_upload(request: BuildRequest) -> bool:
    """Check whether any manifest entry is local data."""
    return any(
        not isinstance(_check_reference(file), RemoteURL)
        for file in request.files.values()
    )


def read_file_content(file: FileReference) -> bytes:
    """
    Read the bytes to upload for a local reference.

    Missing files raise the usual OSError subclasses unchanged.
    """
    if isinstance(file, LocalPath):
        return Path(file.path).read_bytes()
    if isinstance(file, InMemoryHandle):
        content = file.stream.read()
        if isinstance(content, str):
            return content.encode("utf-8")
        return bytes(content)
    raise UnsupportedFileTypeError(
        f"Unsupported file type: {type(file).__name__}",
        {"type": type(file).__name__},
    )


def extract_filename(file: FileReference) -> str:
    """Derive the upload filename, falling back to ``document``."""
    if isinstance(file, LocalPath):
        return os.path.basename(file.path) or DEFAULT_FILENAME
    if isinstance(file, InMemoryHandle) and file.name:
        return os.path.basename(file.name) or DEFAULT_FILENAME
    return DEFAULT_FILENAME


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', "%22")


def _iter_multipart(request: BuildRequest, boundary: str) -> Iterator[bytes]:
    delimiter = f"--{boundary}".encode("ascii")

    yield delimiter
    yield b'Content-Disposition: form-data; name="instructions"'
    yield f"Content-Type: {JSON_CONTENT_TYPE}".encode("ascii")
    yield b""
    yield request.instructions.to_json().encode("utf-8")

    for file_key, file in request.files.items():
        if isinstance(file, RemoteURL):
            continue

        content = read_file_content(file)
        filename = extract_filename(file)

        yield delimiter
        yield (
            f'Content-Disposition: form-data; name="{_quote(file_key)}"; '
            f'filename="{_quote(filename)}"'
        ).encode("utf-8")
        yield f"Content-Type: {OCTET_STREAM}".encode("ascii")
        yield b""
        yield content

    yield delimiter + b"--"
    yield b""


def build_multipart_body(request: BuildRequest, boundary: str) -> bytes:
    """Serialise the instructions and every local file into one body."""
    return CRLF.join(_iter_multipart(request, boundary))


def encode_request(
    request: BuildRequest, boundary: str
) -> Tuple[Union[bytes, str], str]:
    """
    Encode a build request for sending.

    Args:
        request: Instructions plus file manifest
        boundary: Multipart delimiter token

    Returns:
        Tuple of (body, content_type header value)

    Raises:
        UnsupportedFileTypeError: If a manifest entry is not a FileReference
    """
    if requires_upload(request):
        content_type = f"multipart/form-data; boundary={boundary}"
        return build_multipart_body(request, boundary), content_type

    return request.instructions.to_json(), JSON_CONTENT_TYPE


def count_uploads(request: BuildRequest) -> int:
    return sum(1 for file in request.files.values() if not isinstance(file, RemoteURL))
