"""Encoder for multipart/form-data file attachment uploads."""

import logging
import mimetypes
import os
import uuid
from typing import Any, Mapping

from .models import FileError

logger = logging.getLogger(__name__)

UPLOAD_MARKER = "@"
FILENAME_SUFFIX = "#filename"
BOUNDARY_PREFIX = "------------------------"
CRLF = b"\r\n"


def make_boundary() -> str:
    """Generate a fresh boundary token for one request."""
    return BOUNDARY_PREFIX + uuid.uuid4().hex


def upload_fields(
    field: str,
    path: str | os.PathLike,
    filename: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """
    Build an upload field mapping for a single file.

    Args:
        field: Form field name for the file part
        path: Path of the file to upload
        filename: Optional filename to report instead of the path's base name
        **extra: Additional literal form fields

    Returns:
        Field mapping accepted by encode_multipart
    """
    fields: dict[str, Any] = {field: UPLOAD_MARKER + os.fspath(path)}
    if filename:
        fields[field + FILENAME_SUFFIX] = filename
    fields.update(extra)
    return fields


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    return str(value).encode("utf-8")


def _file_part(boundary: str, field: str, path: str, name: str) -> bytes:
    try:
        with open(path, "rb") as f:
            content = f.read()
    except OSError as e:
        raise FileError(f"Failed to read upload file {path}: {e}") from e

    lines = [
        f"--{boundary}".encode("utf-8"),
        f'Content-Disposition: form-data; name="{field}"; filename="{name}"'.encode("utf-8"),
    ]
    mime_type, _ = mimetypes.guess_type(path)
    if mime_type:
        lines.append(f"Content-Type: {mime_type}".encode("utf-8"))

    logger.debug(f"Encoded file part '{field}' from {path} ({len(content)} bytes)")
    return CRLF.join(lines) + CRLF + CRLF + content + CRLF


def _value_part(boundary: str, field: str, value: Any) -> bytes:
    header = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="{field}"\r\n\r\n'
    ).encode("utf-8")
    return header + _to_bytes(value) + CRLF


def encode_multipart(
    fields: Mapping[str, Any],
    boundary: str | None = None,
) -> tuple[bytes, str]:
    """
    Encode form fields into a multipart/form-data payload.

    A value of the form "@<path>" naming an existing file becomes a file part.
    The reported filename is the base name of "<field>#filename" when that key
    is present, otherwise the base name of the path. A Content-Type line is
    written only when the MIME type can be guessed. Any other value, including
    "@<path>" for a missing file, becomes a plain value part.

    Args:
        fields: Mapping of field names to literal values or "@<path>" references
        boundary: Boundary token to use (generated when omitted)

    Returns:
        Tuple of (payload bytes, Content-Type header value)

    Raises:
        FileError: If an existing upload file cannot be read
    """
    if boundary is None:
        boundary = make_boundary()

    payload = bytearray()
    for field, value in fields.items():
        if field.endswith(FILENAME_SUFFIX):
            continue

        if isinstance(value, str) and value.startswith(UPLOAD_MARKER):
            path = value[len(UPLOAD_MARKER):]
            if os.path.isfile(path):
                name = os.path.basename(path)
                override = fields.get(field + FILENAME_SUFFIX)
                if override:
                    name = os.path.basename(str(override))
                payload += _file_part(boundary, field, path, name)
                continue
            logger.debug(f"Upload file {path} not found; sending '{field}' as a literal value")

        payload += _value_part(boundary, field, value)

    payload += f"--{boundary}--\r\n".encode("utf-8")
    return bytes(payload), f"multipart/form-data; boundary={boundary}"
