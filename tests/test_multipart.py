"""Tests for the multipart/form-data encoder."""

import os
from unittest.mock import patch

import pytest

from insightly_client.core.models import FileError
from insightly_client.core.multipart import (
    BOUNDARY_PREFIX,
    encode_multipart,
    make_boundary,
    upload_fields,
)

BOUNDARY = "------------------------test"


@pytest.fixture
def png_file(tmp_path):
    """Create a small file with a .png name."""
    path = tmp_path / "x.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return path


# ===== Boundary Tests =====

def test_make_boundary_is_unique():
    """Test that each call produces a new boundary."""
    first = make_boundary()
    second = make_boundary()

    assert first != second
    assert first.startswith(BOUNDARY_PREFIX)


def test_content_type_matches_body_boundary():
    """Test that the Content-Type boundary is the one used in the body."""
    payload, content_type = encode_multipart({"name": "value"})

    assert content_type.startswith("multipart/form-data; boundary=")
    boundary = content_type.split("boundary=", 1)[1]
    assert payload.startswith(f"--{boundary}\r\n".encode())
    assert payload.endswith(f"--{boundary}--\r\n".encode())


# ===== Literal Field Tests =====

def test_literal_field_part():
    """Test exact encoding of a literal value."""
    payload, _ = encode_multipart({"name": "value"}, boundary=BOUNDARY)

    assert payload == (
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="name"\r\n'
        "\r\n"
        "value\r\n"
        f"--{BOUNDARY}--\r\n"
    ).encode()


def test_non_string_literal_value():
    """Test that numbers are written as text."""
    payload, _ = encode_multipart({"file_category_id": 7}, boundary=BOUNDARY)
    assert b'name="file_category_id"\r\n\r\n7\r\n' in payload


def test_empty_fields_only_terminator():
    """Test that no fields give just the closing boundary."""
    payload, _ = encode_multipart({}, boundary=BOUNDARY)
    assert payload == f"--{BOUNDARY}--\r\n".encode()


def test_missing_file_becomes_literal():
    """Test that a marker pointing at a missing file is sent as a literal."""
    payload, _ = encode_multipart({"file": "@/nonexistent/path"}, boundary=BOUNDARY)

    assert payload == (
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="file"\r\n'
        "\r\n"
        "@/nonexistent/path\r\n"
        f"--{BOUNDARY}--\r\n"
    ).encode()
    assert b"filename=" not in payload


# ===== File Field Tests =====

def test_file_part_with_filename_override(png_file):
    """Test that the #filename override names the part."""
    fields = {"file": f"@{png_file}", "file#filename": "photo.png"}
    payload, _ = encode_multipart(fields, boundary=BOUNDARY)

    assert b'Content-Disposition: form-data; name="file"; filename="photo.png"\r\n' in payload
    assert b'filename="x.png"' not in payload


def test_file_part_defaults_to_base_name(png_file):
    """Test that the file's base name is used without an override."""
    payload, _ = encode_multipart({"file": f"@{png_file}"}, boundary=BOUNDARY)
    assert b'name="file"; filename="x.png"' in payload


def test_file_part_exact_layout(png_file):
    """Test the full layout of a file part."""
    payload, _ = encode_multipart({"file": f"@{png_file}"}, boundary=BOUNDARY)

    assert payload == (
        f"--{BOUNDARY}\r\n".encode()
        + b'Content-Disposition: form-data; name="file"; filename="x.png"\r\n'
        + b"Content-Type: image/png\r\n"
        + b"\r\n"
        + png_file.read_bytes()
        + b"\r\n"
        + f"--{BOUNDARY}--\r\n".encode()
    )


def test_filename_keys_are_not_parts(png_file):
    """Test that #filename entries never become parts of their own."""
    fields = {"file": f"@{png_file}", "file#filename": "photo.png"}
    payload, _ = encode_multipart(fields, boundary=BOUNDARY)

    assert b'name="file#filename"' not in payload
    assert payload.count(f"--{BOUNDARY}\r\n".encode()) == 1


def test_content_type_omitted_when_unknown(tmp_path):
    """Test that no Content-Type line is written when detection fails."""
    path = tmp_path / "blob.unknownext"
    path.write_bytes(b"data")

    payload, _ = encode_multipart({"file": f"@{path}"}, boundary=BOUNDARY)

    assert b"Content-Type" not in payload
    assert b'filename="blob.unknownext"\r\n\r\ndata\r\n' in payload


def test_unreadable_file_raises(png_file):
    """Test that read failures on an existing file surface as FileError."""
    with patch("builtins.open", side_effect=PermissionError("denied")):
        with pytest.raises(FileError) as exc_info:
            encode_multipart({"file": f"@{png_file}"}, boundary=BOUNDARY)

    assert "denied" in str(exc_info.value)


def test_mixed_fields_keep_order(png_file):
    """Test that file and literal parts follow field order."""
    fields = {
        "file": f"@{png_file}",
        "file#filename": "photo.png",
        "file_category_id": 3,
    }
    payload, _ = encode_multipart(fields, boundary=BOUNDARY)

    assert payload.index(b'name="file"') < payload.index(b'name="file_category_id"')


# ===== Helper Tests =====

def test_upload_fields(png_file):
    """Test building an upload field mapping."""
    fields = upload_fields("file", png_file, "photo.png", file_category_id=2)

    assert fields == {
        "file": "@" + os.fspath(png_file),
        "file#filename": "photo.png",
        "file_category_id": 2,
    }


def test_upload_fields_without_filename(png_file):
    """Test that no override key is added without a filename."""
    fields = upload_fields("file", png_file)
    assert "file#filename" not in fields
