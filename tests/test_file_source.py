import io
from pathlib import Path

import pytest

from dsalta.domain.models import FileInfo
from dsalta.infrastructure.http.exceptions import FILE_READ_ERROR, FileReadError
from dsalta.infrastructure.io.file_source import file_to_bytes, resolve_file_info


class ChunkedStream:
    """Binary stream that hands out its content in fixed-size pieces."""

    def __init__(self, pieces):
        self.pieces = list(pieces)

    def read(self, size=-1):
        if not self.pieces:
            return b""
        return self.pieces.pop(0)


class BrokenStream:
    def read(self, size=-1):
        raise OSError("device unplugged")


def test_path_info_uses_basename_and_extension():
    assert resolve_file_info("./report.pdf") == FileInfo("report.pdf", "application/pdf")


def test_pathlike_info():
    assert resolve_file_info(Path("/tmp/data/notes.txt")) == FileInfo("notes.txt", "text/plain")


def test_unknown_extension_falls_back_to_octet_stream():
    info = resolve_file_info("archive.unknownext")
    assert info == FileInfo("archive.unknownext", "application/octet-stream")


@pytest.mark.parametrize("ref", [b"raw bytes", bytearray(b"x"), io.BytesIO(b"stream"), ChunkedStream([])])
def test_anonymous_references_get_defaults(ref):
    assert resolve_file_info(ref) == FileInfo("file", "application/octet-stream")


def test_named_stream_uses_its_name(tmp_path: Path):
    p = tmp_path / "photo.png"
    p.write_bytes(b"\x89PNG")
    with open(p, "rb") as f:
        assert resolve_file_info(f) == FileInfo("photo.png", "image/png")


def test_unrecognized_reference_never_fails():
    assert resolve_file_info(12345) == FileInfo("file", "application/octet-stream")


def test_bytes_returned_as_is():
    assert file_to_bytes(b"abc") == b"abc"
    assert file_to_bytes(bytearray(b"abc")) == b"abc"


def test_path_is_read_in_full(tmp_path: Path):
    p = tmp_path / "doc.pdf"
    p.write_bytes(b"%PDF-1.4 content")
    assert file_to_bytes(str(p)) == b"%PDF-1.4 content"
    assert file_to_bytes(p) == b"%PDF-1.4 content"


def test_stream_chunks_are_concatenated_in_order():
    stream = ChunkedStream([b"chunk1", b"chunk2", b"chunk3"])
    assert file_to_bytes(stream) == b"chunk1chunk2chunk3"


def test_missing_path_raises_file_read_error(tmp_path: Path):
    with pytest.raises(FileReadError) as exc:
        file_to_bytes(str(tmp_path / "nope.pdf"))
    assert exc.value.status == 400
    assert exc.value.code == FILE_READ_ERROR
    assert "Failed to read file" in exc.value.message


def test_failing_stream_raises_file_read_error():
    with pytest.raises(FileReadError, match="device unplugged"):
        file_to_bytes(BrokenStream())


def test_text_stream_raises_file_read_error():
    with pytest.raises(FileReadError):
        file_to_bytes(io.StringIO("text"))


def test_unsupported_reference_is_a_type_error():
    with pytest.raises(TypeError):
        file_to_bytes(12345)


class DecoderErrorStream:
    def read(self, size=-1):
        raise RuntimeError("decoder blew up")


def test_path_with_nul_byte_raises_file_read_error():
    with pytest.raises(FileReadError):
        file_to_bytes("bad\x00name.pdf")


def test_any_stream_error_raises_file_read_error():
    with pytest.raises(FileReadError, match="decoder blew up"):
        file_to_bytes(DecoderErrorStream())
