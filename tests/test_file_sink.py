"""Tests for LocalFileSink."""
import io

import pytest

from fileshare.domain.interfaces.file_sink import FileSinkError
from fileshare.infrastructure.storage.file_sink import LocalFileSink


@pytest.fixture
def sink(upload_dir):
    return LocalFileSink(str(upload_dir), "http://localhost:4000/")


def test_creates_upload_directory(upload_dir, sink):
    assert upload_dir.is_dir()


def test_save_writes_bytes_and_describes_file(upload_dir, sink):
    descriptor = sink.save(io.BytesIO(b"hello"), "a.txt", mimetype="text/plain", encoding="7bit")

    assert (upload_dir / "a.txt").read_bytes() == b"hello"
    assert descriptor.filename == "a.txt"
    assert descriptor.mimetype == "text/plain"
    assert descriptor.encoding == "7bit"
    assert descriptor.url == "http://localhost:4000/uploads/a.txt"


def test_defaults_for_missing_metadata(sink):
    descriptor = sink.save(io.BytesIO(b"x"), "blob.bin")

    assert descriptor.mimetype == "application/octet-stream"
    assert descriptor.encoding == "7bit"


def test_same_name_overwrites(upload_dir, sink):
    sink.save(io.BytesIO(b"first"), "a.txt")
    sink.save(io.BytesIO(b"second"), "a.txt")

    assert (upload_dir / "a.txt").read_bytes() == b"second"


@pytest.mark.parametrize("filename", ["../escape.txt", "nested/dir/escape.txt", "..\\escape.txt"])
def test_directory_components_are_dropped(upload_dir, sink, filename):
    descriptor = sink.save(io.BytesIO(b"data"), filename)

    assert descriptor.filename == "escape.txt"
    assert (upload_dir / "escape.txt").read_bytes() == b"data"
    assert not (upload_dir.parent / "escape.txt").exists()


@pytest.mark.parametrize("filename", ["", ".", "..", "dir/.."])
def test_unusable_names_are_rejected(sink, filename):
    with pytest.raises(FileSinkError):
        sink.save(io.BytesIO(b"data"), filename)


def test_url_quotes_spaces(sink):
    descriptor = sink.save(io.BytesIO(b"data"), "my file.txt")

    assert descriptor.filename == "my file.txt"
    assert descriptor.url == "http://localhost:4000/uploads/my%20file.txt"


def test_write_failure_raises_file_sink_error(upload_dir, sink):
    (upload_dir / "taken").mkdir()

    with pytest.raises(FileSinkError):
        sink.save(io.BytesIO(b"data"), "taken")


def test_resolve(upload_dir, sink):
    sink.save(io.BytesIO(b"data"), "a.txt")

    assert sink.resolve("a.txt") == str(upload_dir.resolve() / "a.txt")
    assert sink.resolve("missing.txt") is None
    assert sink.resolve("..") is None
    assert sink.resolve("nested/a.txt") is None


def test_is_writable(sink):
    assert sink.is_writable() is True
