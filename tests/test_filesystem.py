import pytest

from cpufeat.filesystem import MemoryFilesystem, OsFilesystem


def test_memory_file_round_trip():
    fs = MemoryFilesystem()
    fs.create_file("/proc/cpuinfo", "processor : 0\n")
    with fs.open("/proc/cpuinfo") as stream:
        assert stream.read() == b"processor : 0\n"


def test_memory_file_accepts_bytes():
    fs = MemoryFilesystem()
    fs.create_file("/proc/self/auxv", b"\x10\x00\x00\x00")
    with fs.open("/proc/self/auxv") as stream:
        assert stream.read() == b"\x10\x00\x00\x00"


def test_memory_file_reads_in_chunks():
    fs = MemoryFilesystem()
    fs.create_file("f", "abcdef")
    with fs.open("f") as stream:
        assert stream.read(4) == b"abcd"
        assert stream.read(4) == b"ef"
        assert stream.read(4) == b""


def test_each_open_starts_at_beginning():
    fs = MemoryFilesystem()
    fs.create_file("f", "data")
    with fs.open("f") as first:
        first.read()
    with fs.open("f") as second:
        assert second.read() == b"data"


def test_create_file_replaces_content():
    fs = MemoryFilesystem()
    fs.create_file("f", "old")
    fs.create_file("f", "new")
    with fs.open("f") as stream:
        assert stream.read() == b"new"


def test_memory_missing_file_raises():
    fs = MemoryFilesystem()
    with pytest.raises(FileNotFoundError):
        fs.open("/proc/cpuinfo")


def test_reset_removes_files():
    fs = MemoryFilesystem()
    fs.create_file("f", "data")
    fs.reset()
    with pytest.raises(FileNotFoundError):
        fs.open("f")


def test_os_filesystem_reads_file(tmp_path):
    path = tmp_path / "present"
    path.write_bytes(b"0-3\n")
    with OsFilesystem().open(str(path)) as stream:
        assert stream.read() == b"0-3\n"


def test_os_filesystem_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        OsFilesystem().open(str(tmp_path / "missing"))