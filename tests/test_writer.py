import io
import logging
import struct
import zipfile
from datetime import datetime

import pytest

from blobzip import writer
from blobzip.codec import Entry
from blobzip.errors import FieldOverflow, UnsupportedCharacter
from blobzip.writer import Archive, ZipBuilder, build_archive


def _eocd_fields(data):
    # signature, disk, cd disk, entries on disk, total entries, cd size, cd offset, comment len
    return struct.unpack("<IHHHHIIH", data[-22:])


def test_smallest_archive_is_101_bytes(timestamp):
    archive = build_archive([("a", "b")], timestamp=timestamp)
    assert len(archive) == 30 + 1 + 1 + 46 + 1 + 22 == 101


def test_archive_metadata(timestamp):
    archive = build_archive([("a", "b")], timestamp=timestamp)
    assert isinstance(archive, Archive)
    assert archive.media_type == "application/zip"
    assert archive.filename == "result.zip"
    assert bytes(archive) == archive.data


def test_two_entry_layout(timestamp, two_entries):
    data = build_archive(two_entries, timestamp=timestamp).data

    assert data[0:4] == b"PK\x03\x04"
    assert data[30:35] == b"a.txt"
    assert data[35:37] == b"hi"
    assert data[37:41] == b"PK\x03\x04"
    assert data[67:72] == b"b.txt"
    assert data[72:75] == b"bye"
    assert data[75:79] == b"PK\x01\x02"
    assert data[126:130] == b"PK\x01\x02"

    first_offset = struct.unpack("<I", data[75 + 42 : 75 + 46])[0]
    second_offset = struct.unpack("<I", data[126 + 42 : 126 + 46])[0]
    assert (first_offset, second_offset) == (0, 37)

    fields = _eocd_fields(data)
    assert fields[0] == 0x06054B50
    assert fields[3] == fields[4] == 2
    assert fields[5] == 102
    assert fields[6] == 75
    assert len(data) == 75 + 102 + 22


def test_offset_invariants(timestamp):
    entries = [(f"file{i}.txt", "x" * (i * 13 + 1)) for i in range(20)]
    data = build_archive(entries, timestamp=timestamp).data

    local_total = sum(30 + len(name) + len(content) for name, content in entries)
    central_total = sum(46 + len(name) for name, _ in entries)
    fields = _eocd_fields(data)
    assert fields[6] == local_total
    assert fields[5] == central_total
    assert len(data) == local_total + central_total + 22


def test_readable_by_zipfile(timestamp, two_entries):
    archive = build_archive(two_entries, timestamp=timestamp)

    with zipfile.ZipFile(io.BytesIO(archive.data)) as zf:
        assert zf.testzip() is None
        assert zf.namelist() == ["a.txt", "b.txt"]
        assert zf.read("a.txt") == b"hi"
        assert zf.read("b.txt") == b"bye"
        info = zf.getinfo("a.txt")
        assert info.compress_type == zipfile.ZIP_STORED
        assert info.date_time == (2024, 5, 17, 13, 45, 30)
        assert info.create_system == 3
        assert info.create_version == 10
        assert info.extract_version == 10


def test_non_ascii_content_is_utf8(timestamp):
    content = "naïve € \U0001F600"
    archive = build_archive([("notes.txt", content)], timestamp=timestamp)
    with zipfile.ZipFile(io.BytesIO(archive.data)) as zf:
        assert zf.read("notes.txt").decode("utf-8") == content


def test_bytes_content(timestamp):
    archive = build_archive([Entry("blob.bin", b"\x00\x01\xff")], timestamp=timestamp)
    with zipfile.ZipFile(io.BytesIO(archive.data)) as zf:
        assert zf.read("blob.bin") == b"\x00\x01\xff"


def test_same_input_same_bytes(timestamp, two_entries):
    first = build_archive(two_entries, timestamp=timestamp)
    second = build_archive(list(two_entries), timestamp=timestamp)
    assert first.data == second.data


def test_timestamp_taken_per_call(monkeypatch, two_entries):
    times = iter([datetime(2020, 1, 1, 10, 0, 0), datetime(2021, 6, 1, 12, 30, 0)])

    class FakeDatetime(datetime):
        @classmethod
        def now(cls, tz=None):
            return next(times)

    monkeypatch.setattr(writer, "datetime", FakeDatetime)

    first = build_archive(two_entries)
    second = build_archive(two_entries)
    with zipfile.ZipFile(io.BytesIO(first.data)) as zf:
        assert zf.getinfo("b.txt").date_time == (2020, 1, 1, 10, 0, 0)
    with zipfile.ZipFile(io.BytesIO(second.data)) as zf:
        assert zf.getinfo("b.txt").date_time == (2021, 6, 1, 12, 30, 0)


def test_unsupported_character_aborts_build(timestamp):
    with pytest.raises(UnsupportedCharacter):
        build_archive([("ok.txt", "fine"), ("bad.txt", "x\udfffy")], timestamp=timestamp)


def test_name_overflow_aborts_build(timestamp):
    with pytest.raises(FieldOverflow):
        build_archive([("n" * 0x10000, "content")], timestamp=timestamp)


def test_too_many_entries(timestamp):
    with pytest.raises(FieldOverflow) as excinfo:
        build_archive([("a", "b")] * 0x10000, timestamp=timestamp)
    assert excinfo.value.field == "entry_count"


class _HugeBlock(bytes):
    """A local block that reports a length just past the 32-bit offset range."""

    def __len__(self):
        return 0x100000000


@pytest.mark.parametrize(
    "entries, field",
    [
        ([("a.txt", "hi"), ("b.txt", "bye")], "local_header_offset"),
        ([("a.txt", "hi")], "cd_offset"),
    ],
)
def test_offset_overflow_aborts_build(monkeypatch, timestamp, entries, field):
    monkeypatch.setattr(writer, "encode_local_file_header", lambda *args: _HugeBlock(b"PK"))
    with pytest.raises(FieldOverflow) as excinfo:
        build_archive(entries, timestamp=timestamp)
    assert excinfo.value.field == field
    assert excinfo.value.value == 0x100000000


def test_empty_entry_list(timestamp):
    data = build_archive([], timestamp=timestamp).data
    assert len(data) == 22
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.namelist() == []


def test_builder(timestamp):
    builder = ZipBuilder(filename="notes.zip")
    builder.add("a.txt", "hi").extend([("b.txt", "bye")])
    assert len(builder) == 2
    assert builder.entries == [Entry("a.txt", "hi"), Entry("b.txt", "bye")]

    archive = builder.build(timestamp=timestamp)
    assert archive.filename == "notes.zip"
    assert archive.data == build_archive(builder.entries, timestamp=timestamp).data


def test_save(tmp_path, monkeypatch, timestamp, two_entries):
    archive = build_archive(two_entries, timestamp=timestamp)

    target = tmp_path / "out.zip"
    assert archive.save(target) == str(target)
    assert target.read_bytes() == archive.data

    monkeypatch.chdir(tmp_path)
    assert archive.save() == "result.zip"
    assert (tmp_path / "result.zip").read_bytes() == archive.data


def test_build_logs(caplog, timestamp, two_entries):
    with caplog.at_level(logging.DEBUG, logger="blobzip.writer"):
        build_archive(two_entries, timestamp=timestamp)
    assert "Built archive: 2 entries" in caplog.text
