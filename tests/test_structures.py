import io
import struct

import pytest

from blobzip.constants import (
    CENTRAL_DIR_HEADER,
    END_OF_CENTRAL_DIR,
    LOCAL_FILE_HEADER,
    VERSION_MADE_BY,
    VERSION_NEEDED,
)
from blobzip.errors import FieldOverflow, ZipFormatError
from blobzip.structures import (
    encode_central_directory_header,
    encode_end_of_central_directory,
    encode_local_file_header,
    parse_central_directory_header,
    parse_eocd,
    parse_local_file_header,
)
from blobzip.utils import crc32


def test_local_file_header_layout():
    record = encode_local_file_header(b"a.txt", b"hi", crc32(b"hi"), 0x1234, 0x5678)

    assert len(record) == 30 + 5 + 2
    assert record[:4] == b"PK\x03\x04"
    assert record[4:6] == b"\x0a\x00"  # version needed 1.0
    assert record[6:10] == b"\x00\x00\x00\x00"  # flags, stored
    assert struct.unpack("<HH", record[10:14]) == (0x1234, 0x5678)
    assert struct.unpack("<III", record[14:26]) == (crc32(b"hi"), 2, 2)
    assert struct.unpack("<HH", record[26:30]) == (5, 0)
    assert record[30:] == b"a.txthi"


def test_local_file_header_parses_back():
    record = encode_local_file_header(b"name", b"content", 0xDEADBEEF, 1, 2)
    f = io.BytesIO(record)
    header = parse_local_file_header(f)

    assert header.signature == LOCAL_FILE_HEADER
    assert header.version == VERSION_NEEDED
    assert header.crc32 == 0xDEADBEEF
    assert header.compressed_size == header.uncompressed_size == 7
    assert header.filename == b"name"
    assert header.size == 34
    assert f.read() == b"content"


def test_central_directory_header_layout():
    record = encode_central_directory_header(b"b.txt", 3, 0xCAFEBABE, 0x1111, 0x2222, 37)

    assert len(record) == 46 + 5
    assert record[:4] == b"PK\x01\x02"
    assert record[4:6] == b"\x0a\x03"  # made by UNIX, 1.0
    assert record[6:8] == b"\x0a\x00"
    assert struct.unpack("<I", record[42:46]) == (37,)
    assert record[46:] == b"b.txt"

    header = parse_central_directory_header(io.BytesIO(record))
    assert header.signature == CENTRAL_DIR_HEADER
    assert header.version_made_by == VERSION_MADE_BY
    assert header.crc32 == 0xCAFEBABE
    assert header.uncompressed_size == 3
    assert (header.mod_time, header.mod_date) == (0x1111, 0x2222)
    assert header.comment_len == header.extra_len == header.disk_num == 0
    assert header.internal_attrs == header.external_attrs == 0
    assert header.local_header_offset == 37
    assert header.size == 51


def test_end_of_central_directory_layout():
    record = encode_end_of_central_directory(2, 102, 75)

    assert len(record) == 22
    assert record[:4] == b"PK\x05\x06"
    eocd = parse_eocd(io.BytesIO(record))
    assert eocd.signature == END_OF_CENTRAL_DIR
    assert eocd.disk_num == eocd.cd_disk == 0
    assert eocd.cd_records_on_disk == eocd.cd_records_total == 2
    assert eocd.cd_size == 102
    assert eocd.cd_offset == 75
    assert eocd.comment_len == 0


def test_name_too_long():
    with pytest.raises(FieldOverflow) as excinfo:
        encode_local_file_header(b"a" * 0x10000, b"x", 0, 0, 0)
    assert excinfo.value.field == "filename_len"


def test_offset_too_large():
    with pytest.raises(FieldOverflow) as excinfo:
        encode_central_directory_header(b"a", 1, 0, 0, 0, 0x100000000)
    assert excinfo.value.field == "local_header_offset"

    with pytest.raises(FieldOverflow) as excinfo:
        encode_end_of_central_directory(1, 47, 0x100000000)
    assert excinfo.value.field == "cd_offset"


def test_too_many_entries_for_eocd():
    with pytest.raises(FieldOverflow):
        encode_end_of_central_directory(0x10000, 0, 0)


def test_bad_signature():
    with pytest.raises(ZipFormatError):
        parse_local_file_header(io.BytesIO(b"PK\x01\x02" + b"\x00" * 42))
    with pytest.raises(ZipFormatError):
        parse_eocd(io.BytesIO(b"\x00" * 22))


def test_truncated_record():
    record = encode_local_file_header(b"name", b"", 0, 0, 0)
    with pytest.raises(ZipFormatError):
        parse_local_file_header(io.BytesIO(record[:-1]))
