"""
Copyright 2025 DNAi inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

"""
ZIP record definitions, encoders and parsers.

This module defines dataclasses for the three records of a classic
single-disk archive (local file header, central directory header and
end of central directory record), pure functions that encode them to
bytes, and functions that parse them back from a binary stream.

All integer fields are little-endian. Every variable field is range
checked before packing so that an oversized value raises FieldOverflow
instead of being silently truncated.
"""

import struct
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO

from .constants import (
    CENTRAL_DIR_HEADER,
    CENTRAL_DIR_HEADER_SIZE,
    COMP_STORED,
    END_OF_CENTRAL_DIR,
    END_OF_CENTRAL_DIR_SIZE,
    FLAG_NONE,
    LOCAL_FILE_HEADER,
    LOCAL_FILE_HEADER_SIZE,
    VERSION_MADE_BY,
    VERSION_NEEDED,
)
from .errors import ZipFormatError
from .utils import check_uint16, check_uint32, dos_datetime_to_timestamp, read_exact

_LOCAL_FILE_HEADER_STRUCT = struct.Struct("<IHHHHHIIIHH")
_CENTRAL_DIR_HEADER_STRUCT = struct.Struct("<IHHHHHHIIIHHHHHII")
_END_OF_CENTRAL_DIR_STRUCT = struct.Struct("<IHHHHIIH")


@dataclass
class LocalFileHeader:
    """Local file header structure.

    This header appears before each file's data in the ZIP archive.
    """

    signature: int
    version: int
    flags: int
    compression_method: int
    mod_time: int
    mod_date: int
    crc32: int
    compressed_size: int
    uncompressed_size: int
    filename_len: int
    extra_len: int
    filename: bytes
    extra: bytes = b""

    @property
    def date_time(self) -> datetime:
        """Get modification date/time as datetime object."""
        return dos_datetime_to_timestamp(self.mod_date, self.mod_time)

    @property
    def size(self) -> int:
        """Size of the header including the filename, excluding file data."""
        return LOCAL_FILE_HEADER_SIZE + self.filename_len + self.extra_len

    def to_bytes(self) -> bytes:
        fixed = _LOCAL_FILE_HEADER_STRUCT.pack(
            self.signature,
            self.version,
            self.flags,
            self.compression_method,
            check_uint16("mod_time", self.mod_time),
            check_uint16("mod_date", self.mod_date),
            check_uint32("crc32", self.crc32),
            check_uint32("compressed_size", self.compressed_size),
            check_uint32("uncompressed_size", self.uncompressed_size),
            check_uint16("filename_len", self.filename_len),
            check_uint16("extra_len", self.extra_len),
        )
        return fixed + self.filename + self.extra


@dataclass
class CentralDirectoryHeader:
    """Central directory header structure.

    This header appears in the central directory and contains information
    about a file entry, including a pointer to the local file header.
    """

    signature: int
    version_made_by: int
    version: int
    flags: int
    compression_method: int
    mod_time: int
    mod_date: int
    crc32: int
    compressed_size: int
    uncompressed_size: int
    filename_len: int
    extra_len: int
    comment_len: int
    disk_num: int
    internal_attrs: int
    external_attrs: int
    local_header_offset: int
    filename: bytes
    extra: bytes = b""
    comment: bytes = b""

    @property
    def date_time(self) -> datetime:
        """Get modification date/time as datetime object."""
        return dos_datetime_to_timestamp(self.mod_date, self.mod_time)

    @property
    def size(self) -> int:
        return CENTRAL_DIR_HEADER_SIZE + self.filename_len + self.extra_len + self.comment_len

    def to_bytes(self) -> bytes:
        fixed = _CENTRAL_DIR_HEADER_STRUCT.pack(
            self.signature,
            self.version_made_by,
            self.version,
            self.flags,
            self.compression_method,
            check_uint16("mod_time", self.mod_time),
            check_uint16("mod_date", self.mod_date),
            check_uint32("crc32", self.crc32),
            check_uint32("compressed_size", self.compressed_size),
            check_uint32("uncompressed_size", self.uncompressed_size),
            check_uint16("filename_len", self.filename_len),
            check_uint16("extra_len", self.extra_len),
            check_uint16("comment_len", self.comment_len),
            self.disk_num,
            self.internal_attrs,
            self.external_attrs,
            check_uint32("local_header_offset", self.local_header_offset),
        )
        return fixed + self.filename + self.extra + self.comment


@dataclass
class EndOfCentralDirectory:
    """End of Central Directory record.

    This record marks the end of the central directory and contains
    information needed to locate the central directory.
    """

    signature: int
    disk_num: int
    cd_disk: int
    cd_records_on_disk: int
    cd_records_total: int
    cd_size: int
    cd_offset: int
    comment_len: int
    comment: bytes = b""

    def to_bytes(self) -> bytes:
        fixed = _END_OF_CENTRAL_DIR_STRUCT.pack(
            self.signature,
            self.disk_num,
            self.cd_disk,
            check_uint16("cd_records_on_disk", self.cd_records_on_disk),
            check_uint16("cd_records_total", self.cd_records_total),
            check_uint32("cd_size", self.cd_size),
            check_uint32("cd_offset", self.cd_offset),
            check_uint16("comment_len", self.comment_len),
        )
        return fixed + self.comment


def encode_local_file_header(
    name_bytes: bytes, content_bytes: bytes, crc: int, mod_time: int, mod_date: int
) -> bytes:
    """Encode a local file header followed by the stored entry data.

    Args:
        name_bytes: Encoded entry name.
        content_bytes: Entry data, written verbatim after the header.
        crc: CRC32 of content_bytes.
        mod_time: DOS modification time.
        mod_date: DOS modification date.

    Returns:
        30 + len(name_bytes) + len(content_bytes) bytes.

    Raises:
        FieldOverflow: If the name or content is too long for its field.
    """
    header = LocalFileHeader(
        signature=LOCAL_FILE_HEADER,
        version=VERSION_NEEDED,
        flags=FLAG_NONE,
        compression_method=COMP_STORED,
        mod_time=mod_time,
        mod_date=mod_date,
        crc32=crc,
        compressed_size=len(content_bytes),
        uncompressed_size=len(content_bytes),
        filename_len=len(name_bytes),
        extra_len=0,
        filename=name_bytes,
    )
    return header.to_bytes() + content_bytes


def encode_central_directory_header(
    name_bytes: bytes,
    content_size: int,
    crc: int,
    mod_time: int,
    mod_date: int,
    local_header_offset: int,
) -> bytes:
    """Encode a central directory header pointing at a local file header.

    Returns:
        46 + len(name_bytes) bytes.

    Raises:
        FieldOverflow: If the name, size or offset is too large for its field.
    """
    header = CentralDirectoryHeader(
        signature=CENTRAL_DIR_HEADER,
        version_made_by=VERSION_MADE_BY,
        version=VERSION_NEEDED,
        flags=FLAG_NONE,
        compression_method=COMP_STORED,
        mod_time=mod_time,
        mod_date=mod_date,
        crc32=crc,
        compressed_size=content_size,
        uncompressed_size=content_size,
        filename_len=len(name_bytes),
        extra_len=0,
        comment_len=0,
        disk_num=0,
        internal_attrs=0,
        external_attrs=0,
        local_header_offset=local_header_offset,
        filename=name_bytes,
    )
    return header.to_bytes()


def encode_end_of_central_directory(entry_count: int, cd_size: int, cd_offset: int) -> bytes:
    """Encode the End of Central Directory record (always 22 bytes).

    Raises:
        FieldOverflow: If any value is too large for its field.
    """
    eocd = EndOfCentralDirectory(
        signature=END_OF_CENTRAL_DIR,
        disk_num=0,
        cd_disk=0,
        cd_records_on_disk=entry_count,
        cd_records_total=entry_count,
        cd_size=cd_size,
        cd_offset=cd_offset,
        comment_len=0,
    )
    return eocd.to_bytes()


def parse_local_file_header(f: BinaryIO) -> LocalFileHeader:
    """Parse a local file header from the current file position.

    Args:
        f: Binary file-like object positioned at the start of a local file header.

    Returns:
        LocalFileHeader object. The file is left positioned at the entry data.

    Raises:
        ZipFormatError: If the signature is invalid or file is truncated.
    """
    fields = _LOCAL_FILE_HEADER_STRUCT.unpack(read_exact(f, LOCAL_FILE_HEADER_SIZE))
    if fields[0] != LOCAL_FILE_HEADER:
        raise ZipFormatError(
            f"Invalid local file header signature: 0x{fields[0]:08X}, "
            f"expected 0x{LOCAL_FILE_HEADER:08X}"
        )
    filename_len, extra_len = fields[9], fields[10]
    return LocalFileHeader(
        *fields,
        filename=read_exact(f, filename_len),
        extra=read_exact(f, extra_len),
    )


def parse_central_directory_header(f: BinaryIO) -> CentralDirectoryHeader:
    """Parse a central directory header from the current file position.

    Raises:
        ZipFormatError: If the signature is invalid or file is truncated.
    """
    fields = _CENTRAL_DIR_HEADER_STRUCT.unpack(read_exact(f, CENTRAL_DIR_HEADER_SIZE))
    if fields[0] != CENTRAL_DIR_HEADER:
        raise ZipFormatError(
            f"Invalid central directory header signature: 0x{fields[0]:08X}, "
            f"expected 0x{CENTRAL_DIR_HEADER:08X}"
        )
    filename_len, extra_len, comment_len = fields[10], fields[11], fields[12]
    return CentralDirectoryHeader(
        *fields,
        filename=read_exact(f, filename_len),
        extra=read_exact(f, extra_len),
        comment=read_exact(f, comment_len),
    )


def parse_eocd(f: BinaryIO) -> EndOfCentralDirectory:
    """Parse an End of Central Directory record from the current file position.

    Raises:
        ZipFormatError: If the signature is invalid or file is truncated.
    """
    fields = _END_OF_CENTRAL_DIR_STRUCT.unpack(read_exact(f, END_OF_CENTRAL_DIR_SIZE))
    if fields[0] != END_OF_CENTRAL_DIR:
        raise ZipFormatError(
            f"Invalid end of central directory signature: 0x{fields[0]:08X}, "
            f"expected 0x{END_OF_CENTRAL_DIR:08X}"
        )
    return EndOfCentralDirectory(*fields, comment=read_exact(f, fields[7]))
