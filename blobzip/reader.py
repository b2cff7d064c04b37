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
ZIP archive reader for stored entries.

This module provides the ZipReader class, which reads back single-disk
archives of stored entries such as the ones produced by build_archive().
"""

import io
import logging
import struct
from typing import BinaryIO, Optional, Union

from .codec import Entry
from .constants import (
    COMP_STORED,
    END_OF_CENTRAL_DIR_SIZE,
    FLAG_ENCRYPTED,
    MAX_UINT16,
    TEXT_ENCODING,
)
from .errors import ZipCrcError, ZipFormatError, ZipUnsupportedFeature
from .structures import (
    CentralDirectoryHeader,
    EndOfCentralDirectory,
    parse_central_directory_header,
    parse_eocd,
    parse_local_file_header,
)
from .utils import crc32, read_exact

logger = logging.getLogger(__name__)

ArchiveSource = Union[bytes, bytearray, memoryview, BinaryIO]


class ZipReader:
    """Reader for ZIP archives of stored entries.

    Example:
        reader = ZipReader(archive.data)
        for name in reader.namelist():
            print(name, reader.read_text(name))
    """

    def __init__(self, source: ArchiveSource):
        """Parse the archive directory.

        Args:
            source: Archive bytes or a seekable binary file-like object.

        Raises:
            ZipFormatError: If the data is not a valid ZIP archive.
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._file: BinaryIO = io.BytesIO(bytes(source))
        else:
            if not hasattr(source, "read") or not hasattr(source, "seek"):
                raise ZipFormatError("File-like object must have read() and seek() methods")
            self._file = source

        self._file.seek(0, io.SEEK_END)
        self._size = self._file.tell()
        self.eocd = self._find_eocd()
        self.entries = self._parse_central_directory()
        self._by_name = {self._decode_name(h): h for h in self.entries}

    def _find_eocd(self) -> EndOfCentralDirectory:
        """Find and parse the End of Central Directory record.

        Scans backward from the end of the file; the record may be followed
        by up to 65535 bytes of archive comment.
        """
        max_scan = min(MAX_UINT16 + END_OF_CENTRAL_DIR_SIZE, self._size)
        self._file.seek(self._size - max_scan)
        data = self._file.read()

        # The signature bytes can also occur inside the record's own fields
        # or its comment; the real record ends exactly at the end of data.
        eocd_pos = data.rfind(b"PK\x05\x06")
        while eocd_pos != -1:
            if eocd_pos + END_OF_CENTRAL_DIR_SIZE <= len(data):
                comment_len = struct.unpack_from("<H", data, eocd_pos + 20)[0]
                if eocd_pos + END_OF_CENTRAL_DIR_SIZE + comment_len == len(data):
                    break
            eocd_pos = data.rfind(b"PK\x05\x06", 0, eocd_pos)
        if eocd_pos == -1:
            raise ZipFormatError("End of Central Directory record not found")

        self._file.seek(self._size - len(data) + eocd_pos)
        eocd = parse_eocd(self._file)
        if eocd.disk_num != 0 or eocd.cd_records_on_disk != eocd.cd_records_total:
            raise ZipUnsupportedFeature("Multi-disk archives are not supported")
        return eocd

    def _parse_central_directory(self) -> list[CentralDirectoryHeader]:
        cd_offset = self.eocd.cd_offset
        cd_size = self.eocd.cd_size
        if cd_offset + cd_size > self._size:
            raise ZipFormatError(
                f"Central directory extends beyond file: offset {cd_offset}, "
                f"size {cd_size} (file size: {self._size})"
            )

        self._file.seek(cd_offset)
        entries = [
            parse_central_directory_header(self._file)
            for _ in range(self.eocd.cd_records_total)
        ]

        parsed_size = self._file.tell() - cd_offset
        if parsed_size != cd_size:
            raise ZipFormatError(
                f"Central directory size mismatch: expected {cd_size} bytes, parsed {parsed_size}"
            )
        logger.debug("Parsed %d central directory entries at offset %d", len(entries), cd_offset)
        return entries

    @staticmethod
    def _decode_name(header: CentralDirectoryHeader) -> str:
        return header.filename.decode(TEXT_ENCODING, errors="replace")

    def namelist(self) -> list[str]:
        """List entry names in archive order."""
        return [self._decode_name(h) for h in self.entries]

    def get_info(self, name: str) -> Optional[CentralDirectoryHeader]:
        """Get the central directory header for an entry, or None."""
        return self._by_name.get(name)

    def _read_entry(self, header: CentralDirectoryHeader) -> bytes:
        name = self._decode_name(header)
        if header.flags & FLAG_ENCRYPTED:
            raise ZipUnsupportedFeature(f"Entry '{name}' is encrypted (encryption not supported)")
        if header.compression_method != COMP_STORED:
            raise ZipUnsupportedFeature(
                f"Unsupported compression method for entry '{name}': {header.compression_method}"
            )

        self._file.seek(header.local_header_offset)
        local_header = parse_local_file_header(self._file)
        if local_header.filename != header.filename:
            raise ZipFormatError(
                f"Local header name {local_header.filename!r} does not match "
                f"central directory name {header.filename!r}"
            )

        data = read_exact(self._file, header.compressed_size)
        actual_crc = crc32(data)
        if actual_crc != header.crc32:
            raise ZipCrcError(
                f"CRC32 mismatch for entry '{name}': expected 0x{header.crc32:08X}, "
                f"got 0x{actual_crc:08X}"
            )
        return data

    def read(self, name: str) -> bytes:
        """Read and verify the data of an entry.

        Raises:
            KeyError: If entry is not found.
            ZipUnsupportedFeature: If the entry is compressed or encrypted.
            ZipCrcError: If CRC32 validation fails.
        """
        header = self._by_name.get(name)
        if header is None:
            raise KeyError(f"Entry not found: {name}")
        return self._read_entry(header)

    def read_text(self, name: str) -> str:
        return self.read(name).decode(TEXT_ENCODING)

    def to_entries(self) -> list[Entry]:
        """Decode every entry, in archive order, as text entries."""
        return [
            Entry(self._decode_name(h), self._read_entry(h).decode(TEXT_ENCODING))
            for h in self.entries
        ]

    def test(self) -> list[str]:
        """Read every entry and return the names of the ones that fail."""
        bad = []
        for header in self.entries:
            try:
                self._read_entry(header)
            except (ZipFormatError, ZipCrcError, ZipUnsupportedFeature) as e:
                logger.warning("%s", e)
                bad.append(self._decode_name(header))
        return bad


def read_entries(source: ArchiveSource) -> list[Entry]:
    """Read all entries of an archive back as (name, content) text entries."""
    return ZipReader(source).to_entries()
