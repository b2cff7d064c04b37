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
In-memory ZIP archive assembly.

This module provides build_archive(), which turns an ordered list of
entries into a complete archive of stored entries in a single pass, and
ZipBuilder, a small collector object on top of it.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Union

from .codec import Entry, Text, encode_entry
from .constants import DEFAULT_ARCHIVE_NAME, MAX_ENTRIES, ZIP_MEDIA_TYPE
from .structures import (
    encode_central_directory_header,
    encode_end_of_central_directory,
    encode_local_file_header,
)
from .utils import check_field, crc32, timestamp_to_dos_datetime

logger = logging.getLogger(__name__)

EntryLike = Union[Entry, tuple[Text, Text]]


@dataclass(frozen=True)
class Archive:
    """A finished ZIP archive held in memory.

    Attributes:
        data: The archive bytes.
        filename: Suggested file name for saving or downloading.
        media_type: MIME type of data.
    """

    data: bytes
    filename: str = DEFAULT_ARCHIVE_NAME
    media_type: str = ZIP_MEDIA_TYPE

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return self.data

    def save(self, path: Optional[Union[str, os.PathLike]] = None) -> str:
        """Write the archive to path (defaults to the suggested file name).

        Returns:
            The path written to.
        """
        target = os.fspath(path) if path is not None else self.filename
        with open(target, "wb") as f:
            f.write(self.data)
        logger.info("Saved %d byte archive to %s", len(self.data), target)
        return target


def _as_entry(item: EntryLike) -> Entry:
    if isinstance(item, Entry):
        return item
    name, content = item
    return Entry(name, content)


def build_archive(
    entries: Iterable[EntryLike],
    timestamp: Optional[datetime] = None,
    filename: str = DEFAULT_ARCHIVE_NAME,
) -> Archive:
    """Build a ZIP archive of stored entries.

    The archive layout is every local file header with its data, then
    every central directory header, then the end of central directory
    record. Both groups follow the order of entries.

    Args:
        entries: Entry objects or (name, content) pairs.
        timestamp: Modification time written for every entry. Defaults to
            the current local time, taken once per call.
        filename: Suggested file name attached to the result.

    Returns:
        Archive holding the complete ZIP file.

    Raises:
        UnsupportedCharacter: If a name or content cannot be encoded.
        FieldOverflow: If a name, content, offset, directory size or the
            entry count does not fit its field.
    """
    items = [_as_entry(item) for item in entries]
    check_field("entry_count", len(items), MAX_ENTRIES)

    if timestamp is None:
        timestamp = datetime.now()
    mod_date, mod_time = timestamp_to_dos_datetime(timestamp)

    local_blocks: list[bytes] = []
    central_blocks: list[bytes] = []
    offset = 0
    cd_size = 0

    for entry in items:
        encoded = encode_entry(entry)
        entry_crc32 = crc32(encoded.content_bytes)

        local_block = encode_local_file_header(
            encoded.name_bytes, encoded.content_bytes, entry_crc32, mod_time, mod_date
        )
        central_block = encode_central_directory_header(
            encoded.name_bytes,
            len(encoded.content_bytes),
            entry_crc32,
            mod_time,
            mod_date,
            offset,
        )
        logger.debug(
            "Entry %r: %d bytes, crc32=0x%08X, local header at %d",
            encoded.name_bytes,
            len(encoded.content_bytes),
            entry_crc32,
            offset,
        )

        local_blocks.append(local_block)
        central_blocks.append(central_block)
        offset += len(local_block)
        cd_size += len(central_block)

    eocd = encode_end_of_central_directory(len(items), cd_size, offset)
    data = b"".join(local_blocks) + b"".join(central_blocks) + eocd

    logger.debug(
        "Built archive: %d entries, central directory %d bytes at offset %d, %d bytes total",
        len(items),
        cd_size,
        offset,
        len(data),
    )
    return Archive(data=data, filename=filename)


class ZipBuilder:
    """Collector for archive entries.

    Entries are only recorded by add(); nothing is encoded until build(),
    so a failing build leaves no partial output behind.

    Example:
        builder = ZipBuilder()
        builder.add("a.txt", "hi")
        builder.add("b.txt", "bye")
        archive = builder.build()
        archive.save()
    """

    def __init__(self, filename: str = DEFAULT_ARCHIVE_NAME):
        self.filename = filename
        self._entries: list[Entry] = []

    def add(self, name: Text, content: Text) -> "ZipBuilder":
        """Queue an entry. Returns self so calls can be chained."""
        self._entries.append(Entry(name, content))
        return self

    def extend(self, entries: Iterable[EntryLike]) -> "ZipBuilder":
        """Queue several entries."""
        self._entries.extend(_as_entry(item) for item in entries)
        return self

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def build(self, timestamp: Optional[datetime] = None) -> Archive:
        """Build the archive from the queued entries."""
        return build_archive(self._entries, timestamp=timestamp, filename=self.filename)
