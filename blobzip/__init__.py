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
BLOBZIP - build minimal, uncompressed ZIP archives in memory.

Entries are (name, content) pairs; the result is a single byte blob of
media type application/zip. Only Python standard library modules are used.
"""

from .codec import EncodedEntry, Entry, encode_entry, encode_text
from .errors import (
    FieldOverflow,
    UnsupportedCharacter,
    ZipCrcError,
    ZipError,
    ZipFormatError,
    ZipUnsupportedFeature,
)
from .reader import ZipReader, read_entries
from .utils import crc32
from .writer import Archive, ZipBuilder, build_archive

__all__ = [
    "Archive",
    "EncodedEntry",
    "Entry",
    "FieldOverflow",
    "UnsupportedCharacter",
    "ZipBuilder",
    "ZipCrcError",
    "ZipError",
    "ZipFormatError",
    "ZipReader",
    "ZipUnsupportedFeature",
    "build_archive",
    "crc32",
    "encode_entry",
    "encode_text",
    "read_entries",
]

__version__ = "0.1.0"
