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
Custom exception classes for blobzip.

Building an archive can fail with UnsupportedCharacter or FieldOverflow.
Reading an archive back can fail with ZipFormatError, ZipCrcError or
ZipUnsupportedFeature. All of them derive from ZipError.
"""


class ZipError(Exception):
    """Base exception class for all ZIP-related errors."""

    pass


class UnsupportedCharacter(ZipError):
    """Raised when an entry name or content cannot be encoded as UTF-8.

    Python strings may hold lone surrogate code points (U+D800..U+DFFF),
    which have no UTF-8 representation. The whole build is aborted.

    Attributes:
        character: The offending character.
        position: Index of the character within the source string.
    """

    def __init__(self, character: str, position: int):
        self.character = character
        self.position = position
        super().__init__(
            f"Unsupported character U+{ord(character):04X} at position {position}"
        )


class FieldOverflow(ZipError):
    """Raised when a value does not fit the fixed-width field it is written to.

    This exception is raised when:
    - An entry name is longer than 65535 bytes
    - An entry content, archive offset or central directory size exceeds 4 GiB - 1
    - An archive holds more than 65535 entries

    Attributes:
        field: Name of the record field.
        value: The value that was rejected.
        limit: Largest value the field can hold.
    """

    def __init__(self, field: str, value: int, limit: int):
        self.field = field
        self.value = value
        self.limit = limit
        super().__init__(f"Value {value} for field '{field}' exceeds limit {limit}")


class ZipFormatError(ZipError):
    """Raised when a ZIP file has an invalid format or structure.

    This exception is raised when:
    - Required signatures are missing or incorrect
    - File structure is truncated or corrupted
    """

    pass


class ZipUnsupportedFeature(ZipError):
    """Raised when encountering an unsupported ZIP feature.

    This exception is raised when:
    - Compression method is not "stored"
    - Encryption is used
    """

    pass


class ZipCrcError(ZipError):
    """Raised when CRC32 checksum validation fails.

    This exception is raised when the computed CRC32 of entry data
    does not match the expected CRC32 stored in the archive.
    """

    pass
