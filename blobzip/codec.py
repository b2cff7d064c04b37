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
Entry model and text-to-bytes conversion.

Names and contents are stored as UTF-8. Every Unicode scalar value is
supported, including characters outside the Basic Multilingual Plane.
Lone surrogates have no UTF-8 form and are rejected with
UnsupportedCharacter. Values that are already bytes pass through as-is.
"""

from dataclasses import dataclass
from typing import Union

from .constants import TEXT_ENCODING
from .errors import UnsupportedCharacter

Text = Union[str, bytes]


@dataclass(frozen=True)
class Entry:
    """A logical archive member: a file name and its content."""

    name: Text
    content: Text


@dataclass(frozen=True)
class EncodedEntry:
    """Byte representation of an Entry, ready to be written."""

    name_bytes: bytes
    content_bytes: bytes


def encode_text(value: Text) -> bytes:
    """Convert a name or content value to bytes.

    Args:
        value: Text to encode, or bytes to use unchanged.

    Returns:
        UTF-8 encoding of value.

    Raises:
        UnsupportedCharacter: If value contains a lone surrogate.
        TypeError: If value is neither text nor bytes.
    """
    if isinstance(value, str):
        try:
            return value.encode(TEXT_ENCODING)
        except UnicodeEncodeError as e:
            raise UnsupportedCharacter(value[e.start], e.start) from e
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"Expected str or bytes, got {type(value).__name__}")


def encode_entry(entry: Entry) -> EncodedEntry:
    """Encode both fields of an entry."""
    return EncodedEntry(
        name_bytes=encode_text(entry.name),
        content_bytes=encode_text(entry.content),
    )
