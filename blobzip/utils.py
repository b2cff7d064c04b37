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
Utility functions for blobzip.

This module provides the CRC32 checksum, DOS date/time conversion,
range-checked field validation and a safe binary read helper.
"""

import zlib
from datetime import datetime
from typing import BinaryIO

from .constants import MAX_UINT16, MAX_UINT32
from .errors import FieldOverflow, ZipFormatError


def crc32(data: bytes, value: int = 0) -> int:
    """Calculate the ZIP (ISO-3309) CRC32 checksum for data.

    Reflected CRC32 with polynomial 0xEDB88320, all-ones initial value
    and final inversion, as computed by zlib.

    Args:
        data: Bytes to calculate CRC32 for.
        value: Running checksum to continue from (0 starts a new one).

    Returns:
        CRC32 value as unsigned 32-bit integer.
    """
    return zlib.crc32(data, value) & MAX_UINT32


def dos_datetime_to_timestamp(dos_date: int, dos_time: int) -> datetime:
    """Convert DOS date and time to Python datetime.

    DOS date format (16 bits):
        Bits 0-4: Day (1-31)
        Bits 5-8: Month (1-12)
        Bits 9-15: Year - 1980 (0-127, so 1980-2107)

    DOS time format (16 bits):
        Bits 0-4: Second / 2 (0-29, so 0-58 seconds in 2-second increments)
        Bits 5-10: Minute (0-59)
        Bits 11-15: Hour (0-23)

    Args:
        dos_date: DOS date value (16-bit unsigned integer).
        dos_time: DOS time value (16-bit unsigned integer).

    Returns:
        datetime object representing the DOS date/time.
    """
    day = dos_date & 0x1F
    month = (dos_date >> 5) & 0x0F
    year = ((dos_date >> 9) & 0x7F) + 1980

    second = (dos_time & 0x1F) * 2
    minute = (dos_time >> 5) & 0x3F
    hour = (dos_time >> 11) & 0x1F

    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        # Zeroed or garbage fields
        return datetime(1980, 1, 1, 0, 0, 0)


def timestamp_to_dos_datetime(dt: datetime) -> tuple[int, int]:
    """Convert Python datetime to DOS date and time.

    Years outside 1980-2107 are clamped to the nearest representable year.
    Seconds are stored with 2-second resolution.

    Args:
        dt: datetime object to convert.

    Returns:
        Tuple of (dos_date, dos_time) as 16-bit unsigned integers.
    """
    year = min(max(dt.year - 1980, 0), 127)

    dos_date = dt.day | (dt.month << 5) | (year << 9)
    dos_time = (dt.second // 2) | (dt.minute << 5) | (dt.hour << 11)

    return dos_date, dos_time


def check_field(field: str, value: int, limit: int) -> int:
    """Return value unchanged if it fits in a field holding at most limit.

    Raises:
        FieldOverflow: If value is negative or larger than limit.
    """
    if value < 0 or value > limit:
        raise FieldOverflow(field, value, limit)
    return value


def check_uint16(field: str, value: int) -> int:
    """Validate a value destined for a 16-bit unsigned field."""
    return check_field(field, value, MAX_UINT16)


def check_uint32(field: str, value: int) -> int:
    """Validate a value destined for a 32-bit unsigned field."""
    return check_field(field, value, MAX_UINT32)


def read_exact(f: BinaryIO, size: int) -> bytes:
    """Read exactly 'size' bytes from file, raising ZipFormatError on short read.

    Args:
        f: Binary file-like object to read from.
        size: Number of bytes to read.

    Returns:
        Exactly 'size' bytes of data.

    Raises:
        ZipFormatError: If fewer than 'size' bytes could be read.
    """
    data = f.read(size)
    if len(data) != size:
        raise ZipFormatError(
            f"Unexpected end of file: expected {size} bytes, got {len(data)}"
        )
    return data

