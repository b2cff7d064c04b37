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
Debugging utilities for analyzing ZIP file structures.
"""

import io
import struct
from typing import Optional

from .constants import CENTRAL_DIR_HEADER, END_OF_CENTRAL_DIR, LOCAL_FILE_HEADER
from .structures import parse_central_directory_header, parse_eocd, parse_local_file_header


def hex_dump(data: bytes, offset: int = 0, length: Optional[int] = None) -> str:
    """Create a hex dump of binary data.

    Args:
        data: Binary data to dump.
        offset: Starting offset for display.
        length: Maximum length to dump (None for all).

    Returns:
        Formatted hex dump string.
    """
    if length is not None:
        data = data[:length]

    lines = []
    for i in range(0, len(data), 16):
        chunk = data[i : i + 16]
        hex_part = " ".join(f"{b:02X}" for b in chunk)
        ascii_part = "".join(chr(b) if 32 <= b < 127 else "." for b in chunk)
        lines.append(f"{offset + i:08X}  {hex_part:<48}  {ascii_part}")

    return "\n".join(lines)


def dump_zip_structure(data: bytes) -> str:
    """Walk the records of an archive front to back and describe each one.

    Stops at the End of Central Directory record or at the first unknown
    signature.
    """
    f = io.BytesIO(data)
    output = [f"Archive size: {len(data)} bytes", "=" * 80]

    while f.tell() + 4 <= len(data):
        offset = f.tell()
        sig = struct.unpack("<I", data[offset : offset + 4])[0]

        if sig == LOCAL_FILE_HEADER:
            header = parse_local_file_header(f)
            f.seek(header.compressed_size, io.SEEK_CUR)
            output.append(
                f"0x{offset:08X}  Local file header  name={header.filename!r} "
                f"size={header.compressed_size} crc32=0x{header.crc32:08X} "
                f"modified={header.date_time.isoformat()}"
            )
        elif sig == CENTRAL_DIR_HEADER:
            header = parse_central_directory_header(f)
            output.append(
                f"0x{offset:08X}  Central directory  name={header.filename!r} "
                f"local_header=0x{header.local_header_offset:08X} "
                f"made_by=0x{header.version_made_by:04X}"
            )
        elif sig == END_OF_CENTRAL_DIR:
            eocd = parse_eocd(f)
            output.append(
                f"0x{offset:08X}  End of central dir entries={eocd.cd_records_total} "
                f"cd_size={eocd.cd_size} cd_offset=0x{eocd.cd_offset:08X}"
            )
            break
        else:
            output.append(f"0x{offset:08X}  Unknown signature 0x{sig:08X}")
            output.append(hex_dump(data[offset:], offset=offset, length=64))
            break

    return "\n".join(output)
