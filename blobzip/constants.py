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
ZIP format constants: record signatures, record sizes, versions and field limits.

Only the subset of the PKZIP format needed for single-disk archives of
stored (uncompressed) entries is described here.
"""

# ZIP record signatures (little-endian integers of the magic bytes)
LOCAL_FILE_HEADER = 0x04034B50  # "PK\x03\x04"
CENTRAL_DIR_HEADER = 0x02014B50  # "PK\x01\x02"
END_OF_CENTRAL_DIR = 0x06054B50  # "PK\x05\x06"

# Compression methods
COMP_STORED = 0  # No compression

# General purpose bit flags
FLAG_NONE = 0x0000
FLAG_ENCRYPTED = 0x0001  # File is encrypted

# ZIP version constants
VERSION_NEEDED = 10  # 1.0: stored entries only
VERSION_MADE_BY = 0x030A  # Made by: Unix (high byte 3), spec version 1.0 (low byte 10)

# Classic ZIP limits
MAX_UINT16 = 0xFFFF
MAX_UINT32 = 0xFFFFFFFF
MAX_ENTRIES = MAX_UINT16  # 65535 entries

# Local file header size (fixed part, excluding filename and data)
LOCAL_FILE_HEADER_SIZE = 30

# Central directory header size (fixed part, excluding filename)
CENTRAL_DIR_HEADER_SIZE = 46

# End of central directory size (no archive comment is written)
END_OF_CENTRAL_DIR_SIZE = 22

# Text encoding used for entry names and contents
TEXT_ENCODING = "utf-8"

# Output defaults
ZIP_MEDIA_TYPE = "application/zip"
DEFAULT_ARCHIVE_NAME = "result.zip"
