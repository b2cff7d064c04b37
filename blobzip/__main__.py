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
Command-line interface for blobzip (``blobzip``).

Supported commands (via ``python -m blobzip``):

- ``create`` : Build an archive from name/content pairs
- ``list``   : List entries in an archive
- ``test``   : Verify every entry checksum
- ``dump``   : Show the record layout of an archive

Example usages:

    # Two entries, saved as result.zip
    python -m blobzip create a.txt=hi b.txt=bye

    # Entries from a JSON list of {"name": ..., "content": ...} objects
    python -m blobzip create --json entries.json -o notes.zip

    # Entry content read from a file
    python -m blobzip create --file readme.txt=README.md
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from . import __version__
from .codec import Entry
from .constants import DEFAULT_ARCHIVE_NAME
from .debug import dump_zip_structure
from .errors import ZipError
from .reader import ZipReader
from .writer import build_archive

logger = logging.getLogger("blobzip")

EMPTY_ENTRY_MESSAGE = "Empty name or value in one of the files"


class InputError(ValueError):
    """Raised for invalid command-line entry input."""


def _print_error(message: str, exit_code: int = 1) -> None:
    """Print an error message to stderr and exit with the given code."""
    sys.stderr.write(f"blobzip: {message}\n")
    sys.exit(exit_code)


def _split_pair(value: str, option: str) -> tuple[str, str]:
    name, sep, rest = value.partition("=")
    if not sep:
        raise InputError(f"Expected NAME=VALUE for {option}, got {value!r}")
    return name, rest


def _load_json_entries(path: Path) -> list[Entry]:
    """Load entries from a JSON list of objects with name and content keys.

    The key ``data`` is accepted as an alias of ``content``.
    """
    try:
        items = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InputError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(items, list):
        raise InputError(f"Expected a JSON list of entries in {path}")

    entries = []
    for item in items:
        if not isinstance(item, dict):
            raise InputError(f"Expected a JSON object per entry in {path}, got {item!r}")
        name = item.get("name", "")
        content = item.get("content", item.get("data", ""))
        if not isinstance(name, str) or not isinstance(content, str):
            raise InputError(f"Entry name and content must be strings in {path}, got {item!r}")
        entries.append(Entry(name, content))
    return entries


def collect_entries(
    pairs: list[str],
    files: Optional[list[str]] = None,
    json_file: Optional[Path] = None,
) -> list[Entry]:
    """Gather entries from the create sub-command arguments.

    JSON entries come first, then NAME=PATH files, then NAME=CONTENT pairs.

    Raises:
        InputError: If an argument is malformed, an input file is not
            UTF-8 text, or an entry has an empty name or content.
    """
    entries: list[Entry] = []
    if json_file is not None:
        entries.extend(_load_json_entries(json_file))
    for value in files or []:
        name, source = _split_pair(value, "--file")
        try:
            content = Path(source).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise InputError(f"{source} is not UTF-8 text: {e}") from e
        entries.append(Entry(name, content))
    for value in pairs:
        entries.append(Entry(*_split_pair(value, "entry")))

    if not entries:
        raise InputError("No entries given")
    if any(not entry.name or not entry.content for entry in entries):
        raise InputError(EMPTY_ENTRY_MESSAGE)
    return entries


def _cmd_create(
    output: Path,
    pairs: list[str],
    files: Optional[list[str]] = None,
    json_file: Optional[Path] = None,
    timestamp: Optional[datetime] = None,
    force: bool = False,
) -> None:
    """Build an archive from the given entries and save it to *output*."""
    if output.exists() and not force:
        _print_error(f"Refusing to overwrite existing archive: {output}", exit_code=2)

    try:
        entries = collect_entries(pairs, files, json_file)
    except InputError as e:
        _print_error(str(e), exit_code=2)

    archive = build_archive(entries, timestamp=timestamp, filename=output.name)
    archive.save(output)
    print(f"{output}: {len(entries)} entries, {len(archive)} bytes")


def _cmd_list(archive: Path) -> None:
    """List all entries in an archive, one per line."""
    reader = ZipReader(archive.read_bytes())
    for header in reader.entries:
        name = header.filename.decode("utf-8", errors="replace")
        print(f"{header.uncompressed_size:>10}  {header.crc32:08x}  {name}")


def _cmd_test(archive: Path) -> None:
    """Read every entry and verify its checksum."""
    reader = ZipReader(archive.read_bytes())
    bad = reader.test()
    if bad:
        _print_error(f"{len(bad)} bad entries in {archive}: {', '.join(bad)}", exit_code=1)
    print(f"{archive}: OK ({len(reader.entries)} entries)")


def _cmd_dump(archive: Path) -> None:
    print(dump_zip_structure(archive.read_bytes()))


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="blobzip",
        description="blobzip - build stored ZIP archives in memory.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # create
    p_create = subparsers.add_parser("create", help="Create an archive from name/content pairs")
    p_create.add_argument(
        "entries",
        nargs="*",
        metavar="NAME=CONTENT",
        help="Entry name and its text content.",
    )
    p_create.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path(DEFAULT_ARCHIVE_NAME),
        help=f"Output archive path (default: {DEFAULT_ARCHIVE_NAME}).",
    )
    p_create.add_argument(
        "--file",
        action="append",
        metavar="NAME=PATH",
        default=[],
        help="Add an entry whose content is read from a UTF-8 text file. May be repeated.",
    )
    p_create.add_argument(
        "--json",
        type=Path,
        default=None,
        metavar="FILE",
        help='Read entries from a JSON list of {"name": ..., "content": ...} objects.',
    )
    p_create.add_argument(
        "--timestamp",
        type=datetime.fromisoformat,
        default=None,
        help="Modification time for all entries, ISO 8601 (default: now).",
    )
    p_create.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite the output archive if it exists.",
    )

    # list
    p_list = subparsers.add_parser("list", help="List entries in an archive")
    p_list.add_argument("archive", type=Path, help="Path to the ZIP archive")

    # test
    p_test = subparsers.add_parser("test", help="Verify entry checksums")
    p_test.add_argument("archive", type=Path, help="Path to the ZIP archive")

    # dump
    p_dump = subparsers.add_parser("dump", help="Show the record layout of an archive")
    p_dump.add_argument("archive", type=Path, help="Path to the ZIP archive")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """
    Entry point for the blobzip CLI.

    This function is invoked when running:

        python -m blobzip ...

    or via the ``blobzip`` console script.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "create":
            _cmd_create(
                args.output,
                args.entries,
                files=args.file,
                json_file=args.json,
                timestamp=args.timestamp,
                force=args.force,
            )
        elif args.command == "list":
            _cmd_list(args.archive)
        elif args.command == "test":
            _cmd_test(args.archive)
        elif args.command == "dump":
            _cmd_dump(args.archive)
        else:
            parser.error(f"Unknown command: {args.command!r}")
    except ZipError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        _print_error(str(e), exit_code=1)
    except FileNotFoundError as e:
        _print_error(f"File not found: {e.filename}", exit_code=2)
    except PermissionError as e:
        _print_error(f"Permission denied: {e.filename}", exit_code=2)
    except KeyboardInterrupt:
        _print_error("Interrupted by user", exit_code=130)


if __name__ == "__main__":
    main()
