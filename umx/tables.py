"""
Name, import and export table readers.

All readers take a byte source plus a decoded header and walk the table
from the header's offset. A table that runs out of bytes before its
declared count raises TruncatedError; no partial table is ever returned.
"""

import logging
import string
from typing import List, Sequence

from .errors import UMXError
from .reader import BinaryReader, as_reader
from .types import ExportEntry, ImportEntry, NameEncoding, NameEntry, NameLayout

logger = logging.getLogger(__name__)

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _fold(name: str) -> str:
    """ASCII-only lower casing; other characters compare exactly."""
    return name.translate(_ASCII_LOWER)


# =============================================================================
# NAME TABLE
# =============================================================================

def read_name_entry(reader: BinaryReader, layout: NameLayout) -> NameEntry:
    """Read one name table entry at the reader's position."""
    start = reader.tell()
    try:
        if layout.name_encoding is NameEncoding.TERMINATED:
            name = reader.read_cstring()
        elif layout.name_encoding is NameEncoding.COMPACT_LENGTH:
            name = reader.read_fstring()
        else:
            name = reader.read_long_fstring()
        flags = reader.read_uint32() if layout.name_flags else 0
    except UMXError:
        reader.seek(start)
        raise
    return NameEntry(name, flags)


def read_name_entries(source, header) -> List[NameEntry]:
    """Read the complete name table, flags included."""
    reader = as_reader(source)
    layout = header.layout
    reader.seek(header.name_offset)

    entries = []
    for i in range(header.name_count):
        try:
            entries.append(read_name_entry(reader, layout))
        except UMXError as e:
            logger.debug("Name table failed at entry %d of %d: %s", i, header.name_count, e)
            raise
    return entries


def read_name_table(source, header) -> List[str]:
    """Read the complete name table as a list of strings."""
    return [entry.name for entry in read_name_entries(source, header)]


def find_name(source, header, name: str) -> int:
    """Return the index of ``name`` in the name table, or -1.

    Matching ignores ASCII case. Entries are decoded one at a time and the
    scan stops at the first match, so a table truncated after the match
    still succeeds.

    Raises:
        TruncatedError: the table ended before a match or its declared count
    """
    reader = as_reader(source)
    layout = header.layout
    reader.seek(header.name_offset)
    target = _fold(name)

    for i in range(header.name_count):
        entry = read_name_entry(reader, layout)
        if _fold(entry.name) == target:
            return i
    return -1


def name_exists(source, header, name: str) -> bool:
    """True if ``name`` appears in the name table (ASCII case-insensitive).

    Works on any byte source; unreadable tables simply report False.
    """
    try:
        return find_name(source, header, name) >= 0
    except UMXError as e:
        logger.debug("Name lookup for %r stopped: %s", name, e)
        return False


# =============================================================================
# IMPORT TABLE
# =============================================================================

def read_import_entry(reader: BinaryReader, layout: NameLayout) -> ImportEntry:
    """Read one import table entry at the reader's position."""
    start = reader.tell()
    try:
        class_package = reader.read_compact_index()
        class_name = reader.read_compact_index()
        if layout.package_is_int32:
            package = reader.read_int32()
        else:
            package = reader.read_compact_index()
        object_name = reader.read_compact_index()
    except UMXError:
        reader.seek(start)
        raise
    return ImportEntry(class_package, class_name, package, object_name)


def read_imports(source, header) -> List[ImportEntry]:
    """Read the complete import table."""
    reader = as_reader(source)
    layout = header.layout
    reader.seek(header.import_offset)
    return [read_import_entry(reader, layout) for _ in range(header.import_count)]


def read_import_table(source, header, names: Sequence[str]) -> List[int]:
    """Read the import table reduced to each entry's object name index.

    Indices are reported raw; resolving them against ``names`` is left to
    the caller.
    """
    indices = [entry.object_name for entry in read_imports(source, header)]
    for index in indices:
        if not 0 <= index < len(names):
            logger.debug("Import object name %d outside name table (%d names)", index, len(names))
    return indices


# =============================================================================
# EXPORT TABLE
# =============================================================================

def read_export_entry(reader: BinaryReader, version: int) -> ExportEntry:
    """Read one export table entry at the reader's position.

    The serial offset is only stored when the serial size is non-zero.
    """
    layout = NameLayout.for_version(version)
    start = reader.tell()
    try:
        class_index = reader.read_compact_index()
        super_index = reader.read_compact_index()
        if layout.package_is_int32:
            package = reader.read_int32()
        else:
            package = reader.read_compact_index()
        object_name = reader.read_compact_index()
        object_flags = reader.read_uint32()
        serial_size = reader.read_compact_index()
        serial_offset = reader.read_compact_index() if serial_size > 0 else 0
    except UMXError:
        reader.seek(start)
        raise
    return ExportEntry(
        class_index=class_index,
        super_index=super_index,
        package=package,
        object_name=object_name,
        object_flags=object_flags,
        serial_size=serial_size,
        serial_offset=serial_offset,
    )


def read_export_table(source, header) -> List[ExportEntry]:
    """Read the complete export table."""
    reader = as_reader(source)
    reader.seek(header.export_offset)
    return [read_export_entry(reader, header.version) for _ in range(header.export_count)]
