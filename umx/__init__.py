"""
Unreal Package Utilities

Probing and table decoding for Unreal packages (.umx music, .uax sound),
plus extraction of the files embedded in them.
"""

from .errors import (
    UMXError,
    SignatureError,
    InsufficientDataError,
    TruncatedError,
    CompactIndexError,
    OutOfRangeError,
)
from .reader import BinaryReader, decode_index, encode_index, read_compact_index_at
from .types import ProbeResult, NameLayout, NameEntry, ImportEntry, ExportEntry
from .header import PackageHeader, SIGNATURE, HEADER_SIZE, parse_header, probe
from .tables import (
    read_name_entry,
    read_name_entries,
    read_name_table,
    find_name,
    name_exists,
    read_import_entry,
    read_imports,
    read_import_table,
    read_export_entry,
    read_export_table,
)
from .package import UMXPackage, load

__all__ = [
    'UMXError',
    'SignatureError',
    'InsufficientDataError',
    'TruncatedError',
    'CompactIndexError',
    'OutOfRangeError',
    'BinaryReader',
    'decode_index',
    'encode_index',
    'read_compact_index_at',
    'ProbeResult',
    'NameLayout',
    'NameEntry',
    'ImportEntry',
    'ExportEntry',
    'PackageHeader',
    'SIGNATURE',
    'HEADER_SIZE',
    'parse_header',
    'probe',
    'read_name_entry',
    'read_name_entries',
    'read_name_table',
    'find_name',
    'name_exists',
    'read_import_entry',
    'read_imports',
    'read_import_table',
    'read_export_entry',
    'read_export_table',
    'UMXPackage',
    'load',
]
