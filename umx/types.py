"""
Shared data types for package parsing.

Table entries are plain dataclasses; the layout policy captures every
version-dependent detail of the tables so the readers never branch on the
raw version number themselves.
"""

import enum
from dataclasses import dataclass


class ProbeResult(enum.Enum):
    """Verdict of a header probe."""
    SUCCESS = "success"
    NEED_MORE_DATA = "need_more_data"
    FAILURE = "failure"


class NameEncoding(enum.Enum):
    """How name table strings are stored."""
    TERMINATED = "terminated"      # NUL-terminated, no length
    COMPACT_LENGTH = "compact"     # compact index length, NUL included
    INT32_LENGTH = "int32"         # fixed 32-bit length, NUL included


# Version thresholds
PACKAGE_INT32_VERSION = 60     # package reference stored as int32 from here on
NAME_LENGTH_VERSION = 64       # names gain a compact length prefix
NAME_INT32_LENGTH_VERSION = 178  # names use a fixed 32-bit length prefix
NAME_FLAGS_VERSION = 0         # every supported layout carries name flags


@dataclass(frozen=True)
class NameLayout:
    """Table layout policy derived once from the package version."""
    version: int
    name_encoding: NameEncoding
    name_flags: bool
    package_is_int32: bool

    @classmethod
    def for_version(cls, version: int) -> "NameLayout":
        if version >= NAME_INT32_LENGTH_VERSION:
            encoding = NameEncoding.INT32_LENGTH
        elif version >= NAME_LENGTH_VERSION:
            encoding = NameEncoding.COMPACT_LENGTH
        else:
            encoding = NameEncoding.TERMINATED
        return cls(
            version=version,
            name_encoding=encoding,
            name_flags=version >= NAME_FLAGS_VERSION,
            package_is_int32=version >= PACKAGE_INT32_VERSION,
        )


@dataclass(frozen=True)
class NameEntry:
    """One name table entry."""
    name: str
    flags: int = 0


@dataclass(frozen=True)
class ImportEntry:
    """One import table entry (indices left unresolved)."""
    class_package: int
    class_name: int
    package: int
    object_name: int


@dataclass(frozen=True)
class ExportEntry:
    """One export table entry.

    ``class_index`` follows object reference rules: negative values point
    into the import table (``-index - 1``), positive values into the export
    table (``index - 1``), zero means the object is itself a class.
    """
    class_index: int
    super_index: int
    package: int
    object_name: int
    object_flags: int
    serial_size: int
    serial_offset: int

    @property
    def serial_end(self) -> int:
        return self.serial_offset + self.serial_size
