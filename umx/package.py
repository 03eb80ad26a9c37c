"""
Unreal Package Loader.

Decodes package files (.umx, .uax, .u, ...) and provides access to the
name table, import table, export table, and the files embedded in Music
and Sound exports.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from . import config
from .errors import OutOfRangeError, UMXError
from .header import PackageHeader, parse_header, probe
from .properties import skip_properties
from .reader import BinaryReader
from .tables import read_export_table, read_imports, read_name_table
from .types import ExportEntry, ImportEntry, ProbeResult

logger = logging.getLogger(__name__)


class UMXPackage:
    """Parser for Unreal package files.

    Decodes the header and provides access to:
    - names: List of all names in the package
    - imports: List of imported object references
    - exports: List of exported objects with class and offset info

    Raises UMXError subclasses when the data is not a readable package.
    """

    def __init__(self, data: bytes, filepath: Optional[str] = None):
        self.filepath = filepath
        self.data = data

        self.header: PackageHeader = parse_header(data)
        self.names: List[str] = read_name_table(data, self.header)
        self.imports: List[ImportEntry] = read_imports(data, self.header)
        self.exports: List[ExportEntry] = read_export_table(data, self.header)

        logger.debug(
            "Loaded package v%d/%d: %d names, %d imports, %d exports",
            self.version, self.licensee, len(self.names), len(self.imports), len(self.exports),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "UMXPackage":
        """Load and parse a package file.

        Args:
            filepath: Path to the package file
        """
        with open(filepath, "rb") as f:
            data = f.read()
        return cls(data, filepath)

    @property
    def version(self) -> int:
        return self.header.version

    @property
    def licensee(self) -> int:
        return self.header.license_mode

    def name(self, index: int) -> str:
        """Safely get name from index."""
        if 0 <= index < len(self.names):
            return self.names[index]
        return ""

    def object_name(self, export: ExportEntry) -> str:
        return self.name(export.object_name)

    def class_name(self, export: ExportEntry) -> str:
        """Get class name of an export (class index can point at an import)."""
        class_index = export.class_index
        if class_index < 0:
            idx = -class_index - 1
            if idx < len(self.imports):
                return self.name(self.imports[idx].object_name)
            return ""
        if class_index > 0:
            # Export reference (rare for classes)
            idx = class_index - 1
            if idx < len(self.exports):
                return self.object_name(self.exports[idx])
            return ""
        return "Class"

    def get_exports_by_class(self, class_name: str) -> List[ExportEntry]:
        """Get all exports of a specific class (case-insensitive).

        Args:
            class_name: Name of the class to filter by

        Returns:
            List of exports matching the class
        """
        wanted = class_name.lower()
        return [e for e in self.exports if self.class_name(e).lower() == wanted]

    def find_export(self, name: str, class_name: Optional[str] = None) -> Optional[ExportEntry]:
        """Find the first export called ``name`` (case-insensitive)."""
        wanted = name.lower()
        for export in self.exports:
            if self.object_name(export).lower() != wanted:
                continue
            if class_name is not None and self.class_name(export).lower() != class_name.lower():
                continue
            return export
        return None

    def get_export_data(self, export: ExportEntry) -> bytes:
        """Get raw serialized data for an export.

        Raises:
            OutOfRangeError: the export's extent lies outside the file
        """
        if export.serial_size <= 0:
            return b""
        if export.serial_offset < 0 or export.serial_end > len(self.data):
            raise OutOfRangeError(
                f"Export {self.object_name(export)!r} spans {export.serial_offset}..{export.serial_end}, "
                f"file has {len(self.data)} bytes"
            )
        return bytes(self.data[export.serial_offset : export.serial_end])

    def get_payload(self, export: ExportEntry) -> bytes:
        """Get the file embedded in a Music or Sound export.

        Skips the object header (legacy padding, tagged properties and the
        version-specific format fields) and returns the length-prefixed blob
        that follows.
        """
        if export.serial_size <= 0:
            raise OutOfRangeError(f"Export {self.object_name(export)!r} has no serialized data")
        if export.serial_offset < 0 or export.serial_end > len(self.data):
            raise OutOfRangeError(
                f"Export {self.object_name(export)!r} extends past end of file"
            )

        r = BinaryReader(self.data, export.serial_offset, export.serial_end)
        version = self.version

        if version < 40:
            r.skip(8)
        if version < 60:
            r.skip(16)

        skip_properties(r, self.names)

        if version >= 120:
            # UT2003 and later
            r.read_compact_index()
            r.skip(8)
        elif version >= 100:
            r.skip(4)
            r.read_compact_index()
            r.skip(4)
        elif version >= 62:
            # Format name, then the offset of the next object
            r.read_compact_index()
            r.skip(4)
        else:
            r.read_compact_index()

        size = r.read_compact_index()
        if size <= 0:
            raise OutOfRangeError(f"Export {self.object_name(export)!r} has payload size {size}")
        return r.read_bytes(size)

    def iter_payloads(self, class_names: Optional[Sequence[str]] = None) -> Iterator[Tuple[ExportEntry, str, bytes]]:
        """Yield (export, name, payload) for every decodable payload export.

        Exports whose payload cannot be decoded are logged and skipped.
        """
        if class_names is None:
            class_names = config.PAYLOAD_CLASSES
        wanted = {c.lower() for c in class_names}

        for export in self.exports:
            if self.class_name(export).lower() not in wanted:
                continue
            name = self.object_name(export)
            try:
                payload = self.get_payload(export)
            except UMXError as e:
                logger.warning("Skipping export %r: %s", name, e)
                continue
            yield export, name, payload

    def dump_info(self):
        """Print package summary information."""
        print(f"Package: {self.filepath or '<memory>'}")
        print(f"  Version: {self.version}/{self.licensee}")
        print(f"  Flags: {self.header.flags:#010x}")
        print(f"  Names: {len(self.names)}")
        print(f"  Imports: {len(self.imports)}")
        print(f"  Exports: {len(self.exports)}")


def load(data: bytes, required_type: Optional[str] = None, filepath: Optional[str] = None) -> Optional[UMXPackage]:
    """Probe ``data`` and decode it, or return None if it is not a usable package."""
    verdict = probe(data, len(data), required_type)
    if verdict is not ProbeResult.SUCCESS:
        logger.debug("Probe of %s: %s", filepath or "<memory>", verdict.value)
        return None
    try:
        return UMXPackage(data, filepath)
    except UMXError as e:
        logger.info("Unreadable package %s: %s", filepath or "<memory>", e)
        return None
