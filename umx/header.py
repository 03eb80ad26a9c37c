"""
Package header decoding and format probing.

The header is a fixed 36-byte little-endian record that locates the name,
export and import tables. ``probe`` decides from it whether a byte stream
is a package at all, without ever raising on malformed input.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from construct import Bytes, Int16ul, Int32ul, Struct

from .errors import InsufficientDataError, SignatureError, UMXError, TruncatedError
from .tables import find_name
from .types import NameLayout, ProbeResult

logger = logging.getLogger(__name__)

SIGNATURE = b"\xC1\x83\x2A\x9E"

HEADER_STRUCT = Struct(
    "magic" / Bytes(4),
    "version" / Int16ul,
    "license_mode" / Int16ul,
    "flags" / Int32ul,
    "name_count" / Int32ul,
    "name_offset" / Int32ul,
    "export_count" / Int32ul,
    "export_offset" / Int32ul,
    "import_count" / Int32ul,
    "import_offset" / Int32ul,
)

HEADER_SIZE = HEADER_STRUCT.sizeof()

# Smallest possible on-disk entry of each table
MIN_NAME_ENTRY_SIZE = 5
MIN_EXPORT_ENTRY_SIZE = 8
MIN_IMPORT_ENTRY_SIZE = 4

UINT32_MAX = 0xFFFFFFFF


@dataclass(frozen=True)
class PackageHeader:
    """Decoded package header."""
    magic: bytes
    version: int
    license_mode: int
    flags: int
    name_count: int
    name_offset: int
    export_count: int
    export_offset: int
    import_count: int
    import_offset: int

    @classmethod
    def parse(cls, data: bytes) -> "PackageHeader":
        c = HEADER_STRUCT.parse(data)
        return cls(
            magic=bytes(c.magic),
            version=c.version,
            license_mode=c.license_mode,
            flags=c.flags,
            name_count=c.name_count,
            name_offset=c.name_offset,
            export_count=c.export_count,
            export_offset=c.export_offset,
            import_count=c.import_count,
            import_offset=c.import_offset,
        )

    def build(self) -> bytes:
        """Serialize back to 36 bytes."""
        return HEADER_STRUCT.build(dict(
            magic=self.magic,
            version=self.version,
            license_mode=self.license_mode,
            flags=self.flags,
            name_count=self.name_count,
            name_offset=self.name_offset,
            export_count=self.export_count,
            export_offset=self.export_offset,
            import_count=self.import_count,
            import_offset=self.import_offset,
        ))

    @property
    def layout(self) -> NameLayout:
        return NameLayout.for_version(self.version)

    def _tables(self):
        return (
            (self.name_count, self.name_offset, MIN_NAME_ENTRY_SIZE),
            (self.export_count, self.export_offset, MIN_EXPORT_ENTRY_SIZE),
            (self.import_count, self.import_offset, MIN_IMPORT_ENTRY_SIZE),
        )

    def is_valid(self) -> bool:
        """Check the signature and that every table fits in a 32-bit file."""
        if self.magic != SIGNATURE:
            return False
        for count, offset, entry_size in self._tables():
            if count == 0:
                continue
            if offset < HEADER_SIZE:
                return False
            if count > UINT32_MAX // entry_size:
                return False
            if UINT32_MAX - count * entry_size < offset:
                return False
        return True

    def minimum_additional_size(self) -> int:
        """Bytes needed after the header to hold the smallest possible tables."""
        end = max(offset + count * entry_size for count, offset, entry_size in self._tables())
        return max(end - HEADER_SIZE, 0)


def parse_header(source) -> PackageHeader:
    """Decode and validate the header at the start of ``source``.

    Raises:
        InsufficientDataError: fewer than 36 bytes available
        SignatureError: bad magic or impossible table locations
    """
    if len(source) < HEADER_SIZE:
        raise InsufficientDataError(
            f"Package header needs {HEADER_SIZE} bytes, got {len(source)}"
        )
    header = PackageHeader.parse(bytes(source[:HEADER_SIZE]))
    if header.magic != SIGNATURE:
        raise SignatureError(f"Invalid package signature: {header.magic.hex()}")
    if not header.is_valid():
        raise SignatureError("Package header table locations are out of range")
    return header


def probe(source, known_size: Optional[int] = None, required_type: Optional[str] = None) -> ProbeResult:
    """Decide whether ``source`` holds an Unreal package.

    Args:
        source: Byte source holding at least the start of the file
        known_size: Total file size, or None when streaming
        required_type: Name that must appear in the name table (e.g. "music")

    Returns:
        ProbeResult.SUCCESS, NEED_MORE_DATA or FAILURE
    """
    available = len(source)
    size_exhausted = known_size is not None and known_size <= available

    if available < HEADER_SIZE:
        if size_exhausted:
            return ProbeResult.FAILURE
        return ProbeResult.NEED_MORE_DATA

    try:
        header = parse_header(source)
    except UMXError as e:
        logger.debug("Probe rejected header: %s", e)
        return ProbeResult.FAILURE

    needed = HEADER_SIZE + header.minimum_additional_size()
    if known_size is not None and known_size < needed:
        logger.debug("Probe rejected header: file has %d bytes, tables need %d", known_size, needed)
        return ProbeResult.FAILURE

    if required_type:
        try:
            found = find_name(source, header, required_type) >= 0
        except TruncatedError:
            if size_exhausted:
                return ProbeResult.FAILURE
            return ProbeResult.NEED_MORE_DATA
        except UMXError as e:
            logger.debug("Probe could not scan name table: %s", e)
            return ProbeResult.FAILURE
        if not found:
            logger.debug("Probe: name %r not in name table", required_type)
            return ProbeResult.FAILURE

    return ProbeResult.SUCCESS
