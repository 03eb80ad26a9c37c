"""
Binary Reader for Unreal packages.

Provides a bounded cursor over an in-memory byte source plus the compact
index codec used throughout the package tables.

Any object supporting ``len()`` and slicing works as a byte source: bytes,
bytearray, memoryview and mmap all qualify.
"""

import struct
from typing import Optional, Tuple

from .errors import CompactIndexError, TruncatedError


# Largest magnitude a compact index can carry (6 + 7 * 3 + 4 bits).
COMPACT_INDEX_MAX = 0x7FFFFFFF
COMPACT_INDEX_MAX_BYTES = 5


def read_compact_index_at(data, offset: int, end: Optional[int] = None) -> Tuple[int, int]:
    """Read a compact index from bytes at given offset.

    Standalone function for cases where a BinaryReader isn't used.

    Layout:
    - Bit 7 of first byte: sign
    - Bit 6 of first byte: continuation flag
    - Bits 0-5: 6 bits of value
    - Bytes 2-4: 7 bits of value + continuation flag (bit 7)
    - Byte 5: remaining value bits, no continuation flag

    Args:
        data: Raw bytes
        offset: Starting offset
        end: Exclusive read limit (defaults to len(data))

    Returns:
        (value, new_offset) tuple

    Raises:
        TruncatedError: the encoding runs past ``end``
        CompactIndexError: the fifth byte carries more than 32 bits
    """
    if end is None:
        end = len(data)
    if offset < 0 or offset >= end:
        raise TruncatedError(f"Compact index at {offset} is beyond data length {end}")

    b0 = data[offset]
    negative = b0 & 0x80
    value = b0 & 0x3F
    pos = offset + 1
    more = b0 & 0x40
    shift = 6

    while more:
        if pos >= end:
            raise TruncatedError(f"Unexpected end of data in compact index at {offset}")
        b = data[pos]
        pos += 1

        if shift == 27:
            # Last byte: full width, but only 4 bits still fit in an int32
            if b & 0xF0:
                raise CompactIndexError(
                    f"Compact index at {offset} overflows 32 bits (last byte {b:#04x})"
                )
            value |= b << 27
            break

        value |= (b & 0x7F) << shift
        more = b & 0x80
        shift += 7

    # -0 collapses to 0
    return (-value if negative else value), pos


def decode_index(data, offset: int = 0) -> Tuple[int, int]:
    """Decode a compact index; alias kept for callers working on raw buffers."""
    return read_compact_index_at(data, offset)


def encode_index(value: int) -> bytes:
    """Encode an integer as a minimal compact index.

    Packages are never written by this library; the encoder exists so test
    fixtures and tools can build table data.
    """
    magnitude = abs(value)
    if magnitude > COMPACT_INDEX_MAX:
        raise ValueError(f"{value} does not fit in a compact index")

    first = magnitude & 0x3F
    if value < 0:
        first |= 0x80
    magnitude >>= 6
    if magnitude:
        first |= 0x40

    out = bytearray([first])
    while magnitude:
        if len(out) == COMPACT_INDEX_MAX_BYTES - 1:
            out.append(magnitude)
            break
        b = magnitude & 0x7F
        magnitude >>= 7
        if magnitude:
            b |= 0x80
        out.append(b)
    return bytes(out)


class BinaryReader:
    """Bounded binary cursor with Unreal format support.

    Reads never move past ``end``: a short read raises TruncatedError and
    leaves the position unchanged.
    """

    def __init__(self, data, offset: int = 0, end: Optional[int] = None):
        self.data = data
        self.start = offset
        self.end = len(data) if end is None else min(end, len(data))
        self.pos = offset

    def __len__(self) -> int:
        return self.end

    def __getitem__(self, key):
        # Slicing keeps BinaryReader usable as a byte source itself
        if isinstance(key, slice):
            start, stop, _ = key.indices(self.end)
            return bytes(self.data[start:stop])
        if key < 0:
            key += self.end
        if not 0 <= key < self.end:
            raise IndexError("BinaryReader index out of range")
        return self.data[key]

    def seek(self, pos: int):
        """Seek to absolute position."""
        if pos < 0 or pos > self.end:
            raise TruncatedError(f"Cannot seek to {pos}, data ends at {self.end}")
        self.pos = pos

    def tell(self) -> int:
        """Return current position."""
        return self.pos

    def remaining(self) -> int:
        """Return remaining bytes."""
        return max(self.end - self.pos, 0)

    def can_read(self, count: int) -> bool:
        return self.remaining() >= count

    def read_bytes(self, count: int) -> bytes:
        """Read raw bytes."""
        if count < 0 or count > self.remaining():
            raise TruncatedError(
                f"Need {count} bytes at {self.pos}, only {self.remaining()} left"
            )
        result = bytes(self.data[self.pos : self.pos + count])
        self.pos += count
        return result

    def skip(self, count: int):
        self.read_bytes(count)

    def read_chunk(self, size: int) -> "BinaryReader":
        """Return a reader bounded to the next ``size`` bytes and skip past them."""
        if size < 0 or size > self.remaining():
            raise TruncatedError(
                f"Chunk of {size} bytes at {self.pos} exceeds data end {self.end}"
            )
        chunk = BinaryReader(self.data, self.pos, self.pos + size)
        self.pos += size
        return chunk

    def read_uint8(self) -> int:
        return struct.unpack("<B", self.read_bytes(1))[0]

    def read_uint16(self) -> int:
        return struct.unpack("<H", self.read_bytes(2))[0]

    def read_int32(self) -> int:
        return struct.unpack("<i", self.read_bytes(4))[0]

    def read_uint32(self) -> int:
        return struct.unpack("<I", self.read_bytes(4))[0]

    def read_compact_index(self) -> int:
        """Read a compact index (variable-length signed integer)."""
        value, pos = read_compact_index_at(self.data, self.pos, self.end)
        self.pos = pos
        return value

    def read_cstring(self) -> str:
        """Read a NUL-terminated Latin-1 string."""
        stop = self.pos
        while stop < self.end and self.data[stop] != 0:
            stop += 1
        if stop >= self.end:
            raise TruncatedError(f"Unterminated string at {self.pos}")
        result = bytes(self.data[self.pos : stop]).decode("latin-1")
        self.pos = stop + 1
        return result

    def read_fstring(self) -> str:
        """Read a length-prefixed string (FString).

        Format:
        - Compact index for length, terminator included (negative = Unicode)
        - String data (Latin-1 or UTF-16LE)
        """
        start = self.pos
        length = self.read_compact_index()
        try:
            return self._read_counted_string(length)
        except TruncatedError:
            self.pos = start
            raise

    def read_long_fstring(self) -> str:
        """Read a string prefixed with a fixed 32-bit length."""
        start = self.pos
        length = self.read_int32()
        try:
            return self._read_counted_string(length)
        except TruncatedError:
            self.pos = start
            raise

    def _read_counted_string(self, length: int) -> str:
        if length < 0:
            # Unicode string (UTF-16LE)
            raw = self.read_bytes(-length * 2)
            return raw.decode("utf-16-le", errors="replace").rstrip("\x00")
        if length > 0:
            raw = self.read_bytes(length)
            return raw.decode("latin-1").rstrip("\x00")
        return ""


def as_reader(source) -> BinaryReader:
    """Wrap a byte source in a fresh BinaryReader.

    A BinaryReader passed in is not shared: the new reader covers the same
    bytes with its own cursor.
    """
    if isinstance(source, BinaryReader):
        return BinaryReader(source.data, 0, source.end)
    return BinaryReader(source)
