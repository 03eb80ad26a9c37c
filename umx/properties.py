"""
Tagged property skipping.

Serialized objects start with a list of tagged properties ended by the
name "None". The payload extractor only needs to get past that list, so
values are skipped rather than decoded.

Property tag format:
  [name_index: compact_int][info_byte][struct_name?][size?][array_idx?][value]

Info byte layout:
  bits 0-3: property type (0=None, 1=Byte, 2=Int, 3=Bool, 4=Float, etc.)
  bits 4-6: size type (0=1byte, 1=2bytes, 2=4bytes, 3=12bytes, 4=16bytes, 5-7=variable)
  bit 7: array flag (for Bool: the value itself)
"""

from typing import Sequence

from .errors import OutOfRangeError
from .reader import BinaryReader

PROP_BOOL = 3
PROP_STRUCT = 10

FIXED_SIZES = {0: 1, 1: 2, 2: 4, 3: 12, 4: 16}

# Guards against property lists that never terminate
MAX_PROPERTIES = 4096


def _read_size(reader: BinaryReader, size_type: int) -> int:
    if size_type in FIXED_SIZES:
        return FIXED_SIZES[size_type]
    if size_type == 5:
        return reader.read_uint8()
    if size_type == 6:
        return reader.read_uint16()
    return reader.read_uint32()


def _skip_array_index(reader: BinaryReader):
    b = reader.read_uint8()
    if b & 0x80 == 0:
        return
    if b & 0xC0 == 0x80:
        reader.skip(1)
    else:
        reader.skip(3)


def skip_properties(reader: BinaryReader, names: Sequence[str]) -> int:
    """Skip the tagged property list at the reader's position.

    Args:
        reader: Reader positioned at the first property tag
        names: Package name table

    Returns:
        Number of properties skipped (the terminator not counted)

    Raises:
        OutOfRangeError: a property name index is outside the name table
        TruncatedError: the list runs past the end of the data
    """
    for count in range(MAX_PROPERTIES):
        name_idx = reader.read_compact_index()
        if not 0 <= name_idx < len(names):
            raise OutOfRangeError(f"Invalid property name index {name_idx}")
        if names[name_idx].lower() == "none":
            return count

        info = reader.read_uint8()
        prop_type = info & 0x0F
        size_type = (info >> 4) & 0x07
        is_array = (info & 0x80) != 0

        if prop_type == PROP_STRUCT:
            reader.read_compact_index()  # struct name

        size = _read_size(reader, size_type)

        if is_array and prop_type != PROP_BOOL:
            _skip_array_index(reader)

        if prop_type != PROP_BOOL:
            reader.skip(size)

    raise OutOfRangeError(f"Property list exceeds {MAX_PROPERTIES} entries")
