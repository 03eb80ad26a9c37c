"""Helpers that assemble package bytes for tests."""

import struct

from umx.header import HEADER_SIZE, SIGNATURE
from umx.reader import encode_index


def header_bytes(version=69, license_mode=0, flags=1,
                 name_count=0, name_offset=0,
                 export_count=0, export_offset=0,
                 import_count=0, import_offset=0, magic=SIGNATURE):
    return magic + struct.pack(
        "<HHIIIIIII", version, license_mode, flags,
        name_count, name_offset, export_count, export_offset,
        import_count, import_offset,
    )


def name_entry(name, version=69, flags=0):
    raw = name.encode("latin-1") + b"\x00"
    if version >= 178:
        prefix = struct.pack("<i", len(raw))
    elif version >= 64:
        prefix = encode_index(len(raw))
    else:
        prefix = b""
    return prefix + raw + struct.pack("<I", flags)


def package_ref(value, version):
    if version >= 60:
        return struct.pack("<i", value)
    return encode_index(value)


def import_entry(class_package, class_name, package, object_name, version=69):
    return (
        encode_index(class_package)
        + encode_index(class_name)
        + package_ref(package, version)
        + encode_index(object_name)
    )


def export_entry(class_index, object_name, size, offset, version=69,
                 super_index=0, package=0, object_flags=0x00070004):
    out = (
        encode_index(class_index)
        + encode_index(super_index)
        + package_ref(package, version)
        + encode_index(object_name)
        + struct.pack("<I", object_flags)
        + encode_index(size)
    )
    if size > 0:
        out += encode_index(offset)
    return out


def music_object(none_index, format_index, payload, version=69):
    """Serialized Music/Sound object: no properties, format name, blob."""
    out = b""
    if version < 40:
        out += b"\x00" * 8
    if version < 60:
        out += b"\x00" * 16
    out += encode_index(none_index)
    if version >= 120:
        out += encode_index(format_index) + b"\x00" * 8
    elif version >= 100:
        out += b"\x00" * 4 + encode_index(format_index) + b"\x00" * 4
    elif version >= 62:
        out += encode_index(format_index) + b"\x00" * 4
    else:
        out += encode_index(format_index)
    return out + encode_index(len(payload)) + payload


def build_package(names, imports=(), exports=(), version=69):
    """Assemble a package.

    ``imports`` are (class_package, class_name, package, object_name) tuples;
    ``exports`` are (class_index, object_name, object_bytes) tuples. Object
    data is laid out right after the header, tables follow it.
    """
    body = b""
    placed = []
    for class_index, object_name, blob in exports:
        offset = HEADER_SIZE + len(body)
        placed.append((class_index, object_name, len(blob), offset))
        body += blob

    name_offset = HEADER_SIZE + len(body)
    name_table = b"".join(name_entry(n, version) for n in names)

    import_offset = name_offset + len(name_table)
    import_table = b"".join(import_entry(*i, version=version) for i in imports)

    export_offset = import_offset + len(import_table)
    export_table = b"".join(
        export_entry(c, n, size, off, version=version) for c, n, size, off in placed
    )

    header = header_bytes(
        version=version,
        name_count=len(names), name_offset=name_offset,
        export_count=len(exports), export_offset=export_offset,
        import_count=len(imports), import_offset=import_offset,
    )
    return header + body + name_table + import_table + export_table
