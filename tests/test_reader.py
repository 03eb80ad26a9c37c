import pytest

from umx.errors import CompactIndexError, TruncatedError
from umx.reader import (
    BinaryReader,
    as_reader,
    decode_index,
    encode_index,
    read_compact_index_at,
)


@pytest.mark.parametrize("value,length", [
    (0, 1),
    (1, 1),
    (-1, 1),
    (63, 1),
    (-63, 1),
    (64, 2),
    (-64, 2),
    (8191, 2),
    (-8191, 2),
    (8192, 3),
    (-8192, 3),
    ((1 << 20) - 1, 3),
    (1 << 20, 4),
    ((1 << 27) - 1, 4),
    (-(1 << 27), 5),
    (0x7FFFFFFF, 5),
    (-0x7FFFFFFF, 5),
])
def test_compact_index_lengths(value, length):
    encoded = encode_index(value)
    assert len(encoded) == length
    assert decode_index(encoded + b"\xAA") == (value, length)


def test_compact_index_bit_layout():
    assert encode_index(-1) == b"\x81"
    assert encode_index(64) == b"\x40\x01"
    assert encode_index(-64) == b"\xC0\x01"
    assert encode_index(8192) == b"\x40\x80\x01"


def test_negative_zero_decodes_as_zero():
    value, pos = read_compact_index_at(b"\x80", 0)
    assert value == 0
    assert pos == 1


def test_fifth_byte_overflow_fails():
    with pytest.raises(CompactIndexError):
        read_compact_index_at(b"\x40\x80\x80\x80\x10", 0)
    with pytest.raises(CompactIndexError):
        read_compact_index_at(b"\x40\x80\x80\x80\x80\x01", 0)


def test_compact_index_truncated_leaves_cursor():
    r = BinaryReader(b"\x00\x40\x80")
    r.seek(1)
    with pytest.raises(TruncatedError):
        r.read_compact_index()
    assert r.tell() == 1


def test_compact_index_respects_reader_bound():
    # Continuation byte exists in the buffer but lies beyond the bound
    r = BinaryReader(b"\x40\x01", 0, 1)
    with pytest.raises(TruncatedError):
        r.read_compact_index()
    assert r.tell() == 0


def test_encode_rejects_out_of_range():
    with pytest.raises(ValueError):
        encode_index(1 << 31)


def test_read_bytes_short_read():
    r = BinaryReader(b"abc")
    with pytest.raises(TruncatedError):
        r.read_bytes(4)
    assert r.tell() == 0
    assert r.read_bytes(3) == b"abc"
    assert r.remaining() == 0


def test_read_chunk_is_bounded():
    r = BinaryReader(b"\x01\x02\x03\x04\x05")
    r.skip(1)
    chunk = r.read_chunk(2)
    assert r.tell() == 3
    assert chunk.read_uint8() == 2
    assert chunk.read_uint8() == 3
    with pytest.raises(TruncatedError):
        chunk.read_uint8()
    with pytest.raises(TruncatedError):
        r.read_chunk(10)


def test_strings():
    r = BinaryReader(encode_index(6) + b"Music\x00" + b"Song\x00" + b"\x04\x00\x00\x00Foo\x00")
    assert r.read_fstring() == "Music"
    assert r.read_cstring() == "Song"
    assert r.read_long_fstring() == "Foo"
    assert r.remaining() == 0


def test_unicode_fstring():
    raw = "Ünï".encode("utf-16-le") + b"\x00\x00"
    r = BinaryReader(encode_index(-4) + raw)
    assert r.read_fstring() == "Ünï"


def test_truncated_fstring_restores_position():
    r = BinaryReader(encode_index(10) + b"short")
    with pytest.raises(TruncatedError):
        r.read_fstring()
    assert r.tell() == 0


def test_unterminated_cstring():
    r = BinaryReader(b"abc")
    with pytest.raises(TruncatedError):
        r.read_cstring()
    assert r.tell() == 0


def test_as_reader_does_not_share_cursor():
    r = BinaryReader(b"\x01\x02\x03")
    r.skip(2)
    other = as_reader(r)
    assert other.tell() == 0
    assert other.read_uint8() == 1
    assert r.tell() == 2
    assert r[0:2] == b"\x01\x02"
    assert len(other) == 3
