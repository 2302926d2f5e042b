import io

import pytest

from allowlist.api.profile._shared import bytes_util
from allowlist.api.profile._shared.bytes_util import ByteReader, IncompleteRead


def test_stateless_integer_readers():
    buf = bytes.fromhex("55534b7f" "feffffff" "0100000000000080")
    assert bytes_util.u32le(buf) == 0x7F4B5355
    assert bytes_util.i32le(buf, 4) == -2
    assert bytes_util.u32le(buf, 4) == 0xFFFFFFFE
    assert bytes_util.u64le(buf, 8) == 0x8000000000000001


@pytest.mark.parametrize(
    "raw, expected",
    [
        (b"com.example.app" + b"\x00" * 241, "com.example.app"),
        (b"\t com.example.app \x00\x00", "com.example.app"),
        (b"abc\x00def", "abc"),
        (b"\x00" * 64, ""),
        (b"u:r:su:s0  \x00\x00", "u:r:su:s0"),
        (b"caf\xc3\xa9\x00", "café"),
        (b"bad\xff\x00", "bad\ufffd"),
    ],
)
def test_fixed_string(raw, expected):
    assert bytes_util.fixed_string(raw) == expected


def test_reader_tracks_offset_and_types():
    data = b"\x01" + b"\x02" + (7).to_bytes(4, "little") + (-1).to_bytes(4, "little", signed=True)
    data += (2**64 - 1).to_bytes(8, "little") + b"name\x00\x00"
    reader = ByteReader(io.BytesIO(data))
    assert reader.boolean() is True
    assert reader.boolean() is False
    assert reader.u32le() == 7
    assert reader.i32le() == -1
    assert reader.u64le() == 2**64 - 1
    assert reader.fixed_string(6) == "name"
    assert reader.offset == len(data)
    assert reader.read_upto(4) == b""


def test_read_exact_raises_with_context():
    reader = ByteReader(io.BytesIO(b"\x00" * 10))
    reader.skip(7)
    with pytest.raises(IncompleteRead) as excinfo:
        reader.read_exact(8)
    err = excinfo.value
    assert (err.offset, err.wanted, err.got) == (7, 8, 3)
    assert isinstance(err, EOFError)
    assert isinstance(err, bytes_util.AllowListError)


def test_zero_length_reads_are_noops():
    reader = ByteReader(io.BytesIO(b""))
    assert reader.read_exact(0) == b""
    reader.skip(0)
    assert reader.offset == 0
