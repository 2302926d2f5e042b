"""
Small byte/record helpers for the allow-list decoder.

These helpers are intentionally low-level and format-structural: they know how
to pull little-endian integers and fixed-width C strings out of a stream, and
nothing about what the fields mean.

Two flavours are provided:
- stateless readers over an in-memory buffer (`u32le`, `i32le`, `u64le`),
- `ByteReader`, a sequential reader over a binary stream that raises
  `IncompleteRead` whenever the stream ends inside a field.
"""

from __future__ import annotations

from typing import BinaryIO

# Bytes stripped around fixed-width strings: ASCII whitespace plus control
# bytes, NUL included.
_TRIM_BYTES = bytes(range(0x21))


class AllowListError(Exception):
    """Base error for allow-list decoding failures (never escapes `decode`)."""


class IncompleteRead(AllowListError, EOFError):
    """The stream ended before a field could be read in full."""

    def __init__(self, offset: int, wanted: int, got: int) -> None:
        super().__init__(f"incomplete read at offset {offset}: wanted {wanted} bytes, got {got}")
        self.offset = offset
        self.wanted = wanted
        self.got = got


def u32le(buf: bytes, off: int = 0) -> int:
    """Read a little-endian u32 at byte offset `off`."""
    return int.from_bytes(buf[off : off + 4], "little")


def i32le(buf: bytes, off: int = 0) -> int:
    """Read a little-endian signed 32-bit integer at byte offset `off`."""
    return int.from_bytes(buf[off : off + 4], "little", signed=True)


def u64le(buf: bytes, off: int = 0) -> int:
    """Read a little-endian u64 at byte offset `off`."""
    return int.from_bytes(buf[off : off + 8], "little")


def fixed_string(raw: bytes) -> str:
    """
    Decode a fixed-capacity, NUL-padded string field.

    Order matters: surrounding whitespace/control bytes are stripped first,
    then the value is cut at the first remaining NUL. Invalid UTF-8 is
    replaced rather than rejected.
    """
    trimmed = bytes(raw).strip(_TRIM_BYTES)
    head = trimmed.split(b"\x00", 1)[0]
    return head.decode("utf-8", errors="replace")


class ByteReader:
    """
    Sequential little-endian reader over a binary stream.

    `offset` tracks how many bytes have been consumed, which is only used for
    diagnostics. The reader never closes the stream.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.offset = 0

    def read_upto(self, count: int) -> bytes:
        """
        Read up to `count` bytes, stopping early only at end of stream.

        Raw streams may return short reads without being exhausted, so this
        loops until either `count` bytes arrive or a read returns nothing.
        """
        if count <= 0:
            return b""
        chunks: list[bytes] = []
        remaining = count
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        self.offset += len(data)
        return data

    def read_exact(self, count: int) -> bytes:
        """Read exactly `count` bytes or raise `IncompleteRead`."""
        start = self.offset
        data = self.read_upto(count)
        if len(data) != count:
            raise IncompleteRead(start, count, len(data))
        return data

    def skip(self, count: int) -> None:
        """Discard exactly `count` bytes (padding / reserved space)."""
        self.read_exact(count)

    def u8(self) -> int:
        return self.read_exact(1)[0]

    def boolean(self) -> bool:
        """One byte; only the value 1 is true."""
        return self.u8() == 1

    def u32le(self) -> int:
        return u32le(self.read_exact(4))

    def i32le(self) -> int:
        return i32le(self.read_exact(4))

    def u64le(self) -> int:
        return u64le(self.read_exact(8))

    def fixed_string(self, width: int) -> str:
        """Read a `width`-byte string field (see `fixed_string`)."""
        return fixed_string(self.read_exact(width))

