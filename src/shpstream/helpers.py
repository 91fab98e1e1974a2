from __future__ import annotations

from struct import Struct

from .exceptions import ShapefileTruncatedError
from .types import ReadableBinStream

# Helpers

_int32_be = Struct(">i")
_int32_le = Struct("<i")
_float64_le = Struct("<d")

unpack_2_int32_be = Struct(">2i").unpack


def read_exact(b_io: ReadableBinStream, size: int) -> bytes:
    """Reads exactly size bytes, or raises ShapefileTruncatedError.
    A file object may return fewer bytes than asked for, so keep
    reading until the stream is exhausted."""
    data = b_io.read(size)
    if len(data) == size:
        return data
    chunks = [data]
    got = len(data)
    while data and got < size:
        data = b_io.read(size - got)
        chunks.append(data)
        got += len(data)
    if got != size:
        raise ShapefileTruncatedError(
            f"Unexpected end of stream: wanted {size} bytes, got {got}."
        )
    return b"".join(chunks)


def read_int32_be(b_io: ReadableBinStream) -> int:
    (value,) = _int32_be.unpack(read_exact(b_io, 4))
    return value


def read_int32_le(b_io: ReadableBinStream) -> int:
    (value,) = _int32_le.unpack(read_exact(b_io, 4))
    return value


def read_float64_le(b_io: ReadableBinStream) -> float:
    (value,) = _float64_le.unpack(read_exact(b_io, 8))
    return value


def read_int32_le_array(b_io: ReadableBinStream, n: int) -> tuple[int, ...]:
    return Struct(f"<{n}i").unpack(read_exact(b_io, 4 * n))


def read_float64_le_array(b_io: ReadableBinStream, n: int) -> tuple[float, ...]:
    return Struct(f"<{n}d").unpack(read_exact(b_io, 8 * n))
