"""Variable-length unsigned integers: little-endian groups of seven bits."""

from typing import BinaryIO

_U64_MAX = (1 << 64) - 1


def encode_uint(n: int) -> bytes:
    """Encode an unsigned 64-bit integer as a variable-length byte string."""
    if not 0 <= n <= _U64_MAX:
        raise ValueError(f"unsigned 64-bit integer out of range: {n}")
    out = bytearray()
    while n > 127:
        out.append((n & 127) | 128)
        n >>= 7
    out.append(n)
    return bytes(out)


def read_uint(stream: BinaryIO) -> int:
    """Read one variable-length unsigned integer from a binary stream."""
    n = 0
    shift = 0
    while True:
        chunk = stream.read(1)
        if not chunk:
            raise EOFError("unexpected end of data while reading integer")
        byte = chunk[0]
        n |= (byte & 127) << shift
        if not byte & 128:
            return n
        shift += 7