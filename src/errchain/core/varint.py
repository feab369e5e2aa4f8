"""
Base-128 variable-length integers.

Unsigned values are written 7 bits per byte, least significant group first,
with the high bit set on every byte except the last.  Signed values are
zig-zag mapped first so small magnitudes of either sign stay short.
"""

from typing import Tuple

from errchain.core.config import MAX_VARINT_BYTES
from errchain.exceptions import VarintError


def zigzag(value: int) -> int:
    """Map a signed int onto the unsigned alphabet: 0, -1, 1, -2 -> 0, 1, 2, 3."""
    return value << 1 if value >= 0 else ((-value) << 1) - 1


def unzigzag(value: int) -> int:
    return value >> 1 if not value & 1 else -((value + 1) >> 1)


def encode_uvarint(value: int) -> bytes:
    if value < 0:
        raise ValueError(f"uvarint cannot encode negative value {value}")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_varint(value: int) -> bytes:
    return encode_uvarint(zigzag(value))


def decode_uvarint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Read one unsigned varint from *data* starting at *offset*.

    Returns ``(value, new_offset)``.  Raises :class:`VarintError` when the
    buffer ends mid-value or the value runs past :data:`MAX_VARINT_BYTES`.
    """
    result = 0
    shift = 0
    for i in range(MAX_VARINT_BYTES):
        pos = offset + i
        if pos >= len(data):
            raise VarintError(f"truncated varint at offset {offset}")
        byte = data[pos]
        if i == MAX_VARINT_BYTES - 1 and byte > 1:
            raise VarintError(f"varint overflows 64 bits at offset {offset}")
        result |= (byte & 0x7F) << shift
        if byte < 0x80:
            return result, pos + 1
        shift += 7
    raise VarintError(f"varint overflows 64 bits at offset {offset}")


def decode_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    value, offset = decode_uvarint(data, offset)
    return unzigzag(value), offset
