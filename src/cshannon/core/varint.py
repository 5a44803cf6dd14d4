from __future__ import annotations

from typing import Tuple

from cshannon.errors import FormatError

# Widest value on the wire (symbol ids, lengths).
MAX_VARINT = (1 << 64) - 1


def enc_varint(x: int) -> bytes:
    """Unsigned LEB128."""
    if x < 0:
        raise ValueError("negative varint not supported")
    out = bytearray()
    while True:
        b = x & 0x7F
        x >>= 7
        if x:
            out.append(0x80 | b)
        else:
            out.append(b)
            break
    return bytes(out)


def dec_varint(buf: bytes, idx: int, *, what: str = "varint") -> Tuple[int, int]:
    """Unsigned LEB128 decode. Returns (value, next_idx).

    Only the shortest encoding of a value up to MAX_VARINT is accepted, so
    enc_varint(dec_varint(b)) always gives back the same bytes.
    """
    shift = 0
    x = 0
    while True:
        if idx >= len(buf):
            raise FormatError(f"{what}: truncated varint")
        b = buf[idx]
        idx += 1
        x |= (b & 0x7F) << shift
        if (b & 0x80) == 0:
            if b == 0 and shift:
                raise FormatError(f"{what}: overlong varint")
            break
        shift += 7
        if shift > 63:
            raise FormatError(f"{what}: varint too large")
    if x > MAX_VARINT:
        raise FormatError(f"{what}: varint too large")
    return x, idx
