"""Bit sequences and MSB-first bit packing.

Bit order is most-significant-bit first everywhere: the first bit of a code is
the highest bit of the first byte it lands in.
"""

from __future__ import annotations

from dataclasses import dataclass

from cshannon.errors import DecodeError, FormatError


@dataclass(frozen=True, slots=True, order=True)
class Bits:
    """Immutable bit sequence: `length` bits, MSB-first, held in `value`."""

    value: int
    length: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError("negative bit length")
        if self.value < 0 or self.value >> self.length:
            raise ValueError(f"value {self.value} does not fit in {self.length} bits")

    @classmethod
    def from_str(cls, s: str) -> "Bits":
        if s and set(s) - {"0", "1"}:
            raise ValueError(f"not a bit string: {s!r}")
        return cls(int(s, 2) if s else 0, len(s))

    def __str__(self) -> str:
        return format(self.value, f"0{self.length}b") if self.length else ""

    def __len__(self) -> int:
        return self.length

    def bit(self, i: int) -> int:
        if not 0 <= i < self.length:
            raise IndexError(i)
        return (self.value >> (self.length - 1 - i)) & 1

    def append(self, bit: int) -> "Bits":
        return Bits((self.value << 1) | (bit & 1), self.length + 1)

    def is_prefix_of(self, other: "Bits") -> bool:
        if self.length > other.length:
            return False
        return (other.value >> (other.length - self.length)) == self.value

    def to_bytes(self) -> bytes:
        """Pack into ceil(length/8) bytes, unused trailing bits zero."""
        nbytes = (self.length + 7) // 8
        pad = nbytes * 8 - self.length
        return (self.value << pad).to_bytes(nbytes, "big")

    @classmethod
    def from_bytes(cls, data: bytes, length: int) -> "Bits":
        """Inverse of to_bytes(). Non-zero unused trailing bits are a FormatError."""
        nbytes = (length + 7) // 8
        if len(data) != nbytes:
            raise FormatError(f"expected {nbytes} bytes for {length} bits, got {len(data)}")
        pad = nbytes * 8 - length
        raw = int.from_bytes(data, "big")
        if raw & ((1 << pad) - 1):
            raise FormatError("non-zero trailing bits in code")
        return cls(raw >> pad, length)


class BitWriter:
    """Appends bit sequences into a growing byte buffer."""

    def __init__(self) -> None:
        self._buf = bytearray()
        self._acc = 0
        self._nacc = 0  # pending bits in _acc, always < 8 between writes
        self._finalized = False

    @property
    def bit_count(self) -> int:
        return len(self._buf) * 8 + self._nacc

    def write(self, bits: Bits) -> None:
        if self._finalized:
            raise ValueError("BitWriter already finalized")
        self._acc = (self._acc << bits.length) | bits.value
        self._nacc += bits.length
        while self._nacc >= 8:
            self._nacc -= 8
            self._buf.append((self._acc >> self._nacc) & 0xFF)
        self._acc &= (1 << self._nacc) - 1

    def finalize(self) -> tuple[bytes, int]:
        """Zero-pad the last byte. Returns (payload, pad_bits)."""
        if self._finalized:
            raise ValueError("BitWriter already finalized")
        self._finalized = True
        pad_bits = 0
        if self._nacc:
            pad_bits = 8 - self._nacc
            self._buf.append((self._acc << pad_bits) & 0xFF)
            self._acc = 0
            self._nacc = 0
        return bytes(self._buf), pad_bits


class BitReader:
    """Reads bits from a byte buffer whose last `pad_bits` bits are padding."""

    def __init__(self, data: bytes, pad_bits: int) -> None:
        if not 0 <= pad_bits <= 7:
            raise FormatError(f"pad bit count out of range: {pad_bits}")
        if pad_bits and not data:
            raise FormatError("pad bits declared for an empty payload")
        self._data = bytes(data)
        self._pad = pad_bits
        self._total = len(self._data) * 8 - pad_bits
        self._pos = 0

    @property
    def total(self) -> int:
        return self._total

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return self._total - self._pos

    def read_bit(self) -> int:
        if self._pos >= self._total:
            raise DecodeError("read past end of payload")
        byte = self._data[self._pos >> 3]
        bit = (byte >> (7 - (self._pos & 7))) & 1
        self._pos += 1
        return bit

    def read(self, n: int) -> Bits:
        if n < 0:
            raise ValueError("negative read")
        if n > self.remaining:
            raise DecodeError(f"need {n} bits, only {self.remaining} left")
        value = 0
        for _ in range(n):
            value = (value << 1) | self.read_bit()
        return Bits(value, n)

    def padding(self) -> Bits:
        """The pad bits after the declared payload (should be all zero)."""
        if not self._pad:
            return Bits(0, 0)
        return Bits(self._data[-1] & ((1 << self._pad) - 1), self._pad)
