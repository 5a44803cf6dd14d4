"""Code table (symbol <-> bit sequence) and its self-describing header.

Header layout (entries in ascending symbol order):

    varint(count)
    repeat count:
        varint(symbol) + u8(bit_length) + ceil(bit_length / 8) bytes of code bits

Code bits are MSB-first, unused trailing bits of the last byte are zero.
Deserialization re-validates everything, prefix-freeness included: the
decoder must never trust a header.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from fractions import Fraction
from types import MappingProxyType

from cshannon.core.bits import Bits
from cshannon.core.model import FrequencyModel
from cshannon.core.varint import dec_varint, enc_varint
from cshannon.errors import CodecError, FormatError

log = logging.getLogger(__name__)

MAX_CODE_BITS = 0xFF  # bit length is a u8 on the wire

# Trie node with no child on that branch / internal node with no symbol.
_NONE = -1


class DecodeTrie:
    """Binary trie over code words, stored as an arena of indexed nodes.

    Node 0 is the root. `zero[i]` / `one[i]` are child indices (or -1),
    `symbol[i]` is the symbol of a leaf (or -1 for internal nodes).
    Building the trie is the prefix-free check.
    """

    __slots__ = ("zero", "one", "symbol", "max_length")

    def __init__(self, codes: Iterable[tuple[int, Bits]]) -> None:
        self.zero: list[int] = [_NONE]
        self.one: list[int] = [_NONE]
        self.symbol: list[int] = [_NONE]
        self.max_length = 0

        for sym, code in codes:
            if code.length == 0:
                raise FormatError(f"symbol {sym}: zero-length code")
            node = 0
            for i in range(code.length):
                if self.symbol[node] != _NONE:
                    raise FormatError(
                        f"not prefix-free: code of symbol {self.symbol[node]} "
                        f"is a prefix of {code} (symbol {sym})"
                    )
                branch = self.one if code.bit(i) else self.zero
                nxt = branch[node]
                if nxt == _NONE:
                    nxt = len(self.symbol)
                    self.zero.append(_NONE)
                    self.one.append(_NONE)
                    self.symbol.append(_NONE)
                    branch[node] = nxt
                node = nxt
            if self.symbol[node] != _NONE or self.zero[node] != _NONE or self.one[node] != _NONE:
                raise FormatError(f"not prefix-free: code {code} (symbol {sym}) collides")
            self.symbol[node] = sym
            self.max_length = max(self.max_length, code.length)

    def __len__(self) -> int:
        return len(self.symbol)

    def step(self, node: int, bit: int) -> int:
        """Child of `node` along `bit`, or -1 when no code continues that way."""
        return self.one[node] if bit else self.zero[node]

    def leaf_symbol(self, node: int) -> int | None:
        s = self.symbol[node]
        return None if s == _NONE else s


@dataclass(frozen=True, slots=True)
class CodeTable:
    """Immutable symbol -> Bits mapping, entries kept in ascending symbol order."""

    entries: tuple[tuple[int, Bits], ...]
    _by_symbol: Mapping[int, Bits] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        entries = tuple(sorted(self.entries, key=lambda e: e[0]))
        by_symbol: dict[int, Bits] = {}
        for sym, code in entries:
            if sym in by_symbol:
                raise FormatError(f"duplicate symbol in code table: {sym}")
            by_symbol[sym] = code
        object.__setattr__(self, "entries", entries)
        object.__setattr__(self, "_by_symbol", MappingProxyType(by_symbol))

    @classmethod
    def from_mapping(cls, codes: Mapping[int, Bits]) -> "CodeTable":
        return cls(tuple(codes.items()))

    @classmethod
    def from_strings(cls, codes: Mapping[int, str]) -> "CodeTable":
        return cls(tuple((s, Bits.from_str(c)) for s, c in codes.items()))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[int, Bits]]:
        return iter(self.entries)

    def __contains__(self, sym: object) -> bool:
        return sym in self._by_symbol

    def get(self, sym: int) -> Bits | None:
        return self._by_symbol.get(sym)

    @property
    def symbols(self) -> tuple[int, ...]:
        return tuple(s for s, _ in self.entries)

    @property
    def max_length(self) -> int:
        return max((c.length for _, c in self.entries), default=0)

    def as_strings(self) -> dict[int, str]:
        return {s: str(c) for s, c in self.entries}

    def trie(self) -> DecodeTrie:
        return DecodeTrie(self.entries)

    def is_prefix_free(self) -> bool:
        try:
            self.trie()
        except FormatError:
            return False
        return True

    def kraft_sum(self) -> Fraction:
        """Exact sum of 2**-length over all entries."""
        return sum((Fraction(1, 1 << c.length) for _, c in self.entries), Fraction(0))

    def encoded_bit_length(self, model: FrequencyModel) -> int:
        """Payload bits needed to encode the sequence `model` was built from."""
        total = 0
        for sym, cnt in model:
            code = self._by_symbol.get(sym)
            if code is None:
                raise CodecError(f"symbol {sym} missing from code table")
            total += cnt * code.length
        return total

    def expected_length(self, model: FrequencyModel) -> float:
        """Expected code length in bits per symbol under `model`."""
        if model.total == 0:
            return 0.0
        return self.encoded_bit_length(model) / model.total


def serialize_code_table(table: CodeTable) -> bytes:
    out = bytearray()
    out += enc_varint(len(table))
    for sym, code in table.entries:
        if code.length > MAX_CODE_BITS:
            raise FormatError(f"code for symbol {sym} too long: {code.length} bits")
        out += enc_varint(sym)
        out.append(code.length)
        out += code.to_bytes()
    return bytes(out)


def deserialize_code_table(buf: bytes) -> CodeTable:
    """Parse a header produced by serialize_code_table() and validate it."""
    buf = bytes(buf)
    count, idx = dec_varint(buf, 0, what="codebook count")
    # every entry takes at least 3 bytes (symbol, length, 1 code byte)
    if count * 3 > len(buf) - idx:
        raise FormatError(f"codebook: implausible entry count {count}")

    entries: list[tuple[int, Bits]] = []
    seen: set[int] = set()
    for n in range(count):
        sym, idx = dec_varint(buf, idx, what=f"codebook entry {n} symbol")
        if idx >= len(buf):
            raise FormatError(f"codebook entry {n}: truncated (bit length)")
        length = buf[idx]
        idx += 1
        if length == 0:
            raise FormatError(f"codebook entry {n}: zero-length code")
        nbytes = (length + 7) // 8
        if idx + nbytes > len(buf):
            raise FormatError(f"codebook entry {n}: truncated (code bits)")
        code = Bits.from_bytes(buf[idx : idx + nbytes], length)
        idx += nbytes
        if sym in seen:
            raise FormatError(f"codebook: duplicate symbol {sym}")
        seen.add(sym)
        entries.append((sym, code))

    if idx != len(buf):
        raise FormatError(f"codebook: {len(buf) - idx} trailing bytes")

    table = CodeTable(tuple(entries))
    table.trie()
    log.debug("codebook: %d entries, max length %d", len(table), table.max_length)
    return table


def log_code_table(table: CodeTable, algorithm: str) -> None:
    log.debug(
        "%s code table: %d symbols, max length %d bits",
        algorithm,
        len(table),
        table.max_length,
    )
    if not log.isEnabledFor(logging.DEBUG):
        return
    for sym, code in table.entries:
        log.debug("  |%d|: |%s|", sym, code)
