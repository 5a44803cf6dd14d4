"""Alphabet and frequency model.

Symbols are non-negative integers (token ids). The Alphabet orders them by
ascending id; that index order is the tie-break used by every code builder.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from cshannon.errors import ModelError

# Symbol ids travel as unsigned varints (see core.varint).
MAX_SYMBOL = (1 << 64) - 1


def _check_symbol(s: object) -> int:
    if isinstance(s, bool) or not isinstance(s, int):
        raise ModelError(f"symbol must be an int, got {type(s).__name__}")
    if s < 0 or s > MAX_SYMBOL:
        raise ModelError(f"symbol out of range: {s}")
    return s


@dataclass(frozen=True, slots=True)
class Alphabet:
    """Ordered set of distinct symbols with a stable index 0..n-1."""

    symbols: tuple[int, ...]
    _index: Mapping[int, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        syms = tuple(sorted(set(self.symbols)))
        object.__setattr__(self, "symbols", syms)
        object.__setattr__(
            self, "_index", MappingProxyType({s: i for i, s in enumerate(syms)})
        )

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self) -> Iterator[int]:
        return iter(self.symbols)

    def __contains__(self, s: object) -> bool:
        return s in self._index

    def index(self, s: int) -> int:
        try:
            return self._index[s]
        except KeyError:
            raise ModelError(f"symbol not in alphabet: {s}") from None


@dataclass(frozen=True, slots=True)
class FrequencyModel:
    """Occurrence counts over an Alphabet. Immutable once built."""

    alphabet: Alphabet
    counts: tuple[int, ...]  # parallel to alphabet.symbols
    total: int

    @classmethod
    def from_counts(cls, counts: Mapping[int, int]) -> "FrequencyModel":
        for s, c in counts.items():
            _check_symbol(s)
            if isinstance(c, bool) or not isinstance(c, int) or c <= 0:
                raise ModelError(f"count for symbol {s} must be a positive int, got {c!r}")
        alphabet = Alphabet(tuple(counts))
        cs = tuple(counts[s] for s in alphabet.symbols)
        return cls(alphabet=alphabet, counts=cs, total=sum(cs))

    def __len__(self) -> int:
        return len(self.counts)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        """(symbol, count) pairs in Alphabet index order."""
        return zip(self.alphabet.symbols, self.counts)

    def is_empty(self) -> bool:
        return self.total == 0

    def count(self, s: int) -> int:
        if s not in self.alphabet:
            return 0
        return self.counts[self.alphabet.index(s)]

    def probability(self, s: int) -> float:
        if self.total == 0:
            raise ModelError("probability undefined for an empty model")
        return self.count(s) / self.total

    def sorted_by_probability(self) -> list[tuple[int, int]]:
        """(symbol, count) by count descending, ties by ascending Alphabet index."""
        order = sorted(range(len(self.counts)), key=lambda i: (-self.counts[i], i))
        return [(self.alphabet.symbols[i], self.counts[i]) for i in order]

    def entropy(self) -> float:
        """Shannon entropy in bits per symbol."""
        if self.total == 0:
            return 0.0
        h = 0.0
        for c in self.counts:
            p = c / self.total
            h -= p * math.log2(p)
        return h


def build_model(symbols: Iterable[int]) -> FrequencyModel:
    """Count occurrences of each symbol. Empty input is valid (total == 0)."""
    counter: Counter[int] = Counter()
    for s in symbols:
        counter[_check_symbol(s)] += 1
    if not counter:
        return FrequencyModel(alphabet=Alphabet(()), counts=(), total=0)
    return FrequencyModel.from_counts(counter)
