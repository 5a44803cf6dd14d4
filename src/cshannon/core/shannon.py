"""Shannon coding.

Let the symbols sorted by decreasing probability be t1, t2, t3 ... with
probabilities p1, p2, p3 ... For each tk:

    lk = max(1, ceil(-log2(pk)))
    ck = p1 + ... + p(k-1)          (cumulative, strictly before tk)
    ek = first lk bits of the binary expansion of ck

Everything is computed on integer counts, so no float rounding can break the
prefix property.
"""

from __future__ import annotations

from cshannon.core.bits import Bits
from cshannon.core.code_table import CodeTable, log_code_table
from cshannon.core.model import FrequencyModel


def code_length(count: int, total: int) -> int:
    """Smallest L >= 1 with count * 2**L >= total, i.e. max(1, ceil(log2(total/count)))."""
    length = 1
    while (count << length) < total:
        length += 1
    return length


def truncated_fraction(num: int, den: int, length: int) -> Bits:
    """First `length` bits of the binary expansion of num/den (0 <= num < den)."""
    return Bits((num << length) // den, length)


def build_shannon(model: FrequencyModel) -> CodeTable:
    codes: list[tuple[int, Bits]] = []
    cum = 0
    for sym, cnt in model.sorted_by_probability():
        length = code_length(cnt, model.total)
        codes.append((sym, truncated_fraction(cum, model.total, length)))
        cum += cnt
    table = CodeTable(tuple(codes))
    log_code_table(table, "shannon")
    return table
