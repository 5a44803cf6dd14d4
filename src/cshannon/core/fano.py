from __future__ import annotations

import bisect

from cshannon.core.bits import Bits
from cshannon.core.code_table import CodeTable, log_code_table
from cshannon.core.model import FrequencyModel


def find_split(prefix: list[int], lo: int, hi: int) -> int:
    """
    Split point k (lo < k < hi) for the window [lo, hi) of a probability-sorted
    list, given prefix sums `prefix` (prefix[i] = weight of the first i items).

    Minimises |left - right|; on a tie the split closest to the front wins.
    """
    base = prefix[lo]
    total = prefix[hi] - base
    # first k whose left weight reaches half of the window
    k = bisect.bisect_left(prefix, base + (total + 1) // 2, lo + 1, hi)
    k = min(max(k, lo + 1), hi - 1)

    best = k
    best_diff = abs(2 * (prefix[k] - base) - total)
    if k - 1 > lo:
        diff = abs(2 * (prefix[k - 1] - base) - total)
        if diff <= best_diff:
            best = k - 1
    return best


def build_fano(model: FrequencyModel) -> CodeTable:
    """
    Shannon-Fano coding: recursively split the probability-sorted list in two
    contiguous groups of (nearly) equal weight; left gets 0, right gets 1.
    """
    ranked = model.sorted_by_probability()
    if len(ranked) == 1:
        table = CodeTable(((ranked[0][0], Bits(0, 1)),))
        log_code_table(table, "fano")
        return table

    prefix = [0]
    for _, cnt in ranked:
        prefix.append(prefix[-1] + cnt)

    codes: list[tuple[int, Bits]] = []
    # explicit stack of (lo, hi, code prefix so far)
    stack: list[tuple[int, int, Bits]] = [(0, len(ranked), Bits(0, 0))] if ranked else []
    while stack:
        lo, hi, path = stack.pop()
        if hi - lo == 1:
            codes.append((ranked[lo][0], path))
            continue
        k = find_split(prefix, lo, hi)
        stack.append((k, hi, path.append(1)))
        stack.append((lo, k, path.append(0)))

    table = CodeTable(tuple(codes))
    log_code_table(table, "fano")
    return table
