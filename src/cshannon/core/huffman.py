from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import List, Optional

from cshannon.core.bits import Bits
from cshannon.core.code_table import CodeTable, log_code_table
from cshannon.core.model import FrequencyModel

# -------------------
# Huffman tree (arena)
# -------------------
_NONE = -1


@dataclass
class HuffmanTree:
    """
    Nodes are indices into parallel lists. Leaves come first, in Alphabet
    index order; internal nodes are appended as they are merged.
    """

    weight: List[int] = field(default_factory=list)
    symbol: List[int] = field(default_factory=list)  # _NONE for internal nodes
    zero: List[int] = field(default_factory=list)
    one: List[int] = field(default_factory=list)
    root: int = _NONE

    def add(self, weight: int, symbol: int = _NONE, zero: int = _NONE, one: int = _NONE) -> int:
        self.weight.append(weight)
        self.symbol.append(symbol)
        self.zero.append(zero)
        self.one.append(one)
        return len(self.weight) - 1

    def is_leaf(self, node: int) -> bool:
        return self.symbol[node] != _NONE


def build_huffman_tree(model: FrequencyModel) -> Optional[HuffmanTree]:
    """
    Greedy bottom-up merge. The heap orders by (weight, insertion order):
    leaves are pushed in Alphabet index order before any internal node, and
    the first node popped becomes the 0 child.
    """
    if model.is_empty():
        return None

    tree = HuffmanTree()
    heap: List[tuple[int, int, int]] = []
    counter = itertools.count()

    for sym, f in model:
        node = tree.add(f, symbol=sym)
        heapq.heappush(heap, (f, next(counter), node))

    while len(heap) > 1:
        f0, _, n0 = heapq.heappop(heap)
        f1, _, n1 = heapq.heappop(heap)
        parent = tree.add(f0 + f1, zero=n0, one=n1)
        heapq.heappush(heap, (f0 + f1, next(counter), parent))

    tree.root = heap[0][2]
    return tree


def build_code_table(tree: HuffmanTree) -> dict[int, Bits]:
    codes: dict[int, Bits] = {}
    # single symbol: fixed 1-bit code, same as the other builders
    if tree.is_leaf(tree.root):
        codes[tree.symbol[tree.root]] = Bits(0, 1)
        return codes

    stack = [(tree.root, Bits(0, 0))]
    while stack:
        node, path = stack.pop()
        if tree.is_leaf(node):
            codes[tree.symbol[node]] = path
            continue
        stack.append((tree.one[node], path.append(1)))
        stack.append((tree.zero[node], path.append(0)))
    return codes


def build_huffman(model: FrequencyModel) -> CodeTable:
    tree = build_huffman_tree(model)
    if tree is None:
        table = CodeTable(())
    else:
        table = CodeTable.from_mapping(build_code_table(tree))
    log_code_table(table, "huffman")
    return table
