"""Encoding selection: a closed set of builders behind one signature.

    build(FrequencyModel) -> CodeTable
"""

from __future__ import annotations

from collections.abc import Callable

from cshannon.core.code_table import CodeTable
from cshannon.core.fano import build_fano
from cshannon.core.huffman import build_huffman
from cshannon.core.model import FrequencyModel
from cshannon.core.shannon import build_shannon
from cshannon.errors import ConfigError

Builder = Callable[[FrequencyModel], CodeTable]

ENCODINGS: dict[str, Builder] = {
    "shannon": build_shannon,
    "fano": build_fano,
    "huffman": build_huffman,
}

ENCODING_NAMES: tuple[str, ...] = tuple(ENCODINGS)


def normalize_encoding(name: str) -> str:
    key = str(name).strip().lower()
    if key not in ENCODINGS:
        raise ConfigError(
            f"unknown encoding {name!r} (expected one of: {', '.join(ENCODING_NAMES)})"
        )
    return key


def build_code_table(model: FrequencyModel, encoding: str) -> CodeTable:
    return ENCODINGS[normalize_encoding(encoding)](model)
