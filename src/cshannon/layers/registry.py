from __future__ import annotations

from typing import Union

from cshannon.errors import ConfigError
from cshannon.layers.bytes import LayerBytes
from cshannon.layers.graphemes import LayerGraphemes
from cshannon.layers.words import LayerWords

Layer = Union[LayerBytes, LayerWords, LayerGraphemes]

TOKENIZERS: dict[str, Layer] = {
    "byte": LayerBytes(),
    "word": LayerWords(),
    "unicode": LayerGraphemes(),
}

TOKENIZER_NAMES: tuple[str, ...] = tuple(TOKENIZERS)


def normalize_tokenizer(name: str) -> str:
    key = str(name).strip().lower()
    if key not in TOKENIZERS:
        raise ConfigError(
            f"unknown tokenizer {name!r} (expected one of: {', '.join(TOKENIZER_NAMES)})"
        )
    return key


def get_layer(name: str) -> Layer:
    return TOKENIZERS[normalize_tokenizer(name)]
