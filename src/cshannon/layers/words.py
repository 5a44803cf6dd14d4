from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import regex

from cshannon.layers.text_vocab import (
    decode_utf8,
    ids_to_bytes,
    pack_vocab_meta,
    tokens_to_ids,
    unpack_vocab_meta,
)

# maximal runs of word characters, maximal runs of everything else
_WORD_RE = regex.compile(r"\w+|\W+", regex.UNICODE)


def tokenize_words(text: str) -> list[str]:
    """Lossless: "".join(tokenize_words(s)) == s."""
    return _WORD_RE.findall(text)


@dataclass(frozen=True)
class LayerWords:
    """
    Word tokenizer (Unicode-aware):
    encode: bytes -> (id_stream, meta{vocab_list})
    decode: id_stream + vocab_list -> bytes
    """

    id: str = "word"

    def encode(self, data: bytes) -> tuple[list[int], dict[str, Any]]:
        return tokens_to_ids(tokenize_words(decode_utf8(data, self.id)))

    def decode(self, id_stream: Sequence[int], layer_meta: dict[str, Any]) -> bytes:
        return ids_to_bytes(id_stream, layer_meta, self.id)

    def pack_meta(self, meta: dict[str, Any]) -> bytes:
        return pack_vocab_meta(meta)

    def unpack_meta(self, meta_bytes: bytes) -> dict[str, Any]:
        return unpack_vocab_meta(meta_bytes)
