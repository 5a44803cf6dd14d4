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

_GRAPHEME_RE = regex.compile(r"\X")


def tokenize_graphemes(text: str) -> list[str]:
    """Extended grapheme clusters, e.g. "é" stays one token."""
    return _GRAPHEME_RE.findall(text)


@dataclass(frozen=True)
class LayerGraphemes:
    """
    Unicode tokenizer: one token per extended grapheme cluster.
    Same vocabulary meta as the word tokenizer.
    """

    id: str = "unicode"

    def encode(self, data: bytes) -> tuple[list[int], dict[str, Any]]:
        return tokens_to_ids(tokenize_graphemes(decode_utf8(data, self.id)))

    def decode(self, id_stream: Sequence[int], layer_meta: dict[str, Any]) -> bytes:
        return ids_to_bytes(id_stream, layer_meta, self.id)

    def pack_meta(self, meta: dict[str, Any]) -> bytes:
        return pack_vocab_meta(meta)

    def unpack_meta(self, meta_bytes: bytes) -> dict[str, Any]:
        return unpack_vocab_meta(meta_bytes)
