from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from cshannon.errors import CodecError, DecodeError
from cshannon.layers.vocab_blob import pack_vocab_list, unpack_vocab_list


def decode_utf8(data: bytes, layer_id: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CodecError(f"{layer_id} tokenizer: input is not valid UTF-8 ({e})") from e


def tokens_to_ids(tokens: Sequence[str]) -> tuple[list[int], dict[str, Any]]:
    """Assign ids in first-seen order; meta carries the vocabulary."""
    vocab: dict[str, int] = {}
    vocab_list: list[bytes] = []
    id_stream: list[int] = []
    for tok in tokens:
        sid = vocab.get(tok)
        if sid is None:
            sid = vocab[tok] = len(vocab_list)
            vocab_list.append(tok.encode("utf-8"))
        id_stream.append(sid)
    return id_stream, {"vocab_list": vocab_list}


def ids_to_bytes(id_stream: Sequence[int], layer_meta: dict[str, Any], layer_id: str) -> bytes:
    vocab_list = layer_meta.get("vocab_list")
    if vocab_list is None:
        raise DecodeError(f"{layer_id}.decode: vocab_list missing from layer_meta")
    out = bytearray()
    for sid in id_stream:
        if sid < 0 or sid >= len(vocab_list):
            raise DecodeError(f"{layer_id}.decode: token id out of range: {sid}")
        out += vocab_list[sid]
    return bytes(out)


def pack_vocab_meta(meta: dict[str, Any]) -> bytes:
    return pack_vocab_list(meta.get("vocab_list") or [])


def unpack_vocab_meta(meta_bytes: bytes) -> dict[str, Any]:
    if not meta_bytes:
        return {"vocab_list": []}
    return {"vocab_list": unpack_vocab_list(meta_bytes)}
