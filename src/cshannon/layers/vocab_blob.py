from __future__ import annotations

from typing import List

from cshannon.core.varint import dec_varint, enc_varint
from cshannon.errors import FormatError

# ------------------------------------------------------------
# Vocab blob encoding
#
#   b"VB2\0" + varint(count) + repeat(varint(len) + bytes)
#
# Token i of the vocabulary is the token with id i.
# ------------------------------------------------------------

MAGIC_VB2 = b"VB2\0"


def pack_vocab_list(vocab_list: List[bytes]) -> bytes:
    out = bytearray()
    out += MAGIC_VB2
    out += enc_varint(len(vocab_list))
    for tok in vocab_list:
        if not isinstance(tok, (bytes, bytearray)):
            raise TypeError("vocab_list must contain bytes")
        tok_b = bytes(tok)
        out += enc_varint(len(tok_b))
        out += tok_b
    return bytes(out)


def unpack_vocab_list(blob: bytes) -> List[bytes]:
    buf = bytes(blob)
    if buf[:4] != MAGIC_VB2:
        raise FormatError("vocab: bad magic")

    idx = 4
    n, idx = dec_varint(buf, idx, what="vocab count")
    if n > len(buf) - idx:
        raise FormatError(f"vocab: implausible token count {n}")
    vocab: List[bytes] = []
    for _ in range(n):
        L, idx = dec_varint(buf, idx, what="vocab token length")
        if idx + L > len(buf):
            raise FormatError("vocab truncated (data)")
        vocab.append(buf[idx : idx + L])
        idx += L
    if idx != len(buf):
        raise FormatError("vocab with trailing garbage")
    return vocab
