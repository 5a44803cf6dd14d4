"""Packed stream encode/decode.

Wire format:

    [ varint(codebook_len) | codebook (see code_table) | pad_bits(u8) | payload ]

payload holds the concatenated code words MSB-first; the last `pad_bits` bits
of the last byte are zero padding.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from cshannon.core.bits import BitReader, BitWriter
from cshannon.core.code_table import (
    CodeTable,
    DecodeTrie,
    deserialize_code_table,
    serialize_code_table,
)
from cshannon.core.varint import dec_varint, enc_varint
from cshannon.errors import CodecError, DecodeError, FormatError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackedStreamHeader:
    table: CodeTable
    pad_bits: int
    payload_offset: int


@dataclass(frozen=True)
class DecodedStream:
    table: CodeTable
    symbols: list[int]


def encode(symbols: Iterable[int], table: CodeTable) -> bytes:
    """Pack `symbols` with `table`; the table travels in the header."""
    codebook = serialize_code_table(table)

    w = BitWriter()
    n = 0
    for sym in symbols:
        code = table.get(sym)
        if code is None:
            raise CodecError(f"symbol {sym!r} not in code table")
        w.write(code)
        n += 1
    payload, pad_bits = w.finalize()

    out = bytearray()
    out += enc_varint(len(codebook))
    out += codebook
    out.append(pad_bits)
    out += payload
    log.debug(
        "encode: %d symbols, codebook %d bytes, payload %d bytes (%d pad bits)",
        n,
        len(codebook),
        len(payload),
        pad_bits,
    )
    return bytes(out)


def read_header(data: bytes) -> PackedStreamHeader:
    """Parse and validate everything before the payload."""
    cb_len, idx = dec_varint(data, 0, what="codebook length")
    if idx + cb_len > len(data):
        raise FormatError(f"codebook truncated: need {cb_len} bytes, have {len(data) - idx}")
    table = deserialize_code_table(data[idx : idx + cb_len])
    idx += cb_len
    if idx >= len(data):
        raise FormatError("missing pad bit count")
    pad_bits = data[idx]
    idx += 1
    if pad_bits > 7:
        raise FormatError(f"pad bit count out of range: {pad_bits}")
    return PackedStreamHeader(table=table, pad_bits=pad_bits, payload_offset=idx)


def decode_payload(reader: BitReader, trie: DecodeTrie) -> list[int]:
    """Walk the trie bit by bit until exactly the declared payload is consumed."""
    out: list[int] = []
    node = 0
    depth = 0
    while reader.remaining:
        node = trie.step(node, reader.read_bit())
        depth += 1
        if node < 0 or depth > trie.max_length:
            raise DecodeError(f"no code matches at bit {reader.position - depth}")
        sym = trie.leaf_symbol(node)
        if sym is not None:
            out.append(sym)
            node = 0
            depth = 0
    if depth:
        raise DecodeError(f"payload ends inside a code word ({depth} bits pending)")
    if reader.padding().value:
        raise DecodeError("non-zero padding bits")
    return out


def decode_stream(data: bytes) -> DecodedStream:
    data = bytes(data)
    hdr = read_header(data)
    reader = BitReader(data[hdr.payload_offset :], hdr.pad_bits)
    symbols = decode_payload(reader, hdr.table.trie())
    log.debug("decode: %d symbols from %d payload bits", len(symbols), reader.total)
    return DecodedStream(table=hdr.table, symbols=symbols)


def decode(data: bytes) -> list[int]:
    return decode_stream(data).symbols
