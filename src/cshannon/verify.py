"""Verification helpers.

Policy: light by default (container header, vocabulary, codebook), --full
also decodes the payload and maps the symbols back through the tokenizer.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cshannon.core.bits import BitReader
from cshannon.core.coder import decode_payload, read_header
from cshannon.engine.container import read_container_header
from cshannon.layers.registry import get_layer


@dataclass(frozen=True)
class VerifyReport:
    tokenizer: str
    encoding: str
    alphabet_size: int
    max_code_length: int
    payload_bits: int
    symbols: int | None  # None unless full
    output_bytes: int | None  # None unless full


def verify_container_bytes(blob: bytes, *, full: bool = False) -> VerifyReport:
    blob = bytes(blob)
    hdr = read_container_header(blob)
    layer = get_layer(hdr.tokenizer)
    layer_meta = layer.unpack_meta(hdr.meta)

    stream = blob[hdr.stream_offset :]
    sh = read_header(stream)
    reader = BitReader(stream[sh.payload_offset :], sh.pad_bits)

    n_symbols = None
    n_out = None
    if full:
        symbols = decode_payload(reader, sh.table.trie())
        n_symbols = len(symbols)
        n_out = len(layer.decode(symbols, layer_meta))

    return VerifyReport(
        tokenizer=hdr.tokenizer,
        encoding=hdr.encoding,
        alphabet_size=len(sh.table),
        max_code_length=sh.table.max_length,
        payload_bits=reader.total,
        symbols=n_symbols,
        output_bytes=n_out,
    )


def verify_container_file(path: str | Path, *, full: bool = False) -> VerifyReport:
    return verify_container_bytes(Path(path).read_bytes(), full=full)
