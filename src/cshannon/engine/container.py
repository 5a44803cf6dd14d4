"""File container: tokenizer + encoding choice, token vocabulary, packed stream.

Layout (v1):

    MAGIC "CSH" | version(u8) | tokenizer(u8) | encoding(u8)
    | varint(meta_len) | meta | packed stream (core.coder)

The packed stream is fully self-describing; the encoding byte is informational
(verify/analyze) and is never needed to decode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from cshannon.core.coder import decode_stream, encode
from cshannon.core.encodings import build_code_table, normalize_encoding
from cshannon.core.model import build_model
from cshannon.core.varint import dec_varint, enc_varint
from cshannon.errors import BadMagic, FormatError, UnsupportedVersion
from cshannon.layers.registry import get_layer, normalize_tokenizer

log = logging.getLogger(__name__)

MAGIC = b"CSH"
VERSION_V1 = 1

# IMPORTANT: keep these mappings stable forever once files are written.
TOKENIZER_TO_CODE: dict[str, int] = {
    "byte": 1,
    "unicode": 2,
    "word": 3,
}
CODE_TO_TOKENIZER: dict[int, str] = {v: k for k, v in TOKENIZER_TO_CODE.items()}

ENCODING_TO_CODE: dict[str, int] = {
    "shannon": 1,
    "fano": 2,
    "huffman": 3,
}
CODE_TO_ENCODING: dict[int, str] = {v: k for k, v in ENCODING_TO_CODE.items()}


@dataclass(frozen=True)
class ContainerHeader:
    version: int
    tokenizer: str
    encoding: str
    meta: bytes
    stream_offset: int


def pack_container(tokenizer: str, encoding: str, meta: bytes, stream: bytes) -> bytes:
    out = bytearray()
    out += MAGIC
    out.append(VERSION_V1)
    out.append(TOKENIZER_TO_CODE[tokenizer])
    out.append(ENCODING_TO_CODE[encoding])
    out += enc_varint(len(meta))
    out += meta
    out += stream
    return bytes(out)


def read_container_header(blob: bytes) -> ContainerHeader:
    if len(blob) < len(MAGIC) or blob[: len(MAGIC)] != MAGIC:
        raise BadMagic("not a cshannon container (bad magic)")
    idx = len(MAGIC)
    if idx + 3 > len(blob):
        raise FormatError("container header truncated")
    version = blob[idx]
    if version != VERSION_V1:
        raise UnsupportedVersion(f"unsupported container version: {version}")
    tok_code = blob[idx + 1]
    enc_code = blob[idx + 2]
    idx += 3

    tokenizer = CODE_TO_TOKENIZER.get(tok_code)
    if tokenizer is None:
        raise FormatError(f"unknown tokenizer code: {tok_code}")
    encoding = CODE_TO_ENCODING.get(enc_code)
    if encoding is None:
        raise FormatError(f"unknown encoding code: {enc_code}")

    meta_len, idx = dec_varint(blob, idx, what="container meta length")
    if idx + meta_len > len(blob):
        raise FormatError("container meta truncated")
    meta = bytes(blob[idx : idx + meta_len])
    idx += meta_len

    return ContainerHeader(
        version=version,
        tokenizer=tokenizer,
        encoding=encoding,
        meta=meta,
        stream_offset=idx,
    )


def compress_bytes(data: bytes, tokenizer: str = "byte", encoding: str = "huffman") -> bytes:
    tokenizer = normalize_tokenizer(tokenizer)
    encoding = normalize_encoding(encoding)
    layer = get_layer(tokenizer)

    ids, layer_meta = layer.encode(bytes(data))
    model = build_model(ids)
    table = build_code_table(model, encoding)
    stream = encode(ids, table)
    blob = pack_container(tokenizer, encoding, layer.pack_meta(layer_meta), stream)
    log.info(
        "compressed %d bytes -> %d bytes (%s/%s, %d symbols, alphabet %d)",
        len(data),
        len(blob),
        tokenizer,
        encoding,
        len(ids),
        len(model.alphabet),
    )
    return blob


def decompress_bytes(blob: bytes) -> bytes:
    blob = bytes(blob)
    hdr = read_container_header(blob)
    layer = get_layer(hdr.tokenizer)
    layer_meta = layer.unpack_meta(hdr.meta)
    decoded = decode_stream(blob[hdr.stream_offset :])
    data = layer.decode(decoded.symbols, layer_meta)
    log.info(
        "decompressed %d bytes -> %d bytes (%s/%s)",
        len(blob),
        len(data),
        hdr.tokenizer,
        hdr.encoding,
    )
    return data


def compress_file(
    input_path: str | Path,
    output_path: str | Path,
    *,
    tokenizer: str = "byte",
    encoding: str = "huffman",
) -> None:
    data = Path(input_path).read_bytes()
    blob = compress_bytes(data, tokenizer=tokenizer, encoding=encoding)
    Path(output_path).write_bytes(blob)


def decompress_file(input_path: str | Path, output_path: str | Path) -> None:
    blob = Path(input_path).read_bytes()
    data = decompress_bytes(blob)
    Path(output_path).write_bytes(data)
