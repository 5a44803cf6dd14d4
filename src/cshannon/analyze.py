"""Side-by-side comparison of the three encodings on one input.

Determinism note: the report carries no timestamps and no paths, so the same
input always renders the same report.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import zstandard as zstd

from cshannon.core.code_table import serialize_code_table
from cshannon.core.coder import encode
from cshannon.core.encodings import ENCODING_NAMES, build_code_table
from cshannon.core.model import build_model
from cshannon.engine.container import pack_container
from cshannon.layers.registry import get_layer, normalize_tokenizer

log = logging.getLogger(__name__)

ZSTD_LEVEL = 19


def _zstd_size(data: bytes) -> int:
    c = zstd.ZstdCompressor(level=ZSTD_LEVEL, write_content_size=False, write_checksum=False)
    return len(c.compress(data))


def _bytes_h(n: int) -> str:
    if n < 0:
        return str(n)
    units = ["B", "KiB", "MiB", "GiB"]
    f = float(n)
    u = 0
    while f >= 1024.0 and u < len(units) - 1:
        f /= 1024.0
        u += 1
    return f"{int(f)} {units[u]}" if u == 0 else f"{f:.2f} {units[u]}"


def build_report(data: bytes, tokenizer: str = "byte") -> dict[str, Any]:
    tokenizer = normalize_tokenizer(tokenizer)
    layer = get_layer(tokenizer)
    ids, layer_meta = layer.encode(bytes(data))
    meta = layer.pack_meta(layer_meta)
    model = build_model(ids)

    rows: list[dict[str, Any]] = []
    for name in ENCODING_NAMES:
        table = build_code_table(model, name)
        stream = encode(ids, table)
        packed = len(pack_container(tokenizer, name, meta, stream))
        log.debug("analyze: %s -> %d stream bytes", name, len(stream))
        rows.append(
            {
                "encoding": name,
                "expected_length": table.expected_length(model),
                "kraft_sum": float(table.kraft_sum()),
                "max_code_length": table.max_length,
                "payload_bits": table.encoded_bit_length(model),
                "codebook_bytes": len(serialize_code_table(table)),
                "stream_bytes": len(stream),
                "container_bytes": packed,
                "ratio": (packed / len(data)) if data else 0.0,
            }
        )

    return {
        "tokenizer": tokenizer,
        "input_bytes": len(data),
        "symbols": model.total,
        "alphabet_size": len(model.alphabet),
        "vocab_bytes": len(meta),
        "entropy": model.entropy(),
        "encodings": rows,
        "zstd_bytes": _zstd_size(bytes(data)),
    }


def analyze_file(path: str | Path, tokenizer: str = "byte") -> dict[str, Any]:
    return build_report(Path(path).read_bytes(), tokenizer=tokenizer)


def render_report_text(rep: dict[str, Any]) -> str:
    lines: list[str] = []
    lines.append(f"cshannon analyze ({rep['tokenizer']} tokenizer)\n")
    lines.append(
        f"input={_bytes_h(int(rep['input_bytes']))} symbols={rep['symbols']} "
        f"alphabet={rep['alphabet_size']} entropy={rep['entropy']:.4f} bits/symbol\n\n"
    )
    lines.append(
        f"  {'encoding':8s} {'avg len':>8s} {'kraft':>7s} {'max':>4s} "
        f"{'payload bits':>12s} {'codebook':>9s} {'container':>10s} {'ratio':>6s}\n"
    )
    for r in rep["encodings"]:
        lines.append(
            f"  {r['encoding']:8s} {r['expected_length']:8.4f} {r['kraft_sum']:7.4f} "
            f"{r['max_code_length']:4d} {r['payload_bits']:12d} {r['codebook_bytes']:9d} "
            f"{r['container_bytes']:10d} {r['ratio']:6.3f}\n"
        )
    lines.append("\n")
    lines.append(f"zstd -{ZSTD_LEVEL} reference: {_bytes_h(int(rep['zstd_bytes']))}\n")
    return "".join(lines)
