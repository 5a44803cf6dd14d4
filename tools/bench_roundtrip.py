#!/usr/bin/env python3
"""Round-trip benchmark: compress -> decompress -> compare, per encoding.

Usage example:
  python tools/bench_roundtrip.py /path/to/text.txt --tokenizer word --iters 3

Notes:
- Uses internal APIs (no subprocess). Run inside repo venv.
- One JSON line per (encoding, iteration), then a summary line.
"""

from __future__ import annotations

import argparse
import json
import resource
import time
from pathlib import Path
from typing import Any


def _peak_rss_kb() -> int:
    # Linux: ru_maxrss is KB
    return int(resource.getrusage(resource.RUSAGE_SELF).ru_maxrss)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="bench_roundtrip.py", description="cshannon round-trip benchmark")
    ap.add_argument("input", type=Path)
    ap.add_argument("--tokenizer", default="byte")
    ap.add_argument(
        "--encoding",
        action="append",
        default=None,
        help="Encoding to bench (repeatable). Default: all",
    )
    ap.add_argument("--iters", type=int, default=3)
    ns = ap.parse_args(argv)

    from cshannon.core.encodings import ENCODING_NAMES
    from cshannon.engine.container import compress_bytes, decompress_bytes

    data = ns.input.read_bytes()
    encodings = ns.encoding or list(ENCODING_NAMES)

    rows: list[dict[str, Any]] = []
    t0_all = time.perf_counter()

    for enc in encodings:
        for i in range(int(ns.iters)):
            t0 = time.perf_counter()
            blob = compress_bytes(data, tokenizer=ns.tokenizer, encoding=enc)
            t_comp = time.perf_counter() - t0

            t1 = time.perf_counter()
            back = decompress_bytes(blob)
            t_decomp = time.perf_counter() - t1

            row = {
                "encoding": enc,
                "iter": i + 1,
                "tokenizer": ns.tokenizer,
                "input_bytes": len(data),
                "output_bytes": len(blob),
                "times_sec": {"compress": t_comp, "decompress": t_decomp},
                "peak_rss_kb": _peak_rss_kb(),
                "roundtrip_ok": back == data,
            }
            rows.append(row)
            print(json.dumps(row, ensure_ascii=False))
            if back != data:
                raise SystemExit(f"{enc}: roundtrip not lossless")

    summary = {
        "schema": "cshannon.bench_roundtrip.v1",
        "runs": len(rows),
        "wall_total_sec": time.perf_counter() - t0_all,
        "max_peak_rss_kb": max((r["peak_rss_kb"] for r in rows), default=0),
    }
    print(json.dumps(summary, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
