#!/usr/bin/env python3
"""Write (or check) docs/exit_codes.md from cshannon.errors.

    python scripts/gen_exit_codes_md.py          # rewrite the doc
    python scripts/gen_exit_codes_md.py --check  # exit 1 if the doc is stale
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO = Path(__file__).resolve().parents[1]
DOC = REPO / "docs" / "exit_codes.md"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="gen_exit_codes_md.py")
    ap.add_argument("--check", action="store_true", help="Compare instead of writing")
    ns = ap.parse_args(argv)

    sys.path.insert(0, str(REPO / "src"))
    from cshannon.errors import render_exit_codes_markdown  # noqa: E402

    text = render_exit_codes_markdown()
    if ns.check:
        current = DOC.read_text(encoding="utf-8") if DOC.exists() else ""
        if current != text:
            print(f"[cshannon] {DOC} is stale, rerun without --check", file=sys.stderr)
            return 1
        return 0

    DOC.parent.mkdir(parents=True, exist_ok=True)
    DOC.write_text(text, encoding="utf-8")
    print(f"[cshannon] wrote {DOC}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
