from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

from cshannon.errors import (
    EXIT_CORRUPT_PAYLOAD,
    EXIT_FORMAT,
    EXIT_UNSUPPORTED_VERSION,
    EXIT_USAGE,
)

SRC = Path(__file__).resolve().parents[1] / "src"


def _run_cli(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run the cshannon CLI through a python -c wrapper.

    This avoids assuming the console-script entrypoint is installed.
    """
    cmd = [
        sys.executable,
        "-c",
        "from cshannon.cli import main; raise SystemExit(main())",
        *args,
    ]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC), env.get("PYTHONPATH", "")) if p)
    return subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        env=env,
        text=True,
        capture_output=True,
    )


DATA = "Fattura 1001\nRIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\nTOTALE 12.00\n"


def test_cli_file_roundtrip_each_encoding(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text(DATA, encoding="utf-8")

    for enc in ("shannon", "fano", "huffman"):
        out = tmp_path / f"out.{enc}.csh"
        back = tmp_path / f"back.{enc}.txt"

        r = _run_cli("compress", str(inp), str(out), "--tokenizer", "word", "--encoding", enc)
        assert r.returncode == 0, (r.stdout, r.stderr)

        r = _run_cli("verify", str(out), "--full")
        assert r.returncode == 0, (r.stdout, r.stderr)
        assert "OK" in r.stdout

        r = _run_cli("decompress", str(out), str(back))
        assert r.returncode == 0, (r.stdout, r.stderr)
        assert back.read_text(encoding="utf-8") == DATA


def test_cli_pipeline_validate_and_use_inline_json(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    out = tmp_path / "out.csh"
    back = tmp_path / "back.txt"
    inp.write_text(DATA, encoding="utf-8")

    spec = json.dumps(
        {"spec": "cshannon.pipeline.v1", "name": "smoke", "tokenizer": "unicode", "encoding": "fano"}
    )
    r = _run_cli("pipeline-validate", spec)
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "OK" in r.stdout

    r = _run_cli("compress", str(inp), str(out), "--pipeline", spec)
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert out.read_bytes()[3:6] == bytes([1, 2, 2])

    r = _run_cli("decompress", str(out), str(back))
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert back.read_text(encoding="utf-8") == DATA


def test_cli_analyze_json(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text(DATA, encoding="utf-8")

    r = _run_cli("analyze", str(inp), "--json")
    assert r.returncode == 0, (r.stdout, r.stderr)
    rep = json.loads(r.stdout)
    assert rep["input_bytes"] == len(DATA.encode("utf-8"))
    assert [row["encoding"] for row in rep["encodings"]] == ["shannon", "fano", "huffman"]

    r = _run_cli("analyze", str(inp), "-t", "word")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "huffman" in r.stdout


def test_cli_verbose_dumps_code_table(tmp_path: Path) -> None:
    inp = tmp_path / "in.bin"
    out = tmp_path / "out.csh"
    inp.write_bytes(b"aaabbc")

    r = _run_cli("compress", str(inp), str(out), "-vv")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "[cshannon]" in r.stderr
    assert "huffman code table" in r.stderr
    assert "|97|: |0|" in r.stderr


def test_cli_exit_codes(tmp_path: Path) -> None:
    inp = tmp_path / "in.bin"
    out = tmp_path / "out.csh"
    back = tmp_path / "back.bin"
    inp.write_bytes(b"aaabbc")

    r = _run_cli("compress", str(inp), str(out), "--encoding", "lz77")
    assert r.returncode == EXIT_USAGE, (r.stdout, r.stderr)
    assert "unknown encoding" in r.stderr
    assert not out.exists()

    r = _run_cli("pipeline-validate", '{"spec": "nope"}')
    assert r.returncode == EXIT_USAGE, (r.stdout, r.stderr)

    r = _run_cli("compress", str(inp), str(out))
    assert r.returncode == 0, (r.stdout, r.stderr)
    good = out.read_bytes()

    bad = tmp_path / "bad.csh"
    bad.write_bytes(b"XYZ" + good[3:])
    r = _run_cli("decompress", str(bad), str(back))
    assert r.returncode == EXIT_FORMAT, (r.stdout, r.stderr)

    bad.write_bytes(good[:3] + b"\x07" + good[4:])
    r = _run_cli("verify", str(bad))
    assert r.returncode == EXIT_UNSUPPORTED_VERSION, (r.stdout, r.stderr)

    bad.write_bytes(good[:-1] + bytes([good[-1] | 0x01]))
    r = _run_cli("decompress", str(bad), str(back))
    assert r.returncode == EXIT_CORRUPT_PAYLOAD, (r.stdout, r.stderr)
    assert not back.exists()


def test_cli_debug_reraises(tmp_path: Path) -> None:
    bad = tmp_path / "bad.csh"
    bad.write_bytes(b"nope")
    r = _run_cli("verify", str(bad), "--debug")
    assert r.returncode != 0
    assert "Traceback" in r.stderr
    assert "BadMagic" in r.stderr
