"""cshannon CLI.

This is the stable CLI entrypoint (console-script: ``cshannon``).

    cshannon compress   IN OUT [--tokenizer byte|word|unicode] [--encoding shannon|fano|huffman]
    cshannon decompress IN OUT
    cshannon verify     IN [--full]
    cshannon analyze    IN [--tokenizer T] [--json]
    cshannon pipeline-validate SPEC
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from cshannon.core.encodings import ENCODING_NAMES
from cshannon.errors import EXIT_GENERIC, CShannonError
from cshannon.layers.registry import TOKENIZER_NAMES
from cshannon.pipeline_spec import load_pipeline_spec, resolve_codec_config

log = logging.getLogger("cshannon")


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v: info, -vv: debug, dumps code tables)",
    )


def _setup_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="[cshannon] %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _cmd_compress(
    input_path: Path,
    output_path: Path,
    *,
    tokenizer: str,
    encoding: str,
    pipeline_arg: str | None,
) -> int:
    from cshannon.engine.container import compress_file

    if pipeline_arg is not None:
        cfg = load_pipeline_spec(pipeline_arg)
    else:
        cfg = resolve_codec_config(tokenizer, encoding)
    log.info("compress: %s -> %s (%s/%s)", input_path, output_path, cfg.tokenizer, cfg.encoding)
    compress_file(input_path, output_path, tokenizer=cfg.tokenizer, encoding=cfg.encoding)
    return 0


def _cmd_decompress(input_path: Path, output_path: Path) -> int:
    from cshannon.engine.container import decompress_file

    log.info("decompress: %s -> %s", input_path, output_path)
    decompress_file(input_path, output_path)
    return 0


def _cmd_verify(input_path: Path, *, full: bool) -> int:
    from cshannon.verify import verify_container_file

    rep = verify_container_file(input_path, full=full)
    log.info(
        "verify: %s/%s alphabet=%d max_len=%d payload_bits=%d",
        rep.tokenizer,
        rep.encoding,
        rep.alphabet_size,
        rep.max_code_length,
        rep.payload_bits,
    )
    print("OK")
    return 0


def _cmd_analyze(input_path: Path, *, tokenizer: str, as_json: bool) -> int:
    from cshannon.analyze import analyze_file, render_report_text

    rep = analyze_file(input_path, tokenizer=tokenizer)
    if as_json:
        print(json.dumps(rep, sort_keys=True, separators=(",", ":")))
    else:
        sys.stdout.write(render_report_text(rep))
    return 0


def _cmd_pipeline_validate(pipeline_arg: str) -> int:
    # load is the validation
    load_pipeline_spec(pipeline_arg)
    print("OK")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cshannon",
        description="Compress / decompress text with Shannon, Fano or Huffman codes",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_c = sub.add_parser("compress", help="Compress a file")
    p_c.add_argument("input", type=Path)
    p_c.add_argument("output", type=Path)
    p_c.add_argument(
        "-t",
        "--tokenizer",
        default="byte",
        help=f"Tokenizer to use ({', '.join(TOKENIZER_NAMES)}). Default: byte",
    )
    p_c.add_argument(
        "-e",
        "--encoding",
        default="huffman",
        help=f"Code construction ({', '.join(ENCODING_NAMES)}). Default: huffman",
    )
    p_c.add_argument(
        "--pipeline",
        default=None,
        help=(
            "Pipeline spec (JSON). Use '@file.json' to load from file, or pass JSON inline. "
            "When set, --tokenizer/--encoding are ignored."
        ),
    )
    _add_common_args(p_c)

    p_d = sub.add_parser("decompress", help="Decompress a file")
    p_d.add_argument("input", type=Path)
    p_d.add_argument("output", type=Path)
    _add_common_args(p_d)

    p_v = sub.add_parser("verify", help="Verify a compressed file")
    p_v.add_argument("input", type=Path)
    p_v.add_argument("--full", action="store_true", help="Also decode the whole payload")
    _add_common_args(p_v)

    p_a = sub.add_parser("analyze", help="Compare the three encodings on a file")
    p_a.add_argument("input", type=Path)
    p_a.add_argument("-t", "--tokenizer", default="byte")
    p_a.add_argument("--json", action="store_true", help="Print the report as JSON")
    _add_common_args(p_a)

    p_pv = sub.add_parser("pipeline-validate", help="Validate a pipeline spec (v1)")
    p_pv.add_argument("pipeline", help="Pipeline spec JSON (@file.json or inline JSON)")
    _add_common_args(p_pv)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)
    _setup_logging(int(ns.verbose))

    try:
        if ns.cmd == "compress":
            return _cmd_compress(
                ns.input,
                ns.output,
                tokenizer=ns.tokenizer,
                encoding=ns.encoding,
                pipeline_arg=ns.pipeline,
            )
        if ns.cmd == "decompress":
            return _cmd_decompress(ns.input, ns.output)
        if ns.cmd == "verify":
            return _cmd_verify(ns.input, full=bool(ns.full))
        if ns.cmd == "analyze":
            return _cmd_analyze(ns.input, tokenizer=ns.tokenizer, as_json=bool(ns.json))
        if ns.cmd == "pipeline-validate":
            return _cmd_pipeline_validate(str(ns.pipeline))
        raise AssertionError("unreachable")

    except SystemExit:
        raise
    except CShannonError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[cshannon] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except OSError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[cshannon] error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
