"""Typed errors for cshannon.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- Every failure is fatal: nothing retries, nothing emits partial output.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_FORMAT = 11
EXIT_UNSUPPORTED_VERSION = 12
EXIT_CORRUPT_PAYLOAD = 13


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (unknown tokenizer/encoding, bad pipeline spec)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Generic failure (model/codec mismatch, unexpected error)"),
    ExitCodeInfo(EXIT_FORMAT, "FORMAT", "Corrupt header or codebook (truncated, non prefix-free, bad magic)"),
    ExitCodeInfo(EXIT_UNSUPPORTED_VERSION, "UNSUPPORTED_VERSION", "Unsupported container version"),
    ExitCodeInfo(EXIT_CORRUPT_PAYLOAD, "CORRUPT_PAYLOAD", "Corrupt payload bits (no matching code, premature end, dirty padding)"),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE: do not edit manually.\n")
    lines.append("> Source of truth: `src/cshannon/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- All internal errors extend `CShannonError` and carry an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append("- `--json` on `analyze` prints the report as a JSON object to stdout.\n")
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class CShannonError(Exception):
    """Base error for cshannon."""

    exit_code: int = EXIT_GENERIC


class ConfigError(CShannonError):
    """Unknown tokenizer/encoding selection. Never defaulted."""

    exit_code = EXIT_USAGE


class PipelineSpecError(ConfigError):
    pass


class ModelError(CShannonError):
    """Invalid symbols fed to the frequency model."""

    exit_code = EXIT_GENERIC


class FormatError(CShannonError):
    """Corrupt or hand-crafted header / codebook."""

    exit_code = EXIT_FORMAT


class BadMagic(FormatError):
    pass


class UnsupportedVersion(FormatError):
    exit_code = EXIT_UNSUPPORTED_VERSION


class CodecError(CShannonError):
    """Symbol/table mismatch while encoding, or undecodable input text."""

    exit_code = EXIT_GENERIC


class DecodeError(CShannonError):
    """Payload bits that cannot be decoded against the embedded codebook."""

    exit_code = EXIT_CORRUPT_PAYLOAD
