from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from cshannon.errors import DecodeError


@dataclass(frozen=True)
class LayerBytes:
    """
    Byte tokenizer:
    - symbols: byte values 0..255
    - layer_meta: empty (the alphabet is implicit)
    """

    id: str = "byte"

    def encode(self, data: bytes) -> tuple[list[int], dict[str, Any]]:
        return list(data), {}

    def decode(self, symbols: Sequence[int], layer_meta: dict[str, Any]) -> bytes:
        try:
            return bytes(symbols)
        except ValueError as e:
            raise DecodeError(f"byte tokenizer: symbol out of range ({e})") from e

    def pack_meta(self, meta: dict[str, Any]) -> bytes:
        return b""

    def unpack_meta(self, meta_bytes: bytes) -> dict[str, Any]:
        return {}
