from __future__ import annotations

import random

import pytest

from cshannon.core.code_table import CodeTable, serialize_code_table
from cshannon.core.coder import decode, decode_stream, encode, read_header
from cshannon.core.encodings import ENCODING_NAMES, build_code_table
from cshannon.core.model import build_model
from cshannon.core.varint import enc_varint
from cshannon.errors import CodecError, DecodeError, FormatError

# Golden vectors (byte-level): these pin the packed stream format.
# [0,0,0,1,1,2] with huffman {0:"0", 1:"11", 2:"10"}
# payload bits 000 11 11 10 -> 0x1f 0x00, 7 pad bits
PS_SMALL_HEX = "0a" + "030001000102c0020280" + "07" + "1f00"
PS_EMPTY_HEX = "010000"
# [7,7,7] with {7:"0"}: 3 payload bits, 5 pad bits
PS_SINGLE_HEX = "04" + "01070100" + "05" + "00"


def _stream(table: CodeTable, pad_bits: int, payload: bytes) -> bytes:
    cb = serialize_code_table(table)
    return enc_varint(len(cb)) + cb + bytes([pad_bits]) + payload


def test_golden_small() -> None:
    syms = [0, 0, 0, 1, 1, 2]
    table = build_code_table(build_model(syms), "huffman")
    blob = encode(syms, table)
    assert blob.hex() == PS_SMALL_HEX
    assert decode(blob) == syms


def test_golden_empty() -> None:
    blob = encode([], CodeTable(()))
    assert blob.hex() == PS_EMPTY_HEX
    assert decode(blob) == []


def test_golden_single_symbol() -> None:
    syms = [7, 7, 7]
    blob = encode(syms, build_code_table(build_model(syms), "fano"))
    assert blob.hex() == PS_SINGLE_HEX
    assert decode(blob) == syms


@pytest.mark.parametrize("name", ENCODING_NAMES)
def test_roundtrip_random(name: str) -> None:
    rnd = random.Random(2024)
    for n in (1, 2, 17, 500):
        syms = [rnd.choice([0, 1, 1, 2, 2, 2, 40, 1000, (1 << 40)]) for _ in range(n)]
        table = build_code_table(build_model(syms), name)
        ds = decode_stream(encode(syms, table))
        assert ds.symbols == syms
        assert ds.table == table


def test_header_fields() -> None:
    hdr = read_header(bytes.fromhex(PS_SMALL_HEX))
    assert hdr.pad_bits == 7
    assert hdr.payload_offset == 12
    assert hdr.table.as_strings() == {0: "0", 1: "11", 2: "10"}


def test_encode_rejects_unknown_symbol() -> None:
    with pytest.raises(CodecError):
        encode([0, 5], CodeTable.from_strings({0: "0"}))


@pytest.mark.parametrize(
    "hexstr",
    [
        "",  # no codebook length
        "80",  # truncated codebook length varint
        "0500",  # codebook shorter than declared
        "0100",  # missing pad byte
        "010008",  # pad count out of range
        "010003",  # pad bits with no payload
        "0702000100010240" + "00" + "00",  # non prefix-free codebook
        "0d01" + "ff" * 9 + "7f" + "0100" + "07" + "00",  # 70-bit symbol id
    ],
)
def test_corrupt_header_is_format_error(hexstr: str) -> None:
    with pytest.raises(FormatError):
        decode(bytes.fromhex(hexstr))


INCOMPLETE = CodeTable.from_strings({0: "0", 1: "10"})


def test_no_matching_code() -> None:
    # "11": nothing starts with 11
    with pytest.raises(DecodeError):
        decode(_stream(INCOMPLETE, 6, b"\xc0"))


def test_payload_ends_inside_code_word() -> None:
    # "1" then end of payload
    with pytest.raises(DecodeError):
        decode(_stream(INCOMPLETE, 7, b"\x80"))


def test_dirty_padding() -> None:
    assert decode(_stream(INCOMPLETE, 1, b"\x00")) == [0] * 7
    with pytest.raises(DecodeError):
        decode(_stream(INCOMPLETE, 1, b"\x01"))


def test_payload_with_empty_codebook() -> None:
    with pytest.raises(DecodeError):
        decode(_stream(CodeTable(()), 0, b"\x00"))
