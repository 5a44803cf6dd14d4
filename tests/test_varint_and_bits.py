from __future__ import annotations

import pytest

from cshannon.core.bits import BitReader, Bits, BitWriter
from cshannon.core.varint import dec_varint, enc_varint
from cshannon.errors import DecodeError, FormatError


def test_varint_vectors() -> None:
    assert enc_varint(0).hex() == "00"
    assert enc_varint(127).hex() == "7f"
    assert enc_varint(128).hex() == "8001"
    assert enc_varint(300).hex() == "ac02"
    assert enc_varint((1 << 64) - 1).hex() == "ffffffffffffffffff01"

    for x in (0, 1, 127, 128, 16383, 16384, (1 << 64) - 1):
        v, idx = dec_varint(enc_varint(x) + b"\xaa", 0)
        assert v == x
        assert idx == len(enc_varint(x))


def test_varint_rejects_negative_and_truncated() -> None:
    with pytest.raises(ValueError):
        enc_varint(-1)
    with pytest.raises(FormatError):
        dec_varint(b"", 0)
    with pytest.raises(FormatError):
        dec_varint(b"\x80\x80", 0)
    with pytest.raises(FormatError):
        dec_varint(b"\xff" * 11, 0)


def test_varint_rejects_values_past_64_bits() -> None:
    # ten groups, last one without continuation: 70 bits of payload
    with pytest.raises(FormatError):
        dec_varint(b"\xff" * 9 + b"\x7f", 0)
    with pytest.raises(FormatError):
        dec_varint(b"\xff" * 9 + b"\x02", 0)
    assert dec_varint(b"\xff" * 9 + b"\x01", 0) == ((1 << 64) - 1, 10)


@pytest.mark.parametrize("hexstr", ["8000", "ff00", "818000"])
def test_varint_rejects_overlong_encodings(hexstr: str) -> None:
    with pytest.raises(FormatError):
        dec_varint(bytes.fromhex(hexstr), 0)


def test_bits_str_and_prefix() -> None:
    b = Bits.from_str("0110")
    assert str(b) == "0110"
    assert len(b) == 4
    assert [b.bit(i) for i in range(4)] == [0, 1, 1, 0]
    assert Bits.from_str("01").is_prefix_of(b)
    assert not Bits.from_str("1").is_prefix_of(b)
    assert not Bits.from_str("01101").is_prefix_of(b)
    assert str(Bits(0, 0)) == ""
    # leading zeros are part of the code
    assert Bits.from_str("001") != Bits.from_str("1")

    with pytest.raises(ValueError):
        Bits(4, 2)
    with pytest.raises(ValueError):
        Bits.from_str("012")


def test_bits_bytes_packing() -> None:
    assert Bits.from_str("1").to_bytes() == b"\x80"
    assert Bits.from_str("101000001").to_bytes() == b"\xa0\x80"
    assert Bits.from_bytes(b"\xa0\x80", 9) == Bits.from_str("101000001")

    with pytest.raises(FormatError):
        Bits.from_bytes(b"\x81", 1)
    with pytest.raises(FormatError):
        Bits.from_bytes(b"\x80\x00", 1)


def test_bit_writer_reader_msb_first() -> None:
    w = BitWriter()
    for s in ("1", "01", "111", "0"):
        w.write(Bits.from_str(s))
    assert w.bit_count == 7
    payload, pad = w.finalize()
    assert payload == bytes([0b10111100])
    assert pad == 1

    with pytest.raises(ValueError):
        w.write(Bits.from_str("1"))

    r = BitReader(payload, pad)
    assert r.total == 7
    assert str(r.read(3)) == "101"
    assert r.read_bit() == 1
    assert r.remaining == 3
    assert str(r.read(3)) == "110"
    assert r.padding() == Bits(0, 1)
    with pytest.raises(DecodeError):
        r.read_bit()


def test_bit_writer_exact_bytes_has_no_padding() -> None:
    w = BitWriter()
    w.write(Bits.from_str("11110000"))
    w.write(Bits.from_str("1" * 16))
    assert w.finalize() == (b"\xf0\xff\xff", 0)


def test_bit_reader_validates_pad() -> None:
    with pytest.raises(FormatError):
        BitReader(b"\x00", 8)
    with pytest.raises(FormatError):
        BitReader(b"", 3)
    assert BitReader(b"", 0).total == 0
