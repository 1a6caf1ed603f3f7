import pytest

from kitchen.encoding import (
    U32_MAX,
    U64_MAX,
    decode_string,
    decode_u32,
    decode_u64,
    encode_fixed_salt,
    encode_string,
    encode_u32,
    encode_u64,
)
from kitchen.errors import EncodingError


class TestIntegers:
    def test_u32_little_endian(self):
        assert encode_u32(1) == b"\x01\x00\x00\x00"
        assert encode_u32(U32_MAX) == b"\xff\xff\xff\xff"

    def test_u64_little_endian(self):
        assert encode_u64(100) == (100).to_bytes(8, "little")
        assert encode_u64(0x0102030405060708) == bytes([8, 7, 6, 5, 4, 3, 2, 1])

    def test_u64_round_trip_at_bounds(self):
        for value in (0, 1, 2**32, U64_MAX):
            assert decode_u64(encode_u64(value)) == value

    @pytest.mark.parametrize("value", [-1, 2**64, 2**70])
    def test_u64_out_of_range(self, value):
        with pytest.raises(EncodingError):
            encode_u64(value)

    @pytest.mark.parametrize("value", [-1, 2**32])
    def test_u32_out_of_range(self, value):
        with pytest.raises(EncodingError):
            encode_u32(value)

    def test_non_integers_rejected(self):
        with pytest.raises(EncodingError):
            encode_u64(1.5)
        with pytest.raises(EncodingError):
            encode_u32(True)

    def test_decode_u32(self):
        assert decode_u32(encode_u32(77) + b"trailing") == 77


class TestStrings:
    def test_length_prefix_without_terminator(self):
        assert encode_string("TST") == b"\x03\x00\x00\x00TST"

    def test_empty_string(self):
        assert encode_string("") == b"\x00\x00\x00\x00"
        assert decode_string(b"\x00\x00\x00\x00") == ""

    def test_prefix_counts_utf8_bytes(self):
        encoded = encode_string("héllo 🍳")
        assert decode_u32(encoded) == len("héllo 🍳".encode("utf-8"))
        assert decode_string(encoded) == "héllo 🍳"


class TestFixedSalt:
    def test_short_salt_zero_padded(self):
        salt = encode_fixed_salt("random-salt")
        assert len(salt) == 32
        assert salt == b"random-salt" + b"\x00" * 21

    def test_empty_salt(self):
        assert encode_fixed_salt("") == b"\x00" * 32

    def test_long_salt_truncated(self):
        assert encode_fixed_salt("x" * 40) == b"x" * 32

    def test_truncates_utf8_bytes_not_characters(self):
        salt = encode_fixed_salt("é" * 20)
        assert salt == ("é" * 20).encode("utf-8")[:32]
