"""Little-endian encoders for the recipe program's instruction data.

Integers and strings use borsh primitives, which match the program's layout:
fixed-width little-endian integers and u32 length-prefixed UTF-8 strings.
The salt is the one field with a bespoke shape (fixed 32 bytes, zero padded).
"""
from borsh_construct import String, U32, U64

from kitchen.errors import EncodingError

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
SALT_LEN = 32
MAX_TOKEN_DECIMALS = 255  # SPL mint decimals are a u8


def _check_range(value, upper: int, width: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"{width} value must be an integer, got {type(value).__name__}")
    if value < 0 or value > upper:
        raise EncodingError(f"{width} value out of range: {value}")
    return value


def encode_u32(value: int) -> bytes:
    return U32.build(_check_range(value, U32_MAX, "u32"))


def encode_u64(value: int) -> bytes:
    return U64.build(_check_range(value, U64_MAX, "u64"))


def encode_string(value: str) -> bytes:
    return String.build(value)


def encode_fixed_salt(value: str) -> bytes:
    return value.encode("utf-8")[:SALT_LEN].ljust(SALT_LEN, b"\x00")


def decode_u32(data: bytes) -> int:
    return U32.parse(data[:4])


def decode_u64(data: bytes) -> int:
    return U64.parse(data[:8])


def decode_string(data: bytes) -> str:
    return String.parse(data)
