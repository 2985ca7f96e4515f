"""32-byte word helpers shared by the encoder and decoder."""

import re

from .errors import DecodeError, EncodingError

WORD_BYTES = 32
WORD_HEX = 64

_HEX_RE = re.compile(r"[0-9a-fA-F]*")
_DECIMAL_RE = re.compile(r"[0-9]+")


def strip_0x(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


def pad_left_zero(s: str) -> str:
    """Right-align ``s`` in one word, zero-filled on the left."""
    if len(s) > WORD_HEX:
        raise EncodingError(
            "Value does not fit in a 32-byte word.",
            details={"hex_length": len(s)},
        )
    return s.rjust(WORD_HEX, "0")


def pad_right_zero_to_word_boundary(hex_bytes: str) -> str:
    remainder = len(hex_bytes) % WORD_HEX
    if remainder == 0:
        return hex_bytes
    return hex_bytes + "0" * (WORD_HEX - remainder)


def hex_len(value: int) -> str:
    if value < 0:
        raise EncodingError("Length or offset must be non-negative.")
    return format(value, "x")


def int_to_word(value: int) -> str:
    return pad_left_zero(hex_len(value))


def is_hex(value: str) -> bool:
    return bool(_HEX_RE.fullmatch(value))


def is_decimal(value: str) -> bool:
    # ASCII only; str.isdigit() also accepts "²" and other Unicode digits
    return bool(_DECIMAL_RE.fullmatch(value))


def hex_to_bytes(value: str) -> bytes:
    if not isinstance(value, str):
        raise DecodeError("Result must be a hex string.", DecodeError.INVALID_HEX)
    body = strip_0x(value.strip())
    if not is_hex(body):
        raise DecodeError("Result must be a hex string.", DecodeError.INVALID_HEX)
    if len(body) % 2 != 0:
        raise DecodeError(
            "Result hex has an odd number of digits.",
            DecodeError.INVALID_HEX,
            details={"hex_length": len(body)},
        )
    return bytes.fromhex(body)


def read_word(data: bytes, offset: int) -> bytes:
    end = offset + WORD_BYTES
    if offset < 0 or end > len(data):
        raise DecodeError(
            "Result shorter than expected for ABI decoding.",
            DecodeError.TRUNCATED,
            details={"offset": offset, "size": len(data)},
        )
    return data[offset:end]


def read_uint(data: bytes, offset: int) -> int:
    return int.from_bytes(read_word(data, offset), "big")
