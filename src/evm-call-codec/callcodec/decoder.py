"""
Return data decoding.

Every function here either returns a value or raises :class:`DecodeError`;
malformed input never yields a placeholder string or a silent default.
"""

from typing import Any, List, Sequence

from .errors import DecodeError, EncodingError
from .signature import STRING, STRING_ARRAY, AbiType, parse_type
from .words import WORD_HEX, hex_to_bytes, is_hex, read_uint, read_word, strip_0x

MIN_STRING_HEX = 2 * WORD_HEX


def _body(hex_str: str) -> str:
    if not isinstance(hex_str, str):
        raise DecodeError("Result must be a hex string.", DecodeError.INVALID_HEX)
    body = strip_0x(hex_str.strip())
    if not body:
        raise DecodeError("Empty result.", DecodeError.EMPTY)
    if not is_hex(body):
        raise DecodeError("Result must be a hex string.", DecodeError.INVALID_HEX)
    return body


def decode_uint(hex_str: str) -> int:
    """Big-endian unsigned integer held in the first word."""
    return int(_body(hex_str)[:WORD_HEX], 16)


def decode_address(hex_str: str) -> str:
    body = _body(hex_str)
    if len(body) < WORD_HEX:
        raise DecodeError(
            "Result shorter than one word; cannot read address.",
            DecodeError.TRUNCATED,
            details={"hex_length": len(body)},
        )
    return "0x" + body[24:WORD_HEX].lower()


def decode_string(hex_str: str) -> str:
    body = _body(hex_str)
    if len(body) < MIN_STRING_HEX:
        raise DecodeError(
            "Result too short for a dynamic string.",
            DecodeError.TRUNCATED,
            details={"hex_length": len(body)},
        )
    return _decode(STRING, hex_to_bytes(body), 0, 0)


def decode_string_array(hex_str: str) -> List[str]:
    return decode_values([STRING_ARRAY], hex_str)[0]


def decode_values(types: Sequence[AbiType], hex_str: str) -> List[Any]:
    """Decode ``hex_str`` as the ABI tuple ``(types...)``."""
    data = hex_to_bytes(_body(hex_str))
    values: List[Any] = []
    cursor = 0
    for typ in types:
        values.append(_decode(typ, data, cursor, 0))
        cursor += 32
    return values


def decode_result(return_type: str, hex_str: str) -> Any:
    """Decode a single return value of the named ABI type."""
    try:
        typ = parse_type(return_type)
    except EncodingError as exc:
        raise DecodeError(exc.message, DecodeError.UNSUPPORTED_TYPE) from exc

    if typ.kind == "uint":
        return decode_uint(hex_str)
    if typ.kind == "address":
        return decode_address(hex_str)
    if typ == STRING:
        return decode_string(hex_str)
    if typ == STRING_ARRAY:
        return decode_string_array(hex_str)
    return decode_values([typ], hex_str)[0]


def _decode(typ: AbiType, data: bytes, head_offset: int, data_base: int) -> Any:
    # static word for inline static types or offset for dynamic
    word = read_word(data, head_offset)

    if typ.kind == "uint":
        return int.from_bytes(word, "big")

    if typ.kind == "address":
        return "0x" + word[-20:].hex()

    if typ.kind == "bool":
        return bool(int.from_bytes(word, "big"))

    if typ.kind in ("string", "bytes"):
        raw = _read_dynamic_bytes(data, data_base + int.from_bytes(word, "big"))
        if typ.kind == "bytes":
            return "0x" + raw.hex()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                "String is not valid UTF-8.",
                DecodeError.INVALID_UTF8,
                details={"offset": exc.start},
            ) from exc

    if typ.kind == "array":
        array_base = data_base + int.from_bytes(word, "big")
        length = read_uint(data, array_base)
        head_start = array_base + 32
        if head_start + 32 * length > len(data):
            raise DecodeError(
                "Array length exceeds result size.",
                DecodeError.TRUNCATED,
                details={"length": length, "size": len(data)},
            )
        # element offsets are relative to the first element head
        return [_decode(typ.item, data, head_start + 32 * idx, head_start) for idx in range(length)]

    raise DecodeError(f"Unsupported ABI output type '{typ}'.", DecodeError.UNSUPPORTED_TYPE)


def _read_dynamic_bytes(data: bytes, start: int) -> bytes:
    length = read_uint(data, start)
    data_start = start + 32
    data_end = data_start + length
    if data_end > len(data):
        raise DecodeError(
            "Dynamic value out of range.",
            DecodeError.TRUNCATED,
            details={"start": data_start, "length": length, "size": len(data)},
        )
    return data[data_start:data_end]
