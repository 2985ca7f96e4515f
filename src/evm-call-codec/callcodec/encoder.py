"""
Call data encoding.

``encode_call`` lays arguments out with the standard ABI head/tail scheme:
static values sit inline in the head, each dynamic value gets a head word
holding the byte offset (from the start of the argument block) of its tail.
For the shapes callers use most this gives the familiar layouts, e.g.
``(string)`` -> ``0x20 | len | data`` and ``(string,uint256,uint256)`` ->
``0x60 | offset | limit | len | data``.
"""

from typing import Any, List, Optional, Sequence, Tuple

from .errors import EncodingError
from .selector import selector
from .signature import AbiType, parse_signature
from .words import (
    WORD_HEX,
    hex_len,
    int_to_word,
    is_decimal,
    is_hex,
    pad_left_zero,
    pad_right_zero_to_word_boundary,
    strip_0x,
)


def encode_call(signature: str, args: Optional[Sequence[Any]] = None) -> str:
    """Return ``0x`` + selector + encoded arguments for ``signature``."""
    fn_name, types = parse_signature(signature)
    values = list(args or [])
    if len(types) != len(values):
        raise EncodingError(
            f"Argument count mismatch: expected {len(types)}, got {len(values)}.",
            details={"function": signature},
        )
    canonical = f"{fn_name}({','.join(t.canonical for t in types)})"
    return "0x" + selector(canonical) + encode_arguments(types, values)


def encode_arguments(types: Sequence[AbiType], args: Sequence[Any]) -> str:
    """Encode ``args`` as a tuple of ``types``; returns unprefixed hex."""
    if len(types) != len(args):
        raise EncodingError(f"Argument count mismatch: expected {len(types)}, got {len(args)}.")

    head_parts: List[str] = []
    tail_parts: List[str] = []
    dynamic_offset = 32 * len(types)

    for idx, (typ, value) in enumerate(zip(types, args)):
        try:
            enc, dynamic = encode_value(typ, value)
        except EncodingError as exc:
            raise EncodingError(f"args[{idx}] ({typ}): {exc.message}", details=exc.details) from exc
        if dynamic:
            head_parts.append(int_to_word(dynamic_offset))
            tail_parts.append(enc)
            dynamic_offset += len(enc) // 2
        else:
            head_parts.append(enc)

    return "".join(head_parts + tail_parts)


def encode_value(typ: AbiType, value: Any) -> Tuple[str, bool]:
    if typ.kind == "uint":
        return int_to_word(_to_uint(value, typ.bits)), False
    if typ.kind == "address":
        return _encode_address(value), False
    if typ.kind == "bool":
        return int_to_word(_to_bool(value)), False
    if typ.kind == "string":
        if not isinstance(value, str):
            raise EncodingError("string value must be a string.")
        return _encode_dynamic_bytes(value.encode("utf-8")), True
    if typ.kind == "bytes":
        return _encode_dynamic_bytes(_to_bytes(value)), True
    if typ.kind == "array":
        return _encode_array(typ.item, value), True
    raise EncodingError(f"Unsupported ABI type '{typ}'.")


def _encode_array(item: AbiType, value: Any) -> str:
    if not isinstance(value, (list, tuple)):
        raise EncodingError("Array value must be a list or tuple.")
    values = list(value)
    return int_to_word(len(values)) + encode_arguments([item] * len(values), values)


def _encode_dynamic_bytes(data: bytes) -> str:
    return pad_left_zero(hex_len(len(data))) + pad_right_zero_to_word_boundary(data.hex())


def _to_uint(value: Any, bits: int) -> int:
    if isinstance(value, bool):
        raise EncodingError("uint value must be an integer, not a bool.")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        body = strip_0x(text)
        if body != text:
            if not body or not is_hex(body):
                raise EncodingError(f"Invalid hex literal '{value}'.")
            number = int(body, 16)
        elif is_decimal(text):
            number = int(text)
        else:
            raise EncodingError(f"Invalid unsigned integer literal '{value}'.")
    else:
        raise EncodingError("uint value must be an integer or numeric string.")

    if number < 0 or number >= 2**bits:
        raise EncodingError(f"uint{bits} value out of range.", details={"value": str(number)})
    return number


def _encode_address(value: Any) -> str:
    if not isinstance(value, str):
        raise EncodingError("address value must be a string.")
    body = strip_0x(value.strip()).lower()
    if not is_hex(body):
        raise EncodingError(f"Invalid address value '{value}'.")
    if len(body) == WORD_HEX and body.startswith("0" * 24):
        # already a zero-padded address word
        return body
    if len(body) != 40:
        raise EncodingError(f"Invalid address value '{value}'.")
    return pad_left_zero(body)


def _to_bool(value: Any) -> int:
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, int) and value in (0, 1):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false", "1", "0"):
        return 1 if value.strip().lower() in ("true", "1") else 0
    raise EncodingError("bool value must be true/false or 0/1.")


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        body = strip_0x(value.strip())
        if len(body) % 2 != 0 or not is_hex(body):
            raise EncodingError("bytes value must be an even-length hex string.")
        return bytes.fromhex(body)
    raise EncodingError("bytes value must be hex string or bytes.")
