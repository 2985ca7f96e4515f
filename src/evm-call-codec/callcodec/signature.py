"""
Function signature parsing.

A signature such as ``getStudentsBySubject(string,uint256,uint256)`` is split
into its name and an ordered list of :class:`AbiType` descriptors. Only the
subset of the ABI grammar the codec handles is accepted:

* ``uint<M>`` (``uint`` is an alias for ``uint256``)
* ``address``, ``bool``
* ``string``, ``bytes``
* one-level dynamic arrays ``T[]`` where ``T`` is one of the static types
  above or ``string``

Signed integers, ``bytes<M>``, tuples, fixed-size arrays and nested arrays are
rejected with :class:`EncodingError`.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import EncodingError
from .words import is_decimal

_NAME_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


@dataclass(frozen=True)
class AbiType:
    kind: str
    bits: int = 0
    item: Optional["AbiType"] = None

    @property
    def is_dynamic(self) -> bool:
        return self.kind in ("string", "bytes", "array")

    @property
    def canonical(self) -> str:
        if self.kind == "uint":
            return f"uint{self.bits}"
        if self.kind == "array":
            return f"{self.item.canonical}[]"
        return self.kind

    def __str__(self) -> str:
        return self.canonical


UINT256 = AbiType("uint", 256)
ADDRESS = AbiType("address")
BOOL = AbiType("bool")
STRING = AbiType("string")
BYTES = AbiType("bytes")
STRING_ARRAY = AbiType("array", item=STRING)

_SIMPLE_TYPES = {
    "address": ADDRESS,
    "bool": BOOL,
    "string": STRING,
    "bytes": BYTES,
}


def parse_type(text: str) -> AbiType:
    typ = text.strip()
    if not typ:
        raise EncodingError("Empty type in function signature.")

    if typ.endswith("]"):
        lidx = typ.rfind("[")
        if lidx <= 0:
            raise EncodingError(f"Malformed array type '{typ}'.")
        if typ[lidx + 1 : -1].strip():
            raise EncodingError(f"Fixed-size arrays are not supported: '{typ}'.")
        item = parse_type(typ[:lidx])
        if item.kind == "array":
            raise EncodingError(f"Nested arrays are not supported: '{typ}'.")
        if item.is_dynamic and item.kind != "string":
            raise EncodingError(f"Arrays of '{item}' are not supported.")
        return AbiType("array", item=item)

    if typ in _SIMPLE_TYPES:
        return _SIMPLE_TYPES[typ]

    if typ.startswith("uint"):
        suffix = typ[4:]
        if not suffix:
            return UINT256
        if not is_decimal(suffix):
            raise EncodingError(f"Unsupported type '{typ}'.")
        bits = int(suffix)
        if bits <= 0 or bits > 256 or bits % 8 != 0:
            raise EncodingError(f"Unsupported uint size {bits}.")
        return AbiType("uint", bits)

    raise EncodingError(f"Unsupported ABI type '{typ}'.")


def split_signature(signature: str) -> Tuple[str, List[str]]:
    if not isinstance(signature, str):
        raise EncodingError("function signature must be a string.")
    text = signature.strip()
    if "(" not in text or not text.endswith(")"):
        raise EncodingError("function must be in the form name(type1,type2,...)")
    name, rest = text.split("(", 1)
    fn = name.strip()
    if not _NAME_RE.fullmatch(fn):
        raise EncodingError(f"Invalid function name '{fn}'.")
    params = rest[:-1]
    if "(" in params or ")" in params:
        raise EncodingError("Tuple parameters are not supported.")
    if not params.strip():
        return fn, []
    return fn, [p.strip() for p in params.split(",")]


def parse_signature(signature: str) -> Tuple[str, List[AbiType]]:
    fn, raw_types = split_signature(signature)
    return fn, [parse_type(t) for t in raw_types]


def canonical_signature(signature: str) -> str:
    """Normalize whitespace and type aliases, e.g. ``f( uint )`` -> ``f(uint256)``."""
    fn, types = parse_signature(signature)
    return f"{fn}({','.join(t.canonical for t in types)})"
