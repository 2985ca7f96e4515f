"""Signature parsing and type descriptor tests."""

import pytest

from callcodec.errors import EncodingError
from callcodec.signature import (
    ADDRESS,
    STRING,
    STRING_ARRAY,
    UINT256,
    AbiType,
    canonical_signature,
    parse_signature,
    parse_type,
    split_signature,
)


class TestParseType:
    def test_simple_types(self) -> None:
        assert parse_type("address") == ADDRESS
        assert parse_type("string") == STRING
        assert parse_type(" uint256 ") == UINT256

    def test_uint_alias_and_sizes(self) -> None:
        assert parse_type("uint") == UINT256
        assert parse_type("uint8") == AbiType("uint", 8)

    def test_arrays(self) -> None:
        assert parse_type("string[]") == STRING_ARRAY
        assert parse_type("uint256[]").item == UINT256
        assert parse_type("address[]").is_dynamic

    @pytest.mark.parametrize(
        "typ",
        ["int256", "bytes32", "uint7", "uint\u00b2", "uint\u0662\u0665\u0666", "uint264", "string[2]", "string[][]", "bytes[]", "(uint256,bool)", "foo", ""],
    )
    def test_unsupported_types_rejected(self, typ: str) -> None:
        with pytest.raises(EncodingError):
            parse_type(typ)

    def test_canonical_names(self) -> None:
        assert parse_type("uint").canonical == "uint256"
        assert str(STRING_ARRAY) == "string[]"

    def test_dynamic_flags(self) -> None:
        assert STRING.is_dynamic
        assert not UINT256.is_dynamic
        assert not ADDRESS.is_dynamic


class TestParseSignature:
    def test_no_arguments(self) -> None:
        assert parse_signature("name()") == ("name", [])

    def test_multiple_arguments(self) -> None:
        name, types = parse_signature("getStudentsBySubject(string,uint256,uint256)")

        assert name == "getStudentsBySubject"
        assert types == [STRING, UINT256, UINT256]

    def test_split_keeps_raw_types(self) -> None:
        assert split_signature("f(uint, address)") == ("f", ["uint", "address"])

    @pytest.mark.parametrize("signature", ["name", "name(", "1abc()", "f(uint256,)", "f((uint256,bool))"])
    def test_malformed_signatures(self, signature: str) -> None:
        with pytest.raises(EncodingError):
            parse_signature(signature)

    def test_canonical_signature(self) -> None:
        assert canonical_signature(" transfer( address , uint ) ") == "transfer(address,uint256)"
