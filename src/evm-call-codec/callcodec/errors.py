"""
Exception hierarchy for the call codec and its transport.

Everything derives from ``ValueError`` so callers that already guard codec
calls with ``except ValueError`` keep working.
"""

from typing import Any, Dict, Optional


class CodecError(ValueError):
    """Base class for encode/decode/transport failures."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class EncodingError(CodecError):
    """Signature or argument cannot be encoded without emitting wrong bytes."""


class DecodeError(CodecError):
    """Returned data does not conform to the expected ABI layout."""

    EMPTY = "empty"
    INVALID_HEX = "invalid_hex"
    TRUNCATED = "truncated"
    INVALID_UTF8 = "invalid_utf8"
    UNSUPPORTED_TYPE = "unsupported_type"

    def __init__(self, message: str, kind: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)
        self.kind = kind


class TransportError(CodecError):
    """JSON-RPC request failed (network, HTTP status or RPC error object)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        rpc_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.rpc_code = rpc_code
