"""
MCP server exposing the call codec and read-only eth_call queries.
"""

import argparse
from collections.abc import Mapping
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from .config import load_config
from .decoder import decode_result as _decode_result
from .encoder import encode_call as _encode_call
from .log import configure_logging
from .selector import selector as _selector
from .service import ContractReader
from .signature import canonical_signature

server = FastMCP(
    name="evm-call-codec",
    instructions="Encode contract calls, decode ABI results and run read-only eth_call queries.",
)

_reader: Optional[ContractReader] = None


def _get_reader() -> ContractReader:
    global _reader
    if _reader is None:
        cfg = load_config()
        configure_logging(cfg.log_level)
        _reader = ContractReader(cfg)
    return _reader


def _normalize_array_param(value: Optional[Any], name: str) -> Optional[list]:
    """
    Ensure a parameter intended as an array is actually treated as one:
    - str/bytes: likely misuse, raise with guidance
    - list/tuple: keep as list
    - Mapping: reject (not an array)
    - other scalars: auto-wrap into single-element list
    """
    if value is None:
        return None
    if isinstance(value, (str, bytes, bytearray)):
        raise ValueError(f"{name} must be an array (e.g. ['0x...', 123]); got a string/bytes.")
    if isinstance(value, Mapping):
        raise ValueError(f"{name} must be an array, not an object/map.")
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


@server.tool(
    name="selector",
    title="Function Selector",
    description="Compute the 4-byte selector (keccak-256 prefix) of a function signature such as balanceOf(address).",
)
def selector(function: str) -> dict:
    canonical = canonical_signature(function)
    return {"function": canonical, "selector": "0x" + _selector(canonical)}


@server.tool(
    name="encode_call",
    title="Encode Function Call",
    description="ABI-encode call data from a function signature and arguments. `args` must be an array.",
)
def encode_call(function: str, args: Optional[Any] = None) -> dict:
    data = _encode_call(function, _normalize_array_param(args, "args") or [])
    return {"function": canonical_signature(function), "selector": data[:10], "data": data}


@server.tool(
    name="decode_result",
    title="Decode Return Data",
    description="Decode hex return data as one ABI type: uint<M>, address, bool, string, bytes, or T[].",
)
def decode_result(return_type: str, data: str) -> dict:
    return {"type": return_type, "value": _decode_result(return_type, data)}


@server.tool(
    name="call_function",
    title="Call Read-Only Function",
    description="Call a contract read-only function via eth_call and optionally decode the result. `args` must be an array (e.g. ['0x...', 123]).",
)
def call_function(
    address: str,
    function: str,
    args: Optional[Any] = None,
    returns: Optional[str] = None,
    block_tag: Optional[str] = None,
) -> dict:
    reader = _get_reader()
    normalized_args = _normalize_array_param(args, "args")
    return reader.call(address, function, normalized_args, returns, block_tag)


@server.tool(
    name="token_info",
    title="ERC-20 Token Info",
    description="Read ERC-20 name, symbol, decimals, totalSupply and optionally balanceOf(holder).",
)
def token_info(address: str, holder: Optional[str] = None, block_tag: Optional[str] = None) -> dict:
    return _get_reader().token_info(address, holder, block_tag)


@server.tool(
    name="nft_info",
    title="ERC-721 Collection Info",
    description="Read ERC-721 name, symbol, totalSupply; ownerOf/tokenURI for token_id and balanceOf(holder) when given.",
)
def nft_info(
    address: str,
    token_id: Optional[Any] = None,
    holder: Optional[str] = None,
    block_tag: Optional[str] = None,
) -> dict:
    return _get_reader().nft_info(address, token_id, holder, block_tag)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the EVM call codec MCP server.")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default="stdio",
        help="Transport protocol for MCP.",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for SSE/HTTP transports.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for SSE/HTTP transports.",
    )
    parser.add_argument(
        "--mount-path",
        default="/",
        help="Mount path for SSE transport (only when transport=sse).",
    )
    args = parser.parse_args()

    # FastMCP uses host/port only for SSE/HTTP transports; stdio ignores them.
    server.settings.host = args.host
    server.settings.port = args.port

    if args.transport == "sse":
        server.run(transport="sse", mount_path=args.mount_path)
    else:
        server.run(transport=args.transport)


if __name__ == "__main__":
    main()
