import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from .config import load_config
from .decoder import decode_result
from .encoder import encode_call
from .errors import DecodeError
from .log import configure_logging
from .selector import selector
from .service import ContractReader
from .signature import canonical_signature

INVALID_DATA = "Invalid data"
INVALID_UTF8 = "Invalid UTF-8"


def _add_rpc_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--rpc-url",
        required=False,
        help="JSON-RPC endpoint. Defaults to RPC_URL env.",
    )
    parser.add_argument(
        "--block",
        required=False,
        help="Block tag: latest (default), earliest, pending, safe, finalized, or a block number.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Encode contract calls, decode results and run read-only eth_call queries.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING...). Defaults to LOG_LEVEL env or WARNING.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    selector_parser = subparsers.add_parser("selector", help="Compute a function selector")
    selector_parser.add_argument(
        "--function",
        required=True,
        help="Function signature, e.g. balanceOf(address).",
    )

    encode_parser = subparsers.add_parser("encode", help="Encode call data")
    encode_parser.add_argument("--function", required=True, help="Function signature.")
    encode_parser.add_argument(
        "--arg",
        dest="args",
        action="append",
        default=[],
        help="Argument value (repeatable, in order). Arrays as JSON, e.g. '[\"a\",\"b\"]'.",
    )

    decode_parser = subparsers.add_parser("decode", help="Decode returned data")
    decode_parser.add_argument(
        "--type",
        required=True,
        help="Return type: uint256, address, string, string[], bool, bytes...",
    )
    decode_parser.add_argument("--data", required=True, help="Hex result (0x optional).")

    call_parser = subparsers.add_parser("call", help="Call a read-only function via eth_call")
    call_parser.add_argument("--address", required=True, help="Contract address (0x-prefixed).")
    call_parser.add_argument("--function", required=True, help="Function signature.")
    call_parser.add_argument(
        "--arg",
        dest="args",
        action="append",
        default=[],
        help="Argument value (repeatable, in order).",
    )
    call_parser.add_argument(
        "--returns",
        required=False,
        help="Return type to decode (omit to print raw hex).",
    )
    _add_rpc_options(call_parser)

    token_parser = subparsers.add_parser("token-info", help="Read ERC-20 name/symbol/decimals/supply")
    token_parser.add_argument("--address", required=True, help="Token contract address.")
    token_parser.add_argument("--holder", required=False, help="Optional address to read balanceOf for.")
    _add_rpc_options(token_parser)

    nft_parser = subparsers.add_parser("nft-info", help="Read ERC-721 collection and token details")
    nft_parser.add_argument("--address", required=True, help="NFT contract address.")
    nft_parser.add_argument("--token-id", required=False, help="Token id for ownerOf/tokenURI.")
    nft_parser.add_argument("--holder", required=False, help="Optional address to read balanceOf for.")
    _add_rpc_options(nft_parser)

    return parser


def _parse_args(values: List[str]) -> List[Any]:
    parsed: List[Any] = []
    for value in values:
        if value.strip().startswith("["):
            parsed.append(json.loads(value))
        else:
            parsed.append(value)
    return parsed


def _decode_for_display(returns: str, data: str) -> Dict[str, Any]:
    """Decode ``data``; string results that fail render as the console sentinels."""
    try:
        return {"type": returns, "value": decode_result(returns, data)}
    except DecodeError as exc:
        if returns.strip() != "string":
            raise
        sentinel = INVALID_UTF8 if exc.kind == DecodeError.INVALID_UTF8 else INVALID_DATA
        return {"type": returns, "value": sentinel, "error": str(exc)}


def _reader(args: argparse.Namespace) -> ContractReader:
    return ContractReader(load_config(args.rpc_url))


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_level or "WARNING")

        if args.command == "selector":
            result = {
                "function": canonical_signature(args.function),
                "selector": "0x" + selector(canonical_signature(args.function)),
            }
        elif args.command == "encode":
            data = encode_call(args.function, _parse_args(args.args))
            result = {"function": canonical_signature(args.function), "selector": data[:10], "data": data}
        elif args.command == "decode":
            result = _decode_for_display(args.type, args.data)
        elif args.command == "call":
            reader = _reader(args)
            configure_logging(args.log_level or reader.config.log_level)
            result = reader.call(args.address, args.function, _parse_args(args.args), None, args.block)
            if args.returns:
                decoded = _decode_for_display(args.returns, result["result"])
                result["returns"] = args.returns
                result["decoded"] = decoded["value"]
                if "error" in decoded:
                    result["error"] = decoded["error"]
        elif args.command == "token-info":
            reader = _reader(args)
            configure_logging(args.log_level or reader.config.log_level)
            result = reader.token_info(args.address, args.holder, args.block)
        else:
            reader = _reader(args)
            configure_logging(args.log_level or reader.config.log_level)
            result = reader.nft_info(args.address, args.token_id, args.holder, args.block)

        print(json.dumps(result, indent=2))
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
