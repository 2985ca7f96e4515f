import re
from typing import Any, Dict, List, Optional, Tuple

from .config import Config, normalize_block_tag
from .decoder import decode_result
from .encoder import encode_call
from .errors import DecodeError, TransportError
from .log import get_logger
from .rpc_client import RpcClient
from .signature import canonical_signature

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")

ERC20_FIELDS: List[Tuple[str, str, str]] = [
    ("name", "name()", "string"),
    ("symbol", "symbol()", "string"),
    ("decimals", "decimals()", "uint8"),
    ("total_supply", "totalSupply()", "uint256"),
]

ERC721_FIELDS: List[Tuple[str, str, str]] = [
    ("name", "name()", "string"),
    ("symbol", "symbol()", "string"),
    ("total_supply", "totalSupply()", "uint256"),
]

logger = get_logger("service")


class ContractReader:
    """Run read-only contract calls through the codec and a JSON-RPC node."""

    def __init__(self, config: Config, client: Optional[RpcClient] = None) -> None:
        self.config = config
        self.client = client or RpcClient(
            rpc_url=config.rpc_url,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            backoff_seconds=config.backoff_seconds,
        )

    def call(
        self,
        address: str,
        function: str,
        args: Optional[List[Any]] = None,
        returns: Optional[str] = None,
        block_tag: Optional[str] = None,
    ) -> Dict[str, Any]:
        normalized_address = self._normalize_address(address)
        tag = self._block_tag(block_tag)
        data = encode_call(function, args or [])

        result = self.client.eth_call(normalized_address, data, tag)
        logger.debug("eth_call %s %s -> %d hex chars", normalized_address, function, len(result))

        response: Dict[str, Any] = {
            "address": normalized_address,
            "function": canonical_signature(function),
            "selector": data[:10],
            "block_tag": tag,
            "data": data,
            "result": result,
            "decoded": None,
        }
        if args:
            response["args"] = list(args)
        if returns:
            response["returns"] = returns
            response["decoded"] = decode_result(returns, result)
        return response

    def token_info(
        self, address: str, holder: Optional[str] = None, block_tag: Optional[str] = None
    ) -> Dict[str, Any]:
        """ERC-20 overview: name, symbol, decimals, total supply and optional holder balance."""
        fields = [(key, fn, None, ret) for key, fn, ret in ERC20_FIELDS]
        if holder is not None:
            fields.append(("balance", "balanceOf(address)", [self._normalize_address(holder)], "uint256"))
        info = self._read_fields(address, fields, block_tag)
        if holder is not None:
            info["holder"] = self._normalize_address(holder)
        return info

    def nft_info(
        self,
        address: str,
        token_id: Optional[Any] = None,
        holder: Optional[str] = None,
        block_tag: Optional[str] = None,
    ) -> Dict[str, Any]:
        """ERC-721 overview, with owner and URI of ``token_id`` when given."""
        fields = [(key, fn, None, ret) for key, fn, ret in ERC721_FIELDS]
        if token_id is not None:
            fields.append(("owner", "ownerOf(uint256)", [token_id], "address"))
            fields.append(("token_uri", "tokenURI(uint256)", [token_id], "string"))
        if holder is not None:
            fields.append(("balance", "balanceOf(address)", [self._normalize_address(holder)], "uint256"))
        info = self._read_fields(address, fields, block_tag)
        if token_id is not None:
            info["token_id"] = str(token_id)
        if holder is not None:
            info["holder"] = self._normalize_address(holder)
        return info

    def _read_fields(
        self,
        address: str,
        fields: List[Tuple[str, str, Optional[List[Any]], str]],
        block_tag: Optional[str],
    ) -> Dict[str, Any]:
        normalized_address = self._normalize_address(address)
        tag = self._block_tag(block_tag)
        info: Dict[str, Any] = {"address": normalized_address, "block_tag": tag}
        errors: Dict[str, str] = {}
        for key, function, args, returns in fields:
            try:
                info[key] = self.call(normalized_address, function, args, returns, tag)["decoded"]
            except (DecodeError, TransportError) as exc:
                # optional interface members (e.g. totalSupply on ERC-721) may revert
                logger.info("%s on %s failed: %s", function, normalized_address, exc)
                info[key] = None
                errors[key] = str(exc)
        if errors:
            info["errors"] = errors
        return info

    def _block_tag(self, block_tag: Optional[str]) -> str:
        if block_tag is None:
            return self.config.block_tag
        return normalize_block_tag(block_tag)

    def _normalize_address(self, address: str) -> str:
        if not isinstance(address, str):
            raise ValueError("Address must be a string.")

        candidate = address.strip()
        if not candidate.startswith("0x"):
            candidate = f"0x{candidate}"

        if not ADDRESS_PATTERN.match(candidate):
            raise ValueError("Invalid address format. Expected 0x-prefixed 40 hex characters.")

        return candidate.lower()
