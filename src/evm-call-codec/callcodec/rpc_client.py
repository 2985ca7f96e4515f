import time
from typing import Any, Dict, List, Optional

import requests

from .errors import TransportError
from .log import get_logger

logger = get_logger("rpc")


class RpcClient:
    """Minimal JSON-RPC 2.0 client for EVM nodes (HTTP POST)."""

    def __init__(
        self,
        rpc_url: str,
        timeout: int = 10,
        max_retries: int = 3,
        backoff_seconds: float = 0.5,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        url = (rpc_url or "").strip()
        if not url:
            raise ValueError("rpc_url must be a non-empty string.")

        self.rpc_url = url
        self.timeout = timeout
        self.max_retries = max(1, int(max_retries))
        self.backoff_seconds = float(backoff_seconds)
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json", "Accept": "application/json"})
        if headers:
            self.session.headers.update(dict(headers))
        self._next_id = 1

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        if not isinstance(method, str) or not method.strip():
            raise ValueError("method must be a non-empty string.")
        if params is None:
            params = []
        if not isinstance(params, list):
            raise ValueError("params must be a list.")

        payload = {
            "jsonrpc": "2.0",
            "id": self._next_id,
            "method": method,
            "params": params,
        }
        self._next_id += 1

        for attempt in range(1, self.max_retries + 1):
            logger.debug("POST %s %s id=%s attempt=%d", self.rpc_url, method, payload["id"], attempt)
            try:
                response = self.session.post(
                    self.rpc_url,
                    json=payload,
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                if attempt < self.max_retries:
                    logger.warning("%s failed (%s); retrying (%d/%d)", method, exc, attempt, self.max_retries)
                    time.sleep(self.backoff_seconds * attempt)
                    continue
                raise TransportError(f"RPC request failed: {exc}") from exc

            if response.status_code == 429 or response.status_code >= 500:
                if attempt < self.max_retries:
                    logger.warning(
                        "%s returned HTTP %d; retrying (%d/%d)",
                        method,
                        response.status_code,
                        attempt,
                        self.max_retries,
                    )
                    time.sleep(self.backoff_seconds * attempt)
                    continue

            return self._parse_response(response)

        raise TransportError("RPC request failed without a response.")

    def eth_call(self, to: str, data: str, block_tag: str = "latest") -> str:
        result = self.call("eth_call", [{"to": to, "data": data}, block_tag])
        if not isinstance(result, str) or not result.startswith("0x"):
            raise TransportError("RPC error: eth_call returned unexpected result.", details={"result": result})
        return result

    def _parse_response(self, response: requests.Response) -> Any:
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"RPC endpoint returned HTTP {response.status_code}.",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError("RPC response is not valid JSON.", status_code=response.status_code) from exc
        if not isinstance(data, dict):
            raise TransportError("Unexpected JSON-RPC response (non-object).")

        error_obj = data.get("error")
        if isinstance(error_obj, dict):
            code = error_obj.get("code")
            message = error_obj.get("message")
            err_data = error_obj.get("data")
            parts: List[str] = []
            if code is not None:
                parts.append(f"code {code}")
            if message:
                parts.append(str(message))
            if err_data:
                parts.append(str(err_data))
            detail = ": ".join(parts) if parts else "unknown error"
            raise TransportError(
                f"RPC error: {detail}.",
                status_code=response.status_code,
                rpc_code=code if isinstance(code, int) else None,
            )

        if "result" not in data:
            raise TransportError("Unexpected JSON-RPC response (missing result).")
        return data.get("result")
