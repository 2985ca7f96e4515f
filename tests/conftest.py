from typing import Any, Dict, List, Optional, Tuple

import pytest


def word(value: int) -> str:
    return format(value, "064x")


def padded_utf8(text: str) -> str:
    data = text.encode("utf-8").hex()
    if len(data) % 64:
        data += "0" * (64 - len(data) % 64)
    return data


def abi_string(text: str) -> str:
    """Return data of a function returning a single ``string``."""
    return "0x" + word(0x20) + word(len(text.encode("utf-8"))) + padded_utf8(text)


class FakeRpcClient:
    """Stands in for RpcClient; answers eth_call from a selector -> result map."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self.responses = responses or {}
        self.calls: List[Tuple[str, str, str]] = []

    def eth_call(self, to: str, data: str, block_tag: str = "latest") -> str:
        self.calls.append((to, data, block_tag))
        for key in (data, data[:10]):
            if key in self.responses:
                value = self.responses[key]
                if isinstance(value, Exception):
                    raise value
                return value
        return "0x"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "RPC_URL",
        "BLOCK_TAG",
        "REQUEST_TIMEOUT",
        "REQUEST_RETRIES",
        "REQUEST_BACKOFF_SECONDS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
