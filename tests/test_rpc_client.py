"""RpcClient tests with a mocked requests session."""

from unittest.mock import MagicMock

import pytest
import requests

from callcodec.errors import TransportError
from callcodec.rpc_client import RpcClient


def _response(status_code: int = 200, body=None, json_error: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def client(monkeypatch) -> RpcClient:
    monkeypatch.setattr("callcodec.rpc_client.time.sleep", lambda _: None)
    rpc = RpcClient("https://rpc.example", timeout=5, max_retries=3, backoff_seconds=0.01)
    rpc.session = MagicMock()
    return rpc


class TestRpcClient:
    def test_requires_url(self) -> None:
        with pytest.raises(ValueError):
            RpcClient("  ")

    def test_eth_call_envelope(self, client: RpcClient) -> None:
        client.session.post.return_value = _response(body={"jsonrpc": "2.0", "id": 1, "result": "0x" + "0" * 64})

        result = client.eth_call("0xabc", "0x06fdde03", "latest")

        assert result == "0x" + "0" * 64
        _, kwargs = client.session.post.call_args
        assert kwargs["json"] == {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "eth_call",
            "params": [{"to": "0xabc", "data": "0x06fdde03"}, "latest"],
        }
        assert kwargs["timeout"] == 5

    def test_request_ids_increment(self, client: RpcClient) -> None:
        client.session.post.return_value = _response(body={"result": "0x1"})

        client.call("eth_blockNumber")
        client.call("eth_blockNumber")

        ids = [c.kwargs["json"]["id"] for c in client.session.post.call_args_list]
        assert ids == [1, 2]

    def test_rpc_error_object(self, client: RpcClient) -> None:
        client.session.post.return_value = _response(
            body={"error": {"code": 3, "message": "execution reverted", "data": "0x"}}
        )

        with pytest.raises(TransportError, match="execution reverted") as exc_info:
            client.eth_call("0xabc", "0x")

        assert exc_info.value.rpc_code == 3
        assert client.session.post.call_count == 1

    def test_retries_server_errors_then_succeeds(self, client: RpcClient) -> None:
        client.session.post.side_effect = [
            _response(status_code=503),
            _response(status_code=429),
            _response(body={"result": "0x01"}),
        ]

        assert client.call("eth_call", []) == "0x01"
        assert client.session.post.call_count == 3

    def test_gives_up_after_max_retries(self, client: RpcClient) -> None:
        client.session.post.return_value = _response(status_code=502)

        with pytest.raises(TransportError) as exc_info:
            client.call("eth_call", [])

        assert exc_info.value.status_code == 502
        assert client.session.post.call_count == 3

    def test_client_error_not_retried(self, client: RpcClient) -> None:
        client.session.post.return_value = _response(status_code=401)

        with pytest.raises(TransportError):
            client.call("eth_call", [])
        assert client.session.post.call_count == 1

    def test_network_error_wrapped(self, client: RpcClient) -> None:
        client.session.post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(TransportError, match="refused"):
            client.call("eth_call", [])
        assert client.session.post.call_count == 3

    def test_invalid_json(self, client: RpcClient) -> None:
        client.session.post.return_value = _response(json_error=True)

        with pytest.raises(TransportError, match="not valid JSON"):
            client.call("eth_call", [])

    def test_missing_result(self, client: RpcClient) -> None:
        client.session.post.return_value = _response(body={"jsonrpc": "2.0", "id": 1})

        with pytest.raises(TransportError, match="missing result"):
            client.call("eth_call", [])

    def test_eth_call_rejects_non_hex_result(self, client: RpcClient) -> None:
        client.session.post.return_value = _response(body={"result": None})

        with pytest.raises(TransportError):
            client.eth_call("0xabc", "0x")

    def test_params_must_be_list(self, client: RpcClient) -> None:
        with pytest.raises(ValueError):
            client.call("eth_call", {"to": "0x"})
