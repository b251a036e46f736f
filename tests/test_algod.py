"""Tests for the algod REST client."""

import json

import httpx
import pytest

from algolink.node.algod import AlgodClient
from algolink.node.base import NodeError
from algolink.node.factory import get_node_client
from tests.conftest import GENESIS_HASH

ENDPOINT = "https://testnet-api.algonode.cloud"

PARAMS_RESPONSE = {
    "consensus-version": "https://github.com/algorandfoundation/specs/tree/v38",
    "fee": 0,
    "genesis-hash": GENESIS_HASH,
    "genesis-id": "testnet-v1.0",
    "last-round": 42000,
    "min-fee": 1000,
}


def make_client(handler, token: str = "") -> AlgodClient:
    transport = httpx.MockTransport(handler)
    return AlgodClient(ENDPOINT + "/", token=token, client=httpx.AsyncClient(transport=transport))


class TestAlgodClient:
    """Tests for algod REST calls."""

    @pytest.mark.asyncio
    async def test_suggested_params(self):
        def handler(request):
            assert request.url.path == "/v2/transactions/params"
            return httpx.Response(200, json=PARAMS_RESPONSE)

        params = await make_client(handler).get_suggested_params()

        assert params.first_valid == 42000
        assert params.last_valid == 43000
        assert params.genesis_id == "testnet-v1.0"

    @pytest.mark.asyncio
    async def test_malformed_params(self):
        def handler(request):
            return httpx.Response(200, json={"fee": 0})

        with pytest.raises(NodeError, match="Malformed"):
            await make_client(handler).get_suggested_params()

    @pytest.mark.asyncio
    async def test_send_raw_transaction(self):
        captured = {}

        def handler(request):
            captured["content"] = request.content
            captured["content_type"] = request.headers["Content-Type"]
            return httpx.Response(200, json={"txId": "ABC"})

        tx_id = await make_client(handler).send_raw_transaction(b"\x01\x02")

        assert tx_id == "ABC"
        assert captured == {"content": b"\x01\x02", "content_type": "application/x-binary"}

    @pytest.mark.asyncio
    async def test_rejection_carries_node_message(self):
        def handler(request):
            return httpx.Response(
                400, content=json.dumps({"message": "TransactionPool.Remember: overspend"})
            )

        with pytest.raises(NodeError, match="overspend") as exc_info:
            await make_client(handler).send_raw_transaction(b"\x01")

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(NodeError, match="unreachable"):
            await make_client(handler).status()

    @pytest.mark.asyncio
    async def test_pending_info_and_wait(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, json={"confirmed-round": 10, "last-round": 10})

        client = make_client(handler)
        await client.pending_transaction_info("ABC")
        await client.status_after_block(9)

        assert paths == ["/v2/transactions/pending/ABC", "/v2/status/wait-for-block-after/9"]


class TestNodeFactory:
    """Tests for the client cache."""

    def test_one_client_per_endpoint(self):
        first = get_node_client(ENDPOINT)

        assert get_node_client(ENDPOINT) is first
        assert get_node_client("https://mainnet-api.algonode.cloud") is not first
        assert isinstance(first, AlgodClient)
