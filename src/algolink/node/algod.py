"""algod REST client.

Talks to the public algod v2 API over httpx.
"""

import logging
from typing import Optional

import httpx

from algolink.contracts.transactions import SuggestedParams
from algolink.node.base import NodeClient, NodeError

logger = logging.getLogger(__name__)


class AlgodClient(NodeClient):
    """Node client for an algod REST endpoint."""

    def __init__(
        self,
        endpoint: str,
        token: str = "",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(endpoint.rstrip("/"))
        self.token = token
        self.timeout = timeout
        self._http_client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            headers = {"X-Algo-API-Token": self.token} if self.token else {}
            self._http_client = httpx.AsyncClient(timeout=self.timeout, headers=headers)
        return self._http_client

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        client = await self._get_client()
        url = f"{self.endpoint}{path}"

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"algod request failed: {method} {path}: {e}")
            raise NodeError(f"Node unreachable: {e}") from e

        if response.status_code != 200:
            message = self._error_message(response)
            logger.warning(f"algod {method} {path} returned {response.status_code}: {message}")
            raise NodeError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise NodeError(f"Invalid node response: {e}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return f"HTTP {response.status_code}"

    async def get_suggested_params(self) -> SuggestedParams:
        data = await self._request("GET", "/v2/transactions/params")
        try:
            return SuggestedParams.from_node(data)
        except (KeyError, TypeError, ValueError) as e:
            raise NodeError(f"Malformed transaction params: {e}") from e

    async def send_raw_transaction(self, raw: bytes) -> str:
        data = await self._request(
            "POST",
            "/v2/transactions",
            content=raw,
            headers={"Content-Type": "application/x-binary"},
        )
        tx_id = data.get("txId")
        if not tx_id:
            raise NodeError("Node accepted submission without a transaction ID")
        return tx_id

    async def pending_transaction_info(self, tx_id: str) -> dict:
        return await self._request("GET", f"/v2/transactions/pending/{tx_id}")

    async def status(self) -> dict:
        return await self._request("GET", "/v2/status")

    async def status_after_block(self, round_number: int) -> dict:
        return await self._request("GET", f"/v2/status/wait-for-block-after/{round_number}")

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
