"""Node client factory.

Returns one cached client per endpoint.
"""

import logging

from algolink.config import get_settings
from algolink.node.base import NodeClient

logger = logging.getLogger(__name__)

_clients: dict[str, NodeClient] = {}


def get_node_client(endpoint: str) -> NodeClient:
    """Get the node client for an endpoint."""
    client = _clients.get(endpoint)
    if client is not None:
        return client

    from algolink.node.algod import AlgodClient

    settings = get_settings()
    logger.info(f"Initializing algod client for {endpoint}")
    client = AlgodClient(endpoint, token=settings.algod_token, timeout=settings.http_timeout)
    _clients[endpoint] = client
    return client


async def close_node_clients() -> None:
    """Close and forget all cached clients."""
    clients = list(_clients.values())
    _clients.clear()
    for client in clients:
        await client.close()


def reset_node_clients() -> None:
    """Forget cached clients without closing them (for testing)."""
    _clients.clear()
