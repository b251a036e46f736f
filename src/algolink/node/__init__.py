"""Node RPC boundary.

- NodeClient: interface the lifecycle engine depends on
- AlgodClient: httpx implementation for algod REST v2
"""

from algolink.node.algod import AlgodClient
from algolink.node.base import NodeClient, NodeError
from algolink.node.factory import close_node_clients, get_node_client

__all__ = [
    "AlgodClient",
    "NodeClient",
    "NodeError",
    "close_node_clients",
    "get_node_client",
]
