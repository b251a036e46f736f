"""Network registry for the two supported Algorand networks.

Provides read-only network metadata and endpoint resolution.
"""

from enum import Enum
from typing import Union

from pydantic import BaseModel, Field

from algolink.config import get_settings


class Network(str, Enum):
    """Selectable network."""
    MAINNET = "MainNet"
    TESTNET = "TestNet"

    @classmethod
    def parse(cls, value: Union["Network", str]) -> "Network":
        """Accept the enum, its value, or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        normalized = str(value).replace("-", "").replace("_", "").lower()
        for network in cls:
            if network.value.lower() == normalized:
                return network
        raise ValueError(f"Unsupported network: {value}")


class NetworkInfo(BaseModel):
    """Information about a supported network."""

    network: Network = Field(..., description="Network selector")
    name: str = Field(..., description="Display name")
    endpoint: str = Field(..., description="algod REST endpoint")
    genesis_id: str = Field(..., description="Genesis ID")
    explorer_url: str = Field(..., description="Block explorer URL")
    is_testnet: bool = Field(default=False, description="Whether this is a testnet")


_GENESIS_IDS = {
    Network.MAINNET: "mainnet-v1.0",
    Network.TESTNET: "testnet-v1.0",
}

_EXPLORERS = {
    Network.MAINNET: "https://allo.info",
    Network.TESTNET: "https://testnet.allo.info",
}


def resolve_endpoint(network: Union[Network, str]) -> str:
    """Resolve a network selector to its algod endpoint."""
    return get_settings().get_algod_url(Network.parse(network).name)


def get_network_info(network: Union[Network, str]) -> NetworkInfo:
    """Get metadata for a network."""
    network = Network.parse(network)
    return NetworkInfo(
        network=network,
        name="Algorand MainNet" if network == Network.MAINNET else "Algorand TestNet",
        endpoint=resolve_endpoint(network),
        genesis_id=_GENESIS_IDS[network],
        explorer_url=_EXPLORERS[network],
        is_testnet=network == Network.TESTNET,
    )


def explorer_tx_url(network: Union[Network, str], tx_id: str) -> str:
    """Explorer link for a transaction, for checking outcomes externally."""
    return f"{_EXPLORERS[Network.parse(network)]}/tx/{tx_id}"
