"""Pytest configuration and fixtures."""

import asyncio
import os
from typing import Optional

import pytest

# Set test environment
os.environ["ALGOLINK_ENVIRONMENT"] = "test"
os.environ["ALGOLINK_DEBUG"] = "true"

from algolink.config import get_settings
from algolink.contracts.transactions import SuggestedParams
from algolink.node.base import NodeClient, NodeError
from algolink.node.factory import reset_node_clients
from algolink.services.submission import SubmissionPipeline
from algolink.services.tracker import OperationTracker
from algolink.services.transaction_builder import TransactionBuilder
from algolink.signing.simulated import SimulatedWalletSession


def make_address(prefix: str) -> str:
    """Build a well-formed 58-character address from a base32 prefix."""
    return (prefix + "A" * 58)[:58]


SENDER = make_address("SENDER")
COUNTERPARTY = make_address("COUNTERPARTY")
GENESIS_HASH = "SGO1GKSzyE7IEPItTxCByw9x8FmnrCDexi9/cOUJOiI="


class FakeNodeClient(NodeClient):
    """In-memory node.

    ``confirm_after`` is the number of unconfirmed polls before the
    transaction shows up as confirmed (None = never confirms).
    """

    def __init__(
        self,
        endpoint: str = "https://node.test",
        tx_id: str = "ABC",
        confirm_after: Optional[int] = 0,
        reject_submission: Optional[str] = None,
        pool_error: str = "",
        last_round: int = 1000,
        params_delay: float = 0.0,
    ):
        super().__init__(endpoint)
        self.tx_id = tx_id
        self.confirm_after = confirm_after
        self.reject_submission = reject_submission
        self.pool_error = pool_error
        self.last_round = last_round
        self.params_delay = params_delay
        self.params_calls = 0
        self.sent: list[bytes] = []
        self.polls = 0

    async def get_suggested_params(self) -> SuggestedParams:
        self.params_calls += 1
        if self.params_delay:
            await asyncio.sleep(self.params_delay)
        return SuggestedParams(
            fee=0,
            min_fee=1000,
            first_valid=self.last_round,
            last_valid=self.last_round + 1000,
            genesis_id="testnet-v1.0",
            genesis_hash=GENESIS_HASH,
        )

    async def send_raw_transaction(self, raw: bytes) -> str:
        if self.reject_submission:
            raise NodeError(self.reject_submission, status_code=400)
        self.sent.append(raw)
        return self.tx_id

    async def pending_transaction_info(self, tx_id: str) -> dict:
        self.polls += 1
        if self.confirm_after is not None and self.polls > self.confirm_after:
            return {"confirmed-round": self.last_round + 1, "pool-error": ""}
        return {"pool-error": self.pool_error}

    async def status(self) -> dict:
        return {"last-round": self.last_round}

    async def status_after_block(self, round_number: int) -> dict:
        self.last_round = round_number + 1
        return {"last-round": self.last_round}


@pytest.fixture(autouse=True)
def reset_state():
    """Clear cached settings and node clients around each test."""
    get_settings.cache_clear()
    reset_node_clients()
    yield
    get_settings.cache_clear()
    reset_node_clients()


@pytest.fixture
def fake_node() -> FakeNodeClient:
    return FakeNodeClient()


@pytest.fixture
def node_factory(fake_node):
    endpoints = []

    def factory(endpoint: str) -> FakeNodeClient:
        endpoints.append(endpoint)
        return fake_node

    factory.endpoints = endpoints
    return factory


@pytest.fixture
def builder(node_factory) -> TransactionBuilder:
    return TransactionBuilder(node_factory=node_factory)


@pytest.fixture
def pipeline(node_factory) -> SubmissionPipeline:
    return SubmissionPipeline(node_factory=node_factory, max_rounds=4)


@pytest.fixture
def tracker() -> OperationTracker:
    """Tracker with a short display window."""
    return OperationTracker(display_window=0.05)


@pytest.fixture
def session() -> SimulatedWalletSession:
    return SimulatedWalletSession(accounts=[SENDER, COUNTERPARTY])
