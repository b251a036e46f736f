"""Tests for network resolution and configuration."""

import pytest

from algolink.config import Settings, get_settings
from algolink.networks import Network, explorer_tx_url, get_network_info, resolve_endpoint

MAINNET_URL = "https://mainnet-api.algonode.cloud"
TESTNET_URL = "https://testnet-api.algonode.cloud"


class TestResolveEndpoint:
    """Tests for endpoint resolution."""

    @pytest.mark.parametrize("network", list(Network))
    def test_total_over_networks(self, network):
        """Every network resolves to one of the two fixed endpoints."""
        assert resolve_endpoint(network) in {MAINNET_URL, TESTNET_URL}

    def test_networks_map_to_distinct_endpoints(self):
        assert resolve_endpoint(Network.MAINNET) == MAINNET_URL
        assert resolve_endpoint(Network.TESTNET) == TESTNET_URL

    @pytest.mark.parametrize("value", ["MainNet", "mainnet", "MAINNET", "main-net"])
    def test_accepts_string_selectors(self, value):
        assert resolve_endpoint(value) == MAINNET_URL

    def test_rejects_unknown_network(self):
        with pytest.raises(ValueError):
            resolve_endpoint("BetaNet")

    def test_endpoint_override_from_environment(self, monkeypatch):
        monkeypatch.setenv("ALGOLINK_ALGOD_TESTNET_URL", "http://localhost:4001")
        get_settings.cache_clear()

        assert resolve_endpoint(Network.TESTNET) == "http://localhost:4001"


class TestNetworkInfo:
    """Tests for network metadata."""

    def test_testnet_info(self):
        info = get_network_info("TestNet")

        assert info.network == Network.TESTNET
        assert info.is_testnet is True
        assert info.genesis_id == "testnet-v1.0"
        assert info.endpoint == TESTNET_URL

    def test_explorer_link(self):
        assert explorer_tx_url(Network.MAINNET, "ABC") == "https://allo.info/tx/ABC"


class TestSettings:
    """Tests for settings defaults."""

    def test_protocol_constants(self):
        settings = Settings()

        assert settings.donation_amount == 1_000_000
        assert settings.confirmation_rounds == 4
        assert settings.status_display_window == 3.0
        assert settings.donation_receiver == (
            "Y4532MAF7R46EHON24GMDKPZAD4RK7B3QYQ22KXAVZMPXYL7YF475E2CIU"
        )

    def test_safe_dict_redacts_token(self):
        settings = Settings(algod_token="secret")
        data = settings.get_safe_dict()

        assert data["algod"]["token"] == "***"
        assert "secret" not in str(data)
