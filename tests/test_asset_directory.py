"""Tests for the verified asset directory client."""

import httpx
import pytest

from algolink.contracts.assets import VerificationTier
from algolink.services.asset_directory import AssetDirectoryClient, filter_verified

CATALOG_URL = "https://directory.test/verified-assets/"


def make_client(handler) -> AssetDirectoryClient:
    transport = httpx.MockTransport(handler)
    return AssetDirectoryClient(url=CATALOG_URL, client=httpx.AsyncClient(transport=transport))


def catalog_entry(asset_id: int, tier: str, **extra) -> dict:
    return {"asset_id": asset_id, "name": f"Asset {asset_id}", "verification_tier": tier, **extra}


MIXED_CATALOG = [
    catalog_entry(1, "trusted"),
    catalog_entry(2, "suspicious"),
    catalog_entry(3, "verified"),
    catalog_entry(4, "unverified"),
    catalog_entry(5, "verified"),
    catalog_entry(6, "trusted"),
]


class TestFilterVerified:
    """Tests for tier filtering."""

    def test_keeps_only_trusted_and_verified_in_order(self):
        assets = filter_verified(MIXED_CATALOG)

        assert [a.asset_id for a in assets] == [1, 3, 5, 6]
        assert all(
            a.verification_tier in (VerificationTier.TRUSTED, VerificationTier.VERIFIED)
            for a in assets
        )

    def test_drops_entries_without_tier(self):
        entries = [{"asset_id": 7, "name": "No tier"}, catalog_entry(8, "mystery"), None]

        assert filter_verified(entries) == []

    def test_drops_malformed_verified_entries(self):
        entries = [{"verification_tier": "verified", "name": "No id"}, catalog_entry(9, "verified")]

        assert [a.asset_id for a in filter_verified(entries)] == [9]

    def test_accepts_camel_case_unit_name(self):
        assets = filter_verified([catalog_entry(10, "trusted", unitName="USDC")])

        assert assets[0].unit_name == "USDC"
        assert assets[0].display_name == "Asset 10 (USDC)"


class TestAssetDirectoryClient:
    """Tests for fetching the catalog."""

    @pytest.mark.asyncio
    async def test_fetch_verified_success(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"results": MIXED_CATALOG})

        async with make_client(handler) as client:
            assets = await client.fetch_verified()

        assert [a.asset_id for a in assets] == [1, 3, 5, 6]
        assert client.last_error is None
        assert requests[0].method == "GET"
        assert requests[0].headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_empty_because_none_verified(self):
        def handler(request):
            return httpx.Response(200, json={"results": [catalog_entry(1, "suspicious")]})

        client = make_client(handler)
        result = await client.fetch_result()

        assert result.assets == []
        assert result.ok is True
        assert client.last_error is None

    @pytest.mark.asyncio
    async def test_non_2xx_degrades_to_empty_with_error(self):
        def handler(request):
            return httpx.Response(503, json={"detail": "down"})

        client = make_client(handler)
        assets = await client.fetch_verified()

        assert assets == []
        assert "503" in client.last_error

    @pytest.mark.asyncio
    async def test_missing_results_is_failure(self):
        def handler(request):
            return httpx.Response(200, json={"assets": []})

        client = make_client(handler)
        result = await client.fetch_result()

        assert result.assets == []
        assert result.ok is False
        assert client.last_error is not None

    @pytest.mark.asyncio
    async def test_malformed_json_is_failure(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>not json</html>")

        client = make_client(handler)

        assert await client.fetch_verified() == []
        assert client.last_error is not None

    @pytest.mark.asyncio
    async def test_transport_error_is_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        assert await client.fetch_verified() == []
        assert "connection refused" in client.last_error

    @pytest.mark.asyncio
    async def test_error_cleared_after_recovery(self):
        responses = [httpx.Response(500), httpx.Response(200, json={"results": MIXED_CATALOG})]

        def handler(request):
            return responses.pop(0)

        client = make_client(handler)
        await client.fetch_verified()
        assert client.last_error is not None

        assets = await client.fetch_verified()
        assert len(assets) == 4
        assert client.last_error is None
