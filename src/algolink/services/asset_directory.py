"""Verified asset directory client.

Reads the external verified-asset catalog. Directory outages never block
wallet or payment functionality: failures degrade to an empty list with
``last_error`` set.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from algolink.config import get_settings
from algolink.contracts.assets import (
    SURFACED_TIERS,
    AssetDirectoryResult,
    VerificationTier,
    VerifiedAsset,
)

logger = logging.getLogger(__name__)


class AssetDirectoryClient:
    """Client for the verified-asset catalog.

    Tier filtering happens here and only here: nothing outside
    trusted/verified is ever returned.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.url = url or settings.directory_url
        self.timeout = timeout or settings.http_timeout
        self._http_client = client
        self.last_error: Optional[str] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def fetch_verified(self) -> list[VerifiedAsset]:
        """Fetch trusted and verified assets.

        Returns:
            Filtered assets in catalog order, or [] on failure
            (check ``last_error`` to tell the two apart)
        """
        result = await self.fetch_result()
        return result.assets

    async def fetch_result(self) -> AssetDirectoryResult:
        """Fetch the catalog and report failures explicitly."""
        try:
            data = await self._fetch()
        except Exception as e:
            logger.warning(f"Error fetching verified assets: {e}")
            self.last_error = str(e)
            return AssetDirectoryResult(error=self.last_error)

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            logger.warning("Invalid verified assets response: missing results list")
            self.last_error = "Invalid response format: missing results list"
            return AssetDirectoryResult(error=self.last_error)

        self.last_error = None
        assets = filter_verified(results)
        logger.info(f"Loaded {len(assets)} verified assets ({len(results)} in catalog)")
        return AssetDirectoryResult(assets=assets)

    async def _fetch(self):
        client = await self._get_client()
        response = await client.get(self.url, headers={"Accept": "application/json"})
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "AssetDirectoryClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False


def filter_verified(entries: list) -> list[VerifiedAsset]:
    """Keep trusted/verified entries, preserving order.

    Entries with an unknown tier or that fail validation are dropped.
    """
    assets = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            tier = VerificationTier(entry.get("verification_tier"))
        except ValueError:
            continue
        if tier not in SURFACED_TIERS:
            continue
        try:
            assets.append(VerifiedAsset.model_validate(entry))
        except ValidationError as e:
            logger.debug(f"Skipping malformed catalog entry: {e}")
    return assets
