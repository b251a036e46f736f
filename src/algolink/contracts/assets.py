"""Verified asset contracts."""

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class VerificationTier(str, Enum):
    """Trust classification assigned by the asset directory."""
    TRUSTED = "trusted"
    VERIFIED = "verified"
    UNVERIFIED = "unverified"
    SUSPICIOUS = "suspicious"


# Only these tiers ever leave the directory client
SURFACED_TIERS = frozenset({VerificationTier.TRUSTED, VerificationTier.VERIFIED})


class VerifiedAsset(BaseModel):
    """An asset from the verified-asset catalog."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    asset_id: int = Field(..., description="Asset ID on the ledger")
    name: Optional[str] = Field(None, description="Asset name")
    unit_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("unit_name", "unitName"),
        description="Unit symbol",
    )
    verification_tier: VerificationTier = Field(..., description="Directory trust tier")
    logo: Optional[str] = Field(None, description="URL to asset logo")

    @property
    def display_name(self) -> str:
        """Name with unit symbol, as shown in asset pickers."""
        name = self.name or f"Asset #{self.asset_id}"
        if self.unit_name:
            return f"{name} ({self.unit_name})"
        return name


class AssetDirectoryResult(BaseModel):
    """Result of a directory fetch.

    ``error`` separates "no verified assets" (empty, no error) from
    "directory unavailable" (empty, error set).
    """

    assets: list[VerifiedAsset] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="Fetch failure, if any")

    @property
    def ok(self) -> bool:
        return self.error is None
