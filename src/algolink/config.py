"""Application configuration using pydantic-settings.

Node endpoints, the verified-asset directory and the fixed donation
constants can all be overridden from the environment (``ALGOLINK_*``).
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ALGOLINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Node (algod) Endpoints
    # ======================
    algod_mainnet_url: str = Field(
        default="https://mainnet-api.algonode.cloud", description="MainNet algod URL"
    )
    algod_testnet_url: str = Field(
        default="https://testnet-api.algonode.cloud", description="TestNet algod URL"
    )
    algod_token: str = Field(default="", description="algod API token (empty for public nodes)")
    default_network: str = Field(default="TestNet", description="Network selected at startup")
    http_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")

    # ======================
    # Verified Asset Directory
    # ======================
    directory_url: str = Field(
        default="https://mainnet.api.perawallet.app/v1/public/verified-assets/",
        description="Verified-asset catalog URL",
    )

    # ======================
    # Transactions
    # ======================
    donation_receiver: str = Field(
        default="Y4532MAF7R46EHON24GMDKPZAD4RK7B3QYQ22KXAVZMPXYL7YF475E2CIU",
        description="Receiver of the donation payment",
    )
    donation_amount: int = Field(
        default=1_000_000, description="Donation amount in microalgos (1 ALGO)"
    )
    confirmation_rounds: int = Field(
        default=4, description="Rounds to wait for confirmation before timing out"
    )
    status_display_window: float = Field(
        default=3.0, description="Seconds a terminal status stays visible before reset"
    )

    def get_algod_url(self, network: str) -> str:
        """Get algod URL for a network name (MainNet/TestNet)."""
        url_map = {
            "MAINNET": self.algod_mainnet_url,
            "TESTNET": self.algod_testnet_url,
        }
        return url_map.get(network.upper(), "")

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "default_network": self.default_network,
            "algod": {
                "MainNet": self.algod_mainnet_url,
                "TestNet": self.algod_testnet_url,
                "token": "***" if self.algod_token else "(not set)",
            },
            "directory_url": self.directory_url,
            "transactions": {
                "donation_receiver": self.donation_receiver,
                "donation_amount": self.donation_amount,
                "confirmation_rounds": self.confirmation_rounds,
                "status_display_window": self.status_display_window,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
