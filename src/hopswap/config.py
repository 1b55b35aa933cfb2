"""Application configuration using pydantic-settings.

The signing key and router address are required; constructing ``Settings``
without them fails before any network call is made.
"""

import logging
from functools import lru_cache

from eth_utils import is_address, is_hex, to_checksum_address
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hopswap.sdk.base import Percent
from hopswap.sdk.pool import POOL_INIT_CODE_HASH, V3_FACTORY_ADDRESS


class Settings(BaseSettings):
    """Swap settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Signing
    # ======================
    private_key: str = Field(..., description="Hex private key used to sign both swap transactions")

    # ======================
    # Network
    # ======================
    rpc_url: str = Field(default="https://polygon-rpc.com", description="JSON-RPC endpoint")
    chain_id: int = Field(default=137, description="Chain id for token entities (137 = Polygon)")

    # ======================
    # Contracts
    # ======================
    swap_router_address: str = Field(..., description="Uniswap V3 SwapRouter address")
    quoter_address: str = Field(
        default="0xb27308f9F90D607463bb33eA1BeBb41C27CE5AB6", description="Uniswap V3 Quoter address"
    )
    pool_factory_address: str = Field(default=V3_FACTORY_ADDRESS, description="Uniswap V3 factory address")
    pool_init_code_hash: str = Field(default=POOL_INIT_CODE_HASH, description="Pool contract init code hash")

    # ======================
    # Swap parameters
    # ======================
    slippage_bips: int = Field(default=50, ge=0, le=10000, description="Slippage tolerance in bips (50 = 0.5%)")
    deadline_seconds: int = Field(default=60 * 20, gt=0, description="Transaction deadline from call time")
    gas_limit: int = Field(default=1_000_000, gt=0, description="Gas limit for each swap transaction")
    receipt_timeout: float = Field(default=120, gt=0, description="Seconds to wait for a receipt")
    receipt_poll_interval: float = Field(default=2, gt=0, description="Seconds between receipt polls")
    use_route_output: bool = Field(
        default=False,
        description="Price each leg over its own full route instead of the forward route's first pool",
    )

    # ======================
    # Environment
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    @field_validator("private_key")
    @classmethod
    def _check_private_key(cls, value: str) -> str:
        key = value.strip()
        if key.startswith("0x"):
            key = key[2:]
        if len(key) != 64 or not is_hex(key):
            raise ValueError("private_key must be 32 bytes of hex")
        return "0x" + key.lower()

    @field_validator("swap_router_address", "quoter_address", "pool_factory_address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        if not is_address(value.strip()):
            raise ValueError(f"Invalid address: {value}")
        return to_checksum_address(value.strip())

    @property
    def slippage_tolerance(self) -> Percent:
        """Slippage as a fraction of 10000 bips."""
        return Percent(self.slippage_bips, 10000)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "private_key": "***" if self.private_key else "(not set)",
            "rpc_url": self.rpc_url,
            "chain_id": self.chain_id,
            "swap_router_address": self.swap_router_address,
            "quoter_address": self.quoter_address,
            "slippage_bips": self.slippage_bips,
            "deadline_seconds": self.deadline_seconds,
            "gas_limit": self.gas_limit,
            "use_route_output": self.use_route_output,
            "debug": self.debug,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings.

    Called once by the application at startup; library modules only create
    their own loggers.
    """
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
