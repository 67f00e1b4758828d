"""
Configuration settings for ProAMM

Loads environment variables and provides pool defaults / logging configuration.
"""
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from .constants import BPS
from .math.tick_math import get_tick_spacing_for_fee

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Application settings"""

    # Logging
    LOG_LEVEL: str = os.getenv("PRO_AMM_LOG_LEVEL", "WARNING").upper()
    LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    # Pool defaults (fee in bps, tick spacing follows the fee tier)
    DEFAULT_SWAP_FEE_BPS: int = int(os.getenv("PRO_AMM_DEFAULT_SWAP_FEE_BPS", 30))

    ENABLED_FEE_TIERS: List[int] = [
        int(fee) for fee in os.getenv("PRO_AMM_ENABLED_FEE_TIERS", "5,30,100").split(",")
        if fee.strip()
    ]

    def is_fee_enabled(self, fee_bps: int) -> bool:
        """Check whether a fee tier is enabled"""
        return fee_bps in self.ENABLED_FEE_TIERS


# Create global settings instance
settings = Settings()


def configure_logging(level: str = None) -> None:
    """Configure root logging for pool simulations"""
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format=settings.LOG_FORMAT,
    )


class PoolParams(BaseModel):
    """Pool creation parameters

    tick_spacing 을 생략하면 수수료 티어의 기본 틱 간격을 사용합니다.
    """
    token0: str = Field(..., description="First token address", min_length=1)
    token1: str = Field(..., description="Second token address", min_length=1)
    swap_fee_bps: int = Field(
        default=settings.DEFAULT_SWAP_FEE_BPS,
        description="Swap fee in basis points (1 = 0.01%)",
        gt=0,
        lt=BPS,
    )
    tick_spacing: Optional[int] = Field(
        default=None,
        description="Tick spacing (defaults to the fee tier's spacing)",
        ge=1,
        lt=16384,
    )

    @model_validator(mode="after")
    def check_pool_params(self):
        if self.token0.lower() == self.token1.lower():
            raise ValueError("token0 and token1 must be different")
        if not settings.is_fee_enabled(self.swap_fee_bps):
            raise ValueError(f"fee tier not enabled: {self.swap_fee_bps}bps")
        if self.tick_spacing is None:
            self.tick_spacing = get_tick_spacing_for_fee(self.swap_fee_bps)
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "token0": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
                "token1": "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
                "swap_fee_bps": 30,
                "tick_spacing": 60
            }
        }
