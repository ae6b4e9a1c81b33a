"""
Pricing Settings for the Vibe lending marketplace.

Bounds and adjustments used by the interest-rate calculator and the
rule-based risk fallback. Override via environment variables with the
PRICING_ prefix:
    PRICING_MIN_RATE=3
    PRICING_MAX_RATE=18
    PRICING_PLATFORM_FEE_PERCENTAGE=4.5

Usage:
    from src.service.pricing.settings import pricing_settings

    custom = PricingSettings(max_rate=15)
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingSettings(BaseSettings):
    """
    Configurable parameters for loan pricing.

    Rates and fees are annual percentages. Amounts are in rupees.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRICING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Rate Bounds ===
    min_rate: float = Field(
        default=3.0,
        ge=0.0,
        description="Lowest interest rate the calculator will quote",
    )
    max_rate: float = Field(
        default=18.0,
        gt=0.0,
        description="Highest interest rate the calculator will quote",
    )

    # === Platform Fee ===
    platform_fee_percentage: float = Field(
        default=4.5,
        ge=0.0,
        le=100.0,
        description="Share of principal retained by the platform on repayment",
    )

    # === AI Risk Bands (annual %) ===
    low_risk_band: tuple[float, float] = Field(
        default=(5.0, 7.0),
        description="Rate band for loans the AI rates low risk",
    )
    medium_risk_band: tuple[float, float] = Field(
        default=(7.0, 10.0),
        description="Rate band for loans the AI rates medium risk",
    )
    high_risk_band: tuple[float, float] = Field(
        default=(10.0, 15.0),
        description="Rate band for loans the AI rates high risk",
    )

    # === Rule-Based Risk Fallback ===
    risk_base_score: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Starting score before rule adjustments",
    )
    risk_low_threshold: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Scores at or above this are low risk",
    )
    risk_medium_threshold: int = Field(
        default=40,
        ge=0,
        le=100,
        description="Scores at or above this (and below low) are medium risk",
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "PricingSettings":
        if self.min_rate > self.max_rate:
            raise ValueError(
                f"min_rate ({self.min_rate}) > max_rate ({self.max_rate})"
            )
        if self.risk_medium_threshold > self.risk_low_threshold:
            raise ValueError("risk_medium_threshold must not exceed risk_low_threshold")
        for name in ("low_risk_band", "medium_risk_band", "high_risk_band"):
            low, high = getattr(self, name)
            if low > high:
                raise ValueError(f"{name} lower bound exceeds upper bound")
        return self


@lru_cache
def get_pricing_settings() -> PricingSettings:
    """Get cached pricing settings instance."""
    return PricingSettings()


pricing_settings = get_pricing_settings()
