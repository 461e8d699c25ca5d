"""Configuration system for tierkit using Pydantic Settings.

Configuration can be set via:
1. Environment variables (prefixed with TIERKIT_)
2. .env file
3. Direct instantiation
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Fixed constants of the rating model
ELO_SCALE = 400.0
PYRAMID_RATIO = 1.6
SEPARATION_SCALE = 50.0
DECAY_PERIOD_DAYS = 7.0

# Adaptive K thresholds on an item's prior comparison count
PROVISIONAL_COMPARISONS = 10
ESTABLISHED_COMPARISONS = 30


class EngineConfig(BaseSettings):
    """Main configuration for the rating and tier engine.

    All settings can be overridden via environment variables with
    the TIERKIT_ prefix (e.g., TIERKIT_K_FACTOR=24).
    """

    model_config = SettingsConfigDict(
        env_prefix="TIERKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ELO settings
    initial_rating: float = Field(
        default=1500.0,
        ge=0.0,
        le=4000.0,
        description="Rating assigned to items on first reference",
    )
    k_factor: float = Field(
        default=32.0,
        ge=1.0,
        le=100.0,
        description="Base K-factor for rating updates",
    )
    adaptive_k: bool = Field(
        default=True,
        description="Scale K by how many comparisons an item has already had",
    )

    # Decay settings
    decay_enabled: bool = Field(
        default=True,
        description="Down-weight comparisons by their age",
    )
    decay_factor: float = Field(
        default=0.95,
        gt=0.0,
        le=1.0,
        description="Weight multiplier applied per week of comparison age",
    )

    # Confidence settings
    min_comparisons: int = Field(
        default=3,
        ge=1,
        description="Comparisons needed before an item's rating is trusted",
    )
    low_confidence_threshold: int = Field(
        default=60,
        ge=0,
        le=100,
        description="Placements scoring below this are flagged as low confidence",
    )
    boundary_confidence_threshold: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Alternative-tier confidence at which an item counts as a boundary item",
    )

    # Tier settings
    default_tier_count: int = Field(
        default=5,
        ge=1,
        le=15,
        description="Tier count used when the caller does not ask for one",
    )

    @property
    def decay_active(self) -> bool:
        """Whether comparisons are actually down-weighted by age."""
        return self.decay_enabled and self.decay_factor < 1.0
