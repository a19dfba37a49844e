"""
Configuration for the HMPI engine.

Environment-based configuration using Pydantic Settings. Variables are
prefixed with HMPI_ (e.g. HMPI_DEFAULT_STANDARD=BIS) and may live in a .env
file. Settings only provide defaults; engine functions take their inputs
as arguments.
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hmpi.classifier import DEFAULT_BANDS, RiskThresholds
from hmpi.standards import LimitTable, get_standard, load_standard_file


class Settings(BaseSettings):
    """Engine defaults loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HMPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_standard: str = Field(default="WHO", description="Built-in standard used when none is given")
    standards_file: Optional[Path] = Field(default=None, description="JSON standards file overriding the built-in one")
    weight_constant: float = Field(default=1.0, gt=0, description="K in W_i = K / S_i")
    risk_bands: List[Tuple[float, str]] = Field(
        default_factory=lambda: list(DEFAULT_BANDS),
        description="(lower_bound, label) pairs, JSON in the environment",
    )
    log_level: str = "INFO"

    def thresholds(self) -> RiskThresholds:
        return RiskThresholds(self.risk_bands)

    def limit_table(self) -> LimitTable:
        if self.standards_file is not None:
            return load_standard_file(self.standards_file)
        return get_standard(self.default_standard)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
