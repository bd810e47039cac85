"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (TRACKSIDE_ prefix)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TRACKSIDE_",
        extra="ignore",
    )

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Ticket pricing (dollars per combination)
    exacta_unit: float = 2.0
    trifecta_unit: float = 1.0

    # Race type fallback: top-6 scores inside this band = wide open
    wide_open_score_band: float = 30.0

    # Value horse pool
    value_min_odds: float = 4.0
    value_min_rank: int = 5

    # Bot orchestration
    bot_timeout_seconds: float = 30.0

    def model_post_init(self, __context) -> None:
        """Keep unit stakes positive; a zero or negative unit means default."""
        if self.exacta_unit <= 0:
            object.__setattr__(self, "exacta_unit", 2.0)
        if self.trifecta_unit <= 0:
            object.__setattr__(self, "trifecta_unit", 1.0)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export for convenience
settings = get_settings()
