"""
Application Settings for Scribe Match

Centralized configuration using Pydantic Settings with .env support.
All environment variables are validated at startup.
"""

from functools import lru_cache
from typing import Dict
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Matching knobs (weights, timeouts, refresh cadence) are all overridable,
    e.g. WEIGHT_LOCATION=0.3 or REFRESH_INTERVAL_SECONDS=60.
    """

    # Application Settings
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # CORS Configuration
    allowed_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    # Real-time re-evaluation
    refresh_interval_seconds: float = 30.0

    # Geography
    average_travel_speed_kmh: float = 30.0  # Urban average, not a routing ETA

    # Run hardening
    candidate_timeout_seconds: float = 5.0
    run_deadline_seconds: float = 20.0
    max_concurrent_evaluations: int = 10

    # Availability calendar
    next_slot_horizon_days: int = 30

    # Behaviour toggles
    enforce_eligibility: bool = True
    announce_results: bool = True

    # Base factor weights (normalized over applicable factors at scoring time)
    weight_location: float = 0.25
    weight_availability: float = 0.20
    weight_subject: float = 0.15
    weight_language: float = 0.15
    weight_experience: float = 0.10
    weight_rating: float = 0.10
    weight_preference: float = 0.05

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_matching_knobs(self) -> "Settings":
        """Reject settings that would make the engine stall or divide by zero."""
        if self.refresh_interval_seconds <= 0:
            raise ValueError("REFRESH_INTERVAL_SECONDS must be positive")

        if self.average_travel_speed_kmh <= 0:
            raise ValueError("AVERAGE_TRAVEL_SPEED_KMH must be positive")

        if self.candidate_timeout_seconds <= 0 or self.run_deadline_seconds <= 0:
            raise ValueError("Timeouts must be positive")

        if self.max_concurrent_evaluations < 1:
            raise ValueError("MAX_CONCURRENT_EVALUATIONS must be at least 1")

        weights = self.factor_weights
        if any(w < 0 for w in weights.values()):
            raise ValueError("Factor weights cannot be negative")
        if sum(weights.values()) == 0:
            raise ValueError("At least one factor weight must be positive")

        return self

    @property
    def factor_weights(self) -> Dict[str, float]:
        """Base weights keyed by factor name."""
        return {
            "location_match": self.weight_location,
            "availability_match": self.weight_availability,
            "subject_match": self.weight_subject,
            "language_match": self.weight_language,
            "experience_match": self.weight_experience,
            "rating_match": self.weight_rating,
            "preference_match": self.weight_preference,
        }

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience export for direct import
settings = get_settings()
