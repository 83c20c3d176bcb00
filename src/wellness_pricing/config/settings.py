"""
Centralized settings for the pricing calculator.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


ENV_PREFIX = "WELLNESS_PRICING_"


def _env(name: str) -> Optional[str]:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _env_number(name: str, cast, default):
    raw = _env(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a {cast.__name__}, got {raw!r}")


@dataclass
class Settings:
    """Calculator settings with the defaults the calculator has always used."""

    # Decimal places kept at every rounding step
    precision: int = 2

    # Result cache expiry
    cache_ttl_seconds: float = 300.0

    # Input defaults
    default_events_per_year: int = 12
    default_retouching_cost: float = 40.0
    default_custom_margin: float = 25.0

    # Optional appointment-length window (None = unbounded)
    min_appointment_minutes: Optional[float] = None
    max_appointment_minutes: Optional[float] = None

    # Saved calculations
    history_path: Optional[Path] = None
    max_history_entries: int = 50

    # Proposal sharing
    access_code_length: int = 6

    @classmethod
    def load(cls) -> 'Settings':
        """Load settings, applying WELLNESS_PRICING_* environment overrides."""
        history = _env("HISTORY_PATH")
        return cls(
            precision=_env_number("PRECISION", int, 2),
            cache_ttl_seconds=_env_number("CACHE_TTL_SECONDS", float, 300.0),
            default_events_per_year=_env_number("EVENTS_PER_YEAR", int, 12),
            default_retouching_cost=_env_number("RETOUCHING_COST", float, 40.0),
            default_custom_margin=_env_number("CUSTOM_MARGIN", float, 25.0),
            min_appointment_minutes=_env_number("MIN_APPOINTMENT_MINUTES", float, None),
            max_appointment_minutes=_env_number("MAX_APPOINTMENT_MINUTES", float, None),
            history_path=Path(history) if history else None,
            max_history_entries=_env_number("MAX_HISTORY_ENTRIES", int, 50),
            access_code_length=_env_number("ACCESS_CODE_LENGTH", int, 6),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
