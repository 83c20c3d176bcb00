import pytest
import sys
import os
from pathlib import Path

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

import wellness_pricing.config.settings as settings_module
from wellness_pricing.config.settings import Settings
from wellness_pricing.engine import CalculationInput, get_preset


def test_defaults(monkeypatch):
    for key in list(os.environ):
        if key.startswith("WELLNESS_PRICING_"):
            monkeypatch.delenv(key)

    settings = Settings.load()
    assert settings.precision == 2
    assert settings.cache_ttl_seconds == 300
    assert settings.default_events_per_year == 12
    assert settings.min_appointment_minutes is None
    assert settings.history_path is None


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("WELLNESS_PRICING_CACHE_TTL_SECONDS", "60")
    monkeypatch.setenv("WELLNESS_PRICING_MAX_APPOINTMENT_MINUTES", "120")
    monkeypatch.setenv("WELLNESS_PRICING_HISTORY_PATH", str(tmp_path / "history.json"))

    settings = Settings.load()
    assert settings.cache_ttl_seconds == 60.0
    assert settings.max_appointment_minutes == 120.0
    assert settings.history_path == Path(tmp_path / "history.json")


def test_bad_override_names_the_variable(monkeypatch):
    monkeypatch.setenv("WELLNESS_PRICING_PRECISION", "two")
    with pytest.raises(ValueError, match="WELLNESS_PRICING_PRECISION"):
        Settings.load()


def test_input_defaults_follow_environment(monkeypatch):
    monkeypatch.setenv("WELLNESS_PRICING_RETOUCHING_COST", "0")
    monkeypatch.setenv("WELLNESS_PRICING_EVENTS_PER_YEAR", "4")
    monkeypatch.setattr(settings_module, "_settings", None)

    params = CalculationInput(
        service_type="headshot",
        total_hours=5,
        appointment_minutes=12,
        num_professionals=2,
        professional_hourly_rate=400,
    )
    assert params.retouching_cost_per_appointment == 0.0
    assert params.events_per_year == 4

    standard = get_preset("massage/spa", "small").to_input()
    assert standard.retouching_cost_per_appointment == 0.0
    assert standard.events_per_year == 4
