"""
Preset event configurations.

Static, read-only defaults used to pre-fill a CalculationInput. The engine
never consults these while calculating.
"""
import math
from dataclasses import dataclass, replace
from typing import Optional

from .models import CalculationInput
from .service_types import ServiceTypeRef, service_type_name

EVENT_SIZES = ('small', 'medium', 'large')


@dataclass(frozen=True)
class PresetConfiguration:
    """Named bundle of input defaults for a (service type, size) pair."""
    name: str
    service_type: str
    size: str
    total_hours: float
    appointment_minutes: float
    num_professionals: int
    professional_hourly_rate: float
    description: str
    customer_hourly_rate: Optional[float] = None
    early_arrival_fee: float = 0.0
    retouching_cost_per_appointment: Optional[float] = None

    @property
    def expected_appointments(self) -> int:
        """Appointment count the description promises."""
        per_pro = math.floor(60 / self.appointment_minutes)
        return int(per_pro * self.num_professionals * self.total_hours)

    def to_input(self, **overrides) -> CalculationInput:
        """Build a CalculationInput from this preset, with field overrides."""
        extra = {}
        # Unset retouching cost falls back to the configured default
        if self.retouching_cost_per_appointment is not None:
            extra['retouching_cost_per_appointment'] = self.retouching_cost_per_appointment
        params = CalculationInput(
            service_type=self.service_type,
            total_hours=self.total_hours,
            appointment_minutes=self.appointment_minutes,
            num_professionals=self.num_professionals,
            professional_hourly_rate=self.professional_hourly_rate,
            customer_hourly_rate=self.customer_hourly_rate,
            early_arrival_fee=self.early_arrival_fee,
            **extra,
        )
        return replace(params, **overrides) if overrides else params


def _standard(service_type, size, appts, hours, minutes, pros, early, per_hour):
    return PresetConfiguration(
        name=f"{size.capitalize()} Event ({appts} appointments)",
        service_type=service_type,
        size=size,
        total_hours=hours,
        appointment_minutes=minutes,
        num_professionals=pros,
        professional_hourly_rate=50,
        customer_hourly_rate=135,
        early_arrival_fee=early,
        description=f"{appts} appointments ({pros} pros × {hours} hours × {per_hour} appts/hour)",
    )


def _headshot(size, appts, hours, pros):
    return PresetConfiguration(
        name=f"{size.capitalize()} Event ({appts} appointments)",
        service_type='headshot',
        size=size,
        total_hours=hours,
        appointment_minutes=12,
        num_professionals=pros,
        professional_hourly_rate=400,
        retouching_cost_per_appointment=40,
        description=f"{appts} appointments ({pros} pros × {hours} hours × 5 appts/hour)",
    )


PRESET_CONFIGURATIONS: dict[str, dict[str, PresetConfiguration]] = {
    'massage/spa': {
        'small': _standard('massage/spa', 'small', 24, 4, 20, 2, 100, 3),
        'medium': _standard('massage/spa', 'medium', 36, 4, 20, 3, 200, 3),
        'large': _standard('massage/spa', 'large', 54, 6, 20, 3, 300, 3),
    },
    'hair/nails': {
        'small': _standard('hair/nails', 'small', 24, 6, 30, 2, 100, 2),
        'medium': _standard('hair/nails', 'medium', 32, 8, 30, 2, 200, 2),
        'large': _standard('hair/nails', 'large', 48, 8, 30, 3, 300, 2),
    },
    'headshot': {
        'small': _headshot('small', 30, 3, 2),
        'medium': _headshot('medium', 60, 4, 3),
        'large': _headshot('large', 90, 6, 3),
    },
}


def get_preset(service_type: ServiceTypeRef, size: str) -> Optional[PresetConfiguration]:
    """Look up a preset, or None when the type or size has none."""
    return PRESET_CONFIGURATIONS.get(service_type_name(service_type), {}).get(size)


def list_presets(service_type: ServiceTypeRef) -> list[PresetConfiguration]:
    """All presets for a service type, small to large."""
    by_size = PRESET_CONFIGURATIONS.get(service_type_name(service_type), {})
    return [by_size[s] for s in EVENT_SIZES if s in by_size]
