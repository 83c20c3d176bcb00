"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
"""
from dataclasses import dataclass, field, fields, asdict
from typing import Optional

import pandas as pd

from ..config.settings import get_settings
from .service_types import ServiceTypeRef, service_type_name


@dataclass
class TraceStep:
    """A single step in the calculation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class CalculationInput:
    """One event / day / location configuration."""
    service_type: ServiceTypeRef
    total_hours: float
    appointment_minutes: float
    num_professionals: int
    professional_hourly_rate: float
    customer_hourly_rate: Optional[float] = None
    early_arrival_fee: float = 0.0
    retouching_cost_per_appointment: float = field(
        default_factory=lambda: get_settings().default_retouching_cost)
    discount_percent: float = 0.0
    explicit_appointment_count: Optional[int] = None
    events_per_year: int = field(
        default_factory=lambda: get_settings().default_events_per_year)
    day: Optional[str] = None
    location: Optional[str] = None

    def to_dict(self) -> dict:
        """Plain dict with the service type flattened to its name."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data['service_type'] = service_type_name(self.service_type)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'CalculationInput':
        """Build an input from a dict, ignoring keys that are not input fields."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class CalculationResult:
    """Complete result of a single-event calculation."""
    appts_per_pro_per_hour: int
    appointments_per_hour: int
    total_appointments: int
    professional_revenue: float
    customer_total_cost: float
    net_profit: float
    profit_margin_percent: float
    annualized_cost: float
    service_type: str
    total_hours: float
    day: Optional[str] = None
    location: Optional[str] = None
    discount_percent: float = 0.0
    trace: list[TraceStep] = field(default_factory=list, compare=False, repr=False)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this result."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self, include_trace: bool = False) -> dict:
        """JSON-ready mapping of the result."""
        data = asdict(self)
        if not include_trace:
            data.pop('trace')
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'CalculationResult':
        """Rebuild a result saved with to_dict()."""
        trace = [TraceStep(**t) for t in data.get('trace', [])]
        known = {f.name for f in fields(cls)} - {'trace'}
        return cls(**{k: v for k, v in data.items() if k in known}, trace=trace)


@dataclass
class LocationTotals:
    """Running sums for one location label."""
    total_appointments: int = 0
    professional_revenue: float = 0.0
    customer_total_cost: float = 0.0
    net_profit: float = 0.0
    annualized_cost: float = 0.0
    profit_margin_percent: Optional[float] = None


@dataclass
class AggregateResult:
    """Totals across several day/location configurations."""
    events_per_year: int
    total_appointments: int = 0
    professional_revenue: float = 0.0
    customer_total_cost: float = 0.0
    net_profit: float = 0.0
    annualized_cost: float = 0.0
    profit_margin_percent: Optional[float] = None
    day_results: list[CalculationResult] = field(default_factory=list)
    location_results: dict[str, LocationTotals] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """JSON-ready mapping of the aggregate."""
        data = asdict(self)
        for day in data['day_results']:
            day.pop('trace', None)
        return data

    def to_frame(self) -> pd.DataFrame:
        """One row per configuration, in input order."""
        return pd.DataFrame([
            {
                "Day": r.day,
                "Location": r.location,
                "Service": r.service_type,
                "Hours": r.total_hours,
                "Appointments": r.total_appointments,
                "Professional Revenue": r.professional_revenue,
                "Customer Cost": r.customer_total_cost,
                "Net Profit": r.net_profit,
                "Margin %": r.profit_margin_percent,
            }
            for r in self.day_results
        ])

    def location_frame(self) -> pd.DataFrame:
        """One row per location label."""
        df = pd.DataFrame.from_dict(
            {loc: asdict(totals) for loc, totals in self.location_results.items()},
            orient="index",
        )
        df.index.name = "location"
        return df
