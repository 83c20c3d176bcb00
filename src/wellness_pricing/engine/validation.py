"""
Input validation for the pricing engine.

Rules run in a fixed order and the first failure wins. Values are never
clamped or coerced; anything out of range is rejected with a typed error.
"""
import math
from typing import Optional

from ..config.settings import Settings
from .errors import (
    InvalidAppointmentCount,
    InvalidAppointmentTime,
    InvalidDiscount,
    InvalidDuration,
    InvalidEventsPerYear,
    InvalidProfessionalCount,
    InvalidRate,
    InvalidRetouchingCost,
)
from .models import CalculationInput
from .service_types import ServiceType, ServiceTypeRegistry


def is_finite_number(value) -> bool:
    """True for real, finite numbers (bools excluded)."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def is_positive_int(value) -> bool:
    """True for integers > 0 (bools excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_events_per_year(value, field: str = "events_per_year"):
    if not is_positive_int(value):
        raise InvalidEventsPerYear(
            f"Events per year must be a positive integer, got {value!r}",
            field=field, constraint="positive integer", value=value,
        )


def validate_input(
    params: CalculationInput,
    registry: ServiceTypeRegistry,
    settings: Optional[Settings] = None,
) -> ServiceType:
    """
    Validate a calculation input.

    Returns the resolved ServiceType so callers do not resolve twice.
    Raises a ValidationError subclass naming the offending field.
    """
    # 1. Service type
    service_type = registry.resolve(params.service_type)

    # 2. Duration
    if not is_finite_number(params.total_hours) or params.total_hours <= 0:
        raise InvalidDuration(
            "Total hours must be a positive number",
            field="total_hours", constraint="> 0", value=params.total_hours,
        )

    # 3. Appointment length, optionally inside the configured window
    minutes = params.appointment_minutes
    if not is_finite_number(minutes) or minutes <= 0:
        raise InvalidAppointmentTime(
            "Appointment time must be a positive number",
            field="appointment_minutes", constraint="> 0", value=minutes,
        )
    if settings is not None:
        low, high = settings.min_appointment_minutes, settings.max_appointment_minutes
        if (low is not None and minutes < low) or (high is not None and minutes > high):
            raise InvalidAppointmentTime(
                f"Appointment time must be between {low} and {high} minutes",
                field="appointment_minutes", constraint=f"[{low}, {high}]", value=minutes,
            )

    # 4. Staff count
    if not is_positive_int(params.num_professionals):
        raise InvalidProfessionalCount(
            "Number of professionals must be a positive integer",
            field="num_professionals", constraint="positive integer",
            value=params.num_professionals,
        )

    # 5. Staff rate
    if not is_finite_number(params.professional_hourly_rate) or params.professional_hourly_rate <= 0:
        raise InvalidRate(
            "Professional hourly rate must be a positive number",
            field="professional_hourly_rate", constraint="> 0",
            value=params.professional_hourly_rate,
        )

    if not service_type.requires_retouching:
        # 6. Customer rate
        rate = params.customer_hourly_rate
        if not is_finite_number(rate) or rate <= 0:
            raise InvalidRate(
                "Hourly rate must be a positive number",
                field="customer_hourly_rate", constraint="> 0", value=rate,
            )
    else:
        # 7. Retouching surcharge
        cost = params.retouching_cost_per_appointment
        if not is_finite_number(cost) or cost < 0:
            raise InvalidRetouchingCost(
                "Retouching cost must be a non-negative number",
                field="retouching_cost_per_appointment", constraint=">= 0", value=cost,
            )

    # 8. Early-arrival fee (ignored on the retouching path)
    if not service_type.requires_retouching:
        fee = params.early_arrival_fee
        if not is_finite_number(fee) or fee < 0:
            raise InvalidRate(
                "Early arrival fee must be a non-negative number",
                field="early_arrival_fee", constraint=">= 0", value=fee,
            )

    # 9. Discount
    discount = params.discount_percent
    if not is_finite_number(discount) or not 0 <= discount <= 100:
        raise InvalidDiscount(
            "Discount percent must be between 0 and 100",
            field="discount_percent", constraint="[0, 100]", value=discount,
        )

    # 10. Explicit appointment count
    count = params.explicit_appointment_count
    if count is not None and not is_positive_int(count):
        raise InvalidAppointmentCount(
            "Appointment count must be a positive integer",
            field="explicit_appointment_count", constraint="positive integer", value=count,
        )

    # 11. Annualization factor
    validate_events_per_year(params.events_per_year)

    return service_type
