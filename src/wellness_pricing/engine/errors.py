"""
Typed failures raised by the pricing engine.

Every failure carries the offending field and the constraint it broke so the
calling layer can decide how to present it.
"""
from typing import Any, Optional


class PricingError(Exception):
    """Base class for every engine failure."""

    code = "PricingError"

    def __init__(self, message: str, field: Optional[str] = None,
                 constraint: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.constraint = constraint
        self.value = value

    def to_dict(self) -> dict:
        """Serializable form for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "field": self.field,
            "constraint": self.constraint,
        }


class ValidationError(PricingError, ValueError):
    """Input rejected before any computation happened."""

    code = "ValidationError"


class InvalidServiceType(ValidationError):
    code = "InvalidServiceType"


class InvalidDuration(ValidationError):
    code = "InvalidDuration"


class InvalidAppointmentTime(ValidationError):
    code = "InvalidAppointmentTime"


class InvalidProfessionalCount(ValidationError):
    code = "InvalidProfessionalCount"


class InvalidRate(ValidationError):
    code = "InvalidRate"


class InvalidRetouchingCost(ValidationError):
    code = "InvalidRetouchingCost"


class InvalidDiscount(ValidationError):
    code = "InvalidDiscount"


class InvalidAppointmentCount(ValidationError):
    code = "InvalidAppointmentCount"


class InvalidEventsPerYear(ValidationError):
    code = "InvalidEventsPerYear"


class EmptyConfigurationList(ValidationError):
    code = "EmptyConfigurationList"


class DivisionByZero(PricingError, ZeroDivisionError):
    """A margin was requested over a customer cost of exactly zero."""

    code = "DivisionByZero"
