"""
Pydantic request/response models shared by the API routers.
"""
from pydantic import BaseModel, Field
from typing import Optional

from ..config.settings import get_settings
from ..engine import CalculationInput


class CalculationRequest(BaseModel):
    """Request model for a single event/day/location."""
    service_type: str
    total_hours: float
    appointment_minutes: float
    num_professionals: int
    professional_hourly_rate: float
    customer_hourly_rate: Optional[float] = None
    early_arrival_fee: float = 0.0
    retouching_cost_per_appointment: float = Field(
        default_factory=lambda: get_settings().default_retouching_cost)
    discount_percent: float = 0.0
    explicit_appointment_count: Optional[int] = None
    events_per_year: int = Field(default_factory=lambda: get_settings().default_events_per_year)
    day: Optional[str] = None
    location: Optional[str] = None

    def to_input(self) -> CalculationInput:
        return CalculationInput(**self.model_dump())


class MultiCalculationRequest(BaseModel):
    """Request model for a multi-day / multi-location calculation."""
    configurations: list[CalculationRequest]
    events_per_year: int = Field(default_factory=lambda: get_settings().default_events_per_year)


class ServiceTypeCreate(BaseModel):
    """Request model for registering a custom service type."""
    name: str
    margin: Optional[float] = None
    requires_retouching: bool = False


class HistoryCreate(BaseModel):
    """Request model for saving a calculation."""
    input: CalculationRequest
    client_name: Optional[str] = None


class ProposalCreate(BaseModel):
    """Request model for sharing a calculator state."""
    calculator_state: dict
    client_info: dict = Field(default_factory=dict)


class ProposalUpdate(BaseModel):
    """Request model for client edits to a proposal."""
    access_code: str
    updates: dict


class ProposalResponse(BaseModel):
    """Response model for a proposal."""
    proposal_id: str
    calculator_state: dict
    client_summary: dict
    client_info: dict
    created_at: str
    view_count: int
    last_viewed: Optional[str]
    last_updated: Optional[str]
    editable_fields: list[str]
    is_multi_day: bool


class ProposalCreated(BaseModel):
    """Response model returned once, at creation, with the access code."""
    proposal_id: str
    access_code: str
    client_summary: dict
