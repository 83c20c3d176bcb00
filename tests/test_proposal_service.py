"""
Shareable proposals: access codes, state round-trip, client edits.
"""
import re
import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from wellness_pricing.config.settings import Settings
from wellness_pricing.engine import PricingEngine, CalculationInput, get_preset
from wellness_pricing.engine.errors import InvalidDuration
from wellness_pricing.services.proposal_service import (
    InvalidAccessCode,
    InvalidCalculatorState,
    NonEditableField,
    ProposalNotFound,
    ProposalService,
    generate_access_code,
)


@pytest.fixture
def engine():
    return PricingEngine(settings=Settings())


@pytest.fixture
def service(engine):
    return ProposalService(engine)


@pytest.fixture
def state():
    return get_preset("massage/spa", "small").to_input().to_dict()


def test_access_code_format():
    for _ in range(50):
        assert re.fullmatch(r"[A-Z0-9]{6}", generate_access_code())
    assert len(generate_access_code(8)) == 8


def test_create_summarizes_state(service, state):
    proposal = service.create_proposal(state, {"name": "Acme"})

    assert re.fullmatch(r"[A-Z0-9]{6}", proposal.access_code)
    assert proposal.client_summary == {
        "total_hours": 4,
        "appts_per_pro_per_hour": 3,
        "appointments_per_hour": 6,
        "total_appointments": 24,
        "customer_total_cost": 1080,
    }
    assert proposal.client_info == {"name": "Acme"}
    assert not proposal.is_multi_day


def test_state_round_trips_through_calculate(service, engine, state):
    proposal = service.create_proposal(state)
    fetched = service.get_proposal(proposal.proposal_id, proposal.access_code)

    assert fetched.calculator_state == state
    restored = CalculationInput.from_dict(fetched.calculator_state)
    assert engine.calculate(restored) == engine.calculate(CalculationInput.from_dict(state))


def test_stored_state_is_a_copy(service, state):
    proposal = service.create_proposal(state)
    state["total_hours"] = 99
    assert proposal.calculator_state["total_hours"] == 4


def test_get_requires_exact_code(service, state):
    proposal = service.create_proposal(state)

    for bad in ("", "not-a-code", proposal.access_code + "0", None):
        with pytest.raises(InvalidAccessCode):
            service.get_proposal(proposal.proposal_id, bad)


def test_get_unknown_proposal(service):
    with pytest.raises(ProposalNotFound):
        service.get_proposal("missing", "ABC123")


def test_views_are_counted(service, state):
    proposal = service.create_proposal(state)
    service.get_proposal(proposal.proposal_id, proposal.access_code)
    fetched = service.get_proposal(proposal.proposal_id, proposal.access_code)

    assert fetched.view_count == 2
    assert fetched.last_viewed is not None


def test_update_editable_field_recalculates(service, state):
    proposal = service.create_proposal(state)
    updated = service.update_proposal(proposal.proposal_id, proposal.access_code, {"total_hours": 6})

    assert updated.calculator_state["total_hours"] == 6
    assert updated.client_summary["total_appointments"] == 36
    assert updated.client_summary["customer_total_cost"] == 1620
    assert updated.last_updated is not None


def test_update_rejects_non_editable_fields(service, state):
    proposal = service.create_proposal(state)
    with pytest.raises(NonEditableField, match="customer_hourly_rate"):
        service.update_proposal(proposal.proposal_id, proposal.access_code, {"customer_hourly_rate": 1})


def test_failed_update_leaves_proposal_unchanged(service, state):
    proposal = service.create_proposal(state)
    with pytest.raises(InvalidDuration):
        service.update_proposal(proposal.proposal_id, proposal.access_code, {"total_hours": 0})

    assert proposal.calculator_state == state
    assert proposal.client_summary["customer_total_cost"] == 1080


def test_update_requires_access_code(service, state):
    proposal = service.create_proposal(state)
    with pytest.raises(InvalidAccessCode):
        service.update_proposal(proposal.proposal_id, "WRONG!", {"total_hours": 6})


def test_multi_day_proposal(service):
    state = {
        "days": [
            get_preset("massage/spa", "small").to_input(location="HQ").to_dict(),
            get_preset("headshot", "small").to_input(location="Annex").to_dict(),
        ],
        "events_per_year": 4,
    }
    proposal = service.create_proposal(state)

    assert proposal.is_multi_day
    assert proposal.client_summary["days"] == 2
    assert proposal.client_summary["total_appointments"] == 54
    assert proposal.client_summary["customer_total_cost"] == 1080 + 3000
    assert proposal.client_summary["annualized_cost"] == 4080 * 4

    updated = service.update_proposal(proposal.proposal_id, proposal.access_code, {"num_professionals": 3})
    assert all(day["num_professionals"] == 3 for day in updated.calculator_state["days"])


def test_delete_proposal(service, state):
    proposal = service.create_proposal(state)
    assert service.delete_proposal(proposal.proposal_id, proposal.access_code)
    with pytest.raises(ProposalNotFound):
        service.get_proposal(proposal.proposal_id, proposal.access_code)


@pytest.mark.parametrize("bad_state", [
    ["not", "a", "dict"],
    {"days": ["x"]},
    {"days": "x"},
    {"days": 5},
])
def test_create_rejects_malformed_state(service, bad_state):
    with pytest.raises(InvalidCalculatorState):
        service.create_proposal(bad_state)


def test_multi_day_events_per_year_defaults_to_settings(state):
    service = ProposalService(PricingEngine(settings=Settings(default_events_per_year=4)))
    proposal = service.create_proposal({"days": [state]})

    assert proposal.client_summary["annualized_cost"] == 4320
