"""
Proposal Service - shareable proposals gated by an access code.

A proposal stores a snapshot of the calculator state together with a short
random access code. Clients read it back with the code and may change a
small set of fields, which triggers a recalculation.
"""
import copy
import logging
import secrets
import string
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..engine import PricingEngine, CalculationInput

logger = logging.getLogger(__name__)

ACCESS_CODE_ALPHABET = string.ascii_uppercase + string.digits
EDITABLE_FIELDS = ('total_hours', 'num_professionals')


class ProposalNotFound(ValueError):
    """No proposal with the requested id."""


class InvalidAccessCode(ValueError):
    """Access code does not match the proposal."""


class NonEditableField(ValueError):
    """An update touched a field clients may not change."""


def generate_access_code(length: int = 6) -> str:
    """Random code of uppercase letters and digits."""
    return ''.join(secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(length))


class InvalidCalculatorState(ValueError):
    """A calculator snapshot does not have the single-event or multi-day shape."""


def is_multi_day(calculator_state: dict) -> bool:
    return 'days' in calculator_state


def check_state_shape(calculator_state) -> None:
    """Reject snapshots that are not input dicts (or a list of them under 'days')."""
    if not isinstance(calculator_state, dict):
        raise InvalidCalculatorState("Calculator state must be an object")
    if is_multi_day(calculator_state):
        days = calculator_state['days']
        if not isinstance(days, list) or not all(isinstance(day, dict) for day in days):
            raise InvalidCalculatorState("'days' must be a list of objects")


@dataclass
class Proposal:
    """A shared calculator snapshot."""
    proposal_id: str
    access_code: str
    calculator_state: dict
    client_summary: dict
    client_info: dict = field(default_factory=dict)
    created_at: str = ""
    view_count: int = 0
    last_viewed: Optional[str] = None
    last_updated: Optional[str] = None
    editable_fields: list[str] = field(default_factory=lambda: list(EDITABLE_FIELDS))
    is_multi_day: bool = False


class ProposalService:
    """In-memory proposal store backed by the pricing engine."""

    def __init__(self, engine: PricingEngine, access_code_length: int = 6):
        self.engine = engine
        self.access_code_length = access_code_length
        self._proposals: dict[str, Proposal] = {}
        self._lock = threading.Lock()

    def summarize(self, calculator_state: dict) -> dict:
        """
        Run a calculator state through the engine and return the client summary.

        Single-event states are dicts of CalculationInput fields; multi-day
        states are {"days": [...], "events_per_year": n}.
        """
        check_state_shape(calculator_state)
        if is_multi_day(calculator_state):
            inputs = [CalculationInput.from_dict(d) for d in calculator_state['days']]
            aggregate = self.engine.calculate_multiple(
                inputs, calculator_state.get('events_per_year')
            )
            return {
                'total_hours': sum(r.total_hours for r in aggregate.day_results),
                'days': len(aggregate.day_results),
                'total_appointments': aggregate.total_appointments,
                'customer_total_cost': aggregate.customer_total_cost,
                'annualized_cost': aggregate.annualized_cost,
            }

        result = self.engine.calculate(CalculationInput.from_dict(calculator_state))
        return {
            'total_hours': result.total_hours,
            'appts_per_pro_per_hour': result.appts_per_pro_per_hour,
            'appointments_per_hour': result.appointments_per_hour,
            'total_appointments': result.total_appointments,
            'customer_total_cost': result.customer_total_cost,
        }

    def create_proposal(self, calculator_state: dict, client_info: Optional[dict] = None) -> Proposal:
        """Store a calculator snapshot and issue an access code."""
        state = copy.deepcopy(calculator_state)
        summary = self.summarize(state)

        proposal = Proposal(
            proposal_id=str(uuid.uuid4()),
            access_code=generate_access_code(self.access_code_length),
            calculator_state=state,
            client_summary=summary,
            client_info=dict(client_info or {}),
            created_at=datetime.now().isoformat(),
            is_multi_day=is_multi_day(state),
        )
        with self._lock:
            self._proposals[proposal.proposal_id] = proposal
        logger.info("Created proposal %s", proposal.proposal_id)
        return proposal

    def _get_checked(self, proposal_id: str, access_code: str) -> Proposal:
        proposal = self._proposals.get(proposal_id)
        if proposal is None:
            raise ProposalNotFound(f"Proposal '{proposal_id}' not found")
        if not isinstance(access_code, str) or not secrets.compare_digest(
            proposal.access_code, access_code
        ):
            logger.warning("Invalid access code for proposal %s", proposal_id)
            raise InvalidAccessCode("Invalid access code")
        return proposal

    def get_proposal(self, proposal_id: str, access_code: str) -> Proposal:
        """Fetch a proposal; the access code must match exactly."""
        with self._lock:
            proposal = self._get_checked(proposal_id, access_code)
            proposal.view_count += 1
            proposal.last_viewed = datetime.now().isoformat()
            return proposal

    def update_proposal(self, proposal_id: str, access_code: str, updates: dict) -> Proposal:
        """
        Change editable fields and recalculate.

        Multi-day proposals apply the update to every day. Nothing is stored
        unless the recalculation succeeds.
        """
        with self._lock:
            proposal = self._get_checked(proposal_id, access_code)

            invalid = [k for k in updates if k not in proposal.editable_fields]
            if invalid:
                raise NonEditableField(f"Cannot update non-editable fields: {', '.join(invalid)}")

            state = copy.deepcopy(proposal.calculator_state)
            if is_multi_day(state):
                state['days'] = [{**day, **updates} for day in state['days']]
            else:
                state.update(updates)

            summary = self.summarize(state)
            proposal.calculator_state = state
            proposal.client_summary = summary
            proposal.last_updated = datetime.now().isoformat()
            return proposal

    def delete_proposal(self, proposal_id: str, access_code: str) -> bool:
        with self._lock:
            self._get_checked(proposal_id, access_code)
            del self._proposals[proposal_id]
        return True
