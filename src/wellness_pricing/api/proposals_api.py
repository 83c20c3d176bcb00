"""
Proposals API - FastAPI router for shareable proposals.
"""
from fastapi import APIRouter, HTTPException

from ..engine.errors import PricingError
from ..services.proposal_service import (
    InvalidAccessCode,
    InvalidCalculatorState,
    NonEditableField,
    Proposal,
    ProposalNotFound,
)
from .schemas import ProposalCreate, ProposalCreated, ProposalResponse, ProposalUpdate
from .state import proposals

router = APIRouter(prefix="/api/proposals", tags=["proposals"])


def _response(proposal: Proposal) -> ProposalResponse:
    data = dict(proposal.__dict__)
    data.pop('access_code')
    return ProposalResponse(**data)


def _raise_http(e: Exception):
    if isinstance(e, ProposalNotFound):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InvalidAccessCode):
        raise HTTPException(status_code=403, detail=str(e))
    if isinstance(e, PricingError):
        raise HTTPException(status_code=400, detail=e.to_dict())
    raise HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=ProposalCreated, status_code=201)
async def create_proposal(data: ProposalCreate):
    """Share a calculator state; the access code is only returned here."""
    try:
        proposal = proposals.create_proposal(data.calculator_state, data.client_info)
    except (PricingError, InvalidCalculatorState, TypeError) as e:
        _raise_http(e)
    return ProposalCreated(
        proposal_id=proposal.proposal_id,
        access_code=proposal.access_code,
        client_summary=proposal.client_summary,
    )


@router.get("/{proposal_id}", response_model=ProposalResponse)
async def get_proposal(proposal_id: str, access_code: str):
    """Read a proposal with its access code."""
    try:
        return _response(proposals.get_proposal(proposal_id, access_code))
    except (ProposalNotFound, InvalidAccessCode) as e:
        _raise_http(e)


@router.put("/{proposal_id}", response_model=ProposalResponse)
async def update_proposal(proposal_id: str, data: ProposalUpdate):
    """Apply client edits to editable fields and recalculate."""
    try:
        return _response(proposals.update_proposal(proposal_id, data.access_code, data.updates))
    except (ProposalNotFound, InvalidAccessCode, NonEditableField, PricingError) as e:
        _raise_http(e)


@router.delete("/{proposal_id}")
async def delete_proposal(proposal_id: str, access_code: str):
    try:
        proposals.delete_proposal(proposal_id, access_code)
    except (ProposalNotFound, InvalidAccessCode) as e:
        _raise_http(e)
    return {"success": True, "message": f"Proposal '{proposal_id}' deleted"}
