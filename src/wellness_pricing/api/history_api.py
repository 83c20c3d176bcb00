"""
History API - FastAPI router for saved calculations.
"""
from fastapi import APIRouter, HTTPException

from ..services.history_service import HistoryEntry, HistoryEntryNotFound
from .schemas import HistoryCreate
from .state import history

router = APIRouter(prefix="/api/history", tags=["history"])


def _entry(entry: HistoryEntry) -> dict:
    return entry.to_dict()


@router.get("")
async def list_entries():
    """List saved calculations, newest first."""
    return [_entry(e) for e in history.list_entries()]


@router.get("/stats")
async def get_stats():
    return history.get_stats()


@router.post("", status_code=201)
async def save_entry(data: HistoryCreate):
    """Calculate and save."""
    entry = history.save(data.input.to_input(), client_name=data.client_name)
    return _entry(entry)


@router.get("/{entry_id}")
async def get_entry(entry_id: str):
    try:
        return _entry(history.get(entry_id))
    except HistoryEntryNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{entry_id}/recalculate")
async def recalculate_entry(entry_id: str):
    """Replay the saved input through the engine."""
    try:
        return _entry(history.recalculate(entry_id))
    except HistoryEntryNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{entry_id}")
async def delete_entry(entry_id: str):
    try:
        history.delete(entry_id)
        return {"success": True, "message": f"Calculation '{entry_id}' deleted"}
    except HistoryEntryNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
