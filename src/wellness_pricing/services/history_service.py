"""
History Service - saved calculations and the recalculate flow.

Stores {input, result} pairs keyed by an opaque id. Optionally persisted to a
JSON file so history survives restarts.
"""
import json
import logging
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from ..engine import PricingEngine, CalculationInput, CalculationResult
from ..engine.precision import round_half_up

logger = logging.getLogger(__name__)


class HistoryEntryNotFound(ValueError):
    """No saved calculation with the requested id."""


@dataclass
class HistoryEntry:
    """A saved calculation."""
    entry_id: str
    created_at: str
    input: CalculationInput
    result: CalculationResult
    client_name: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'entry_id': self.entry_id,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'client_name': self.client_name,
            'input': self.input.to_dict(),
            'result': self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'HistoryEntry':
        return cls(
            entry_id=data['entry_id'],
            created_at=data['created_at'],
            updated_at=data.get('updated_at'),
            client_name=data.get('client_name'),
            input=CalculationInput.from_dict(data['input']),
            result=CalculationResult.from_dict(data['result']),
        )


class CalculationHistory:
    """Saved calculations, newest first."""

    def __init__(self, engine: PricingEngine, path: Optional[Path] = None, max_entries: int = 50):
        self.engine = engine
        self.path = Path(path) if path else None
        self.max_entries = max_entries
        self._entries: dict[str, HistoryEntry] = {}
        self._lock = threading.Lock()
        self._load()

    def _load(self):
        """Load entries from the JSON file, if configured and present."""
        if not self.path or not self.path.exists():
            return
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        for item in data.get('entries', []):
            entry = HistoryEntry.from_dict(item)
            self._entries[entry.entry_id] = entry
        logger.info("Loaded %d saved calculations from %s", len(self._entries), self.path)

    def _write(self):
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump({'entries': [e.to_dict() for e in self._entries.values()]}, f, indent=2)

    def save(
        self,
        params: CalculationInput,
        result: Optional[CalculationResult] = None,
        client_name: Optional[str] = None,
    ) -> HistoryEntry:
        """Save a calculation, computing the result when none is given."""
        if result is None:
            result = self.engine.calculate(params)

        entry = HistoryEntry(
            entry_id=uuid.uuid4().hex,
            created_at=datetime.now().isoformat(),
            input=params,
            result=result,
            client_name=client_name,
        )
        with self._lock:
            self._entries[entry.entry_id] = entry
            # Drop the oldest beyond the limit (dicts keep insertion order)
            while len(self._entries) > self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._write()
        return entry

    def list_entries(self) -> list[HistoryEntry]:
        """All saved entries, newest first."""
        with self._lock:
            return list(reversed(list(self._entries.values())))

    def get(self, entry_id: str) -> HistoryEntry:
        with self._lock:
            entry = self._entries.get(entry_id)
        if entry is None:
            raise HistoryEntryNotFound(f"Calculation '{entry_id}' not found")
        return entry

    def delete(self, entry_id: str) -> bool:
        """Delete a saved calculation."""
        with self._lock:
            if entry_id not in self._entries:
                raise HistoryEntryNotFound(f"Calculation '{entry_id}' not found")
            del self._entries[entry_id]
            self._write()
        return True

    def recalculate(self, entry_id: str) -> HistoryEntry:
        """Replay a saved input through the engine and store the fresh result."""
        entry = self.get(entry_id)
        result = self.engine.calculate(entry.input)
        updated = replace(entry, result=result, updated_at=datetime.now().isoformat())
        with self._lock:
            self._entries[entry_id] = updated
            self._write()
        return updated

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._write()

    def to_frame(self) -> pd.DataFrame:
        """Summary table of saved calculations, newest first."""
        columns = ['entry_id', 'created_at', 'client_name', 'service_type', 'day', 'location',
                   'total_appointments', 'customer_total_cost', 'net_profit',
                   'profit_margin_percent', 'annualized_cost']
        rows = [
            {
                'entry_id': e.entry_id,
                'created_at': e.created_at,
                'client_name': e.client_name,
                'service_type': e.result.service_type,
                'day': e.result.day,
                'location': e.result.location,
                'total_appointments': e.result.total_appointments,
                'customer_total_cost': e.result.customer_total_cost,
                'net_profit': e.result.net_profit,
                'profit_margin_percent': e.result.profit_margin_percent,
                'annualized_cost': e.result.annualized_cost,
            }
            for e in self.list_entries()
        ]
        return pd.DataFrame(rows, columns=columns)

    def get_stats(self) -> dict:
        """Counts and totals across saved calculations."""
        entries = self.list_entries()
        by_service = {}
        for e in entries:
            by_service[e.result.service_type] = by_service.get(e.result.service_type, 0) + 1
        return {
            'total': len(entries),
            'by_service_type': by_service,
            'total_customer_cost': round_half_up(
                sum(e.result.customer_total_cost for e in entries), self.engine.settings.precision
            ),
        }
