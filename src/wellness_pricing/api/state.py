"""
Shared application state for the API: one engine and the services built on it.
"""
from ..config.settings import get_settings
from ..engine import PricingEngine, ResultCache, ServiceTypeRegistry
from ..services.history_service import CalculationHistory
from ..services.proposal_service import ProposalService

settings = get_settings()

registry = ServiceTypeRegistry(default_margin=settings.default_custom_margin)
cache = ResultCache(ttl_seconds=settings.cache_ttl_seconds)
engine = PricingEngine(registry=registry, cache=cache, settings=settings)

history = CalculationHistory(
    engine,
    path=settings.history_path,
    max_entries=settings.max_history_entries,
)
proposals = ProposalService(engine, access_code_length=settings.access_code_length)
