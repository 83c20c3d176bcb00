"""Engine subpackage - core pricing calculation."""
from .pricing_engine import PricingEngine
from .models import CalculationInput, CalculationResult, AggregateResult, LocationTotals
from .service_types import ServiceType, ServiceTypeRegistry, MASSAGE_SPA, HAIR_NAILS, HEADSHOT
from .presets import PresetConfiguration, get_preset, list_presets
from .cache import ResultCache

__all__ = [
    'PricingEngine', 'CalculationInput', 'CalculationResult', 'AggregateResult',
    'LocationTotals', 'ServiceType', 'ServiceTypeRegistry', 'MASSAGE_SPA',
    'HAIR_NAILS', 'HEADSHOT', 'PresetConfiguration', 'get_preset', 'list_presets',
    'ResultCache',
]
