from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dataclasses import asdict
from typing import Optional
import logging
import sys
from pathlib import Path

# Add src to path for internal imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from wellness_pricing import __version__
from wellness_pricing.engine.errors import PricingError
from wellness_pricing.engine.presets import PresetConfiguration
from wellness_pricing.api.schemas import CalculationRequest, MultiCalculationRequest, ServiceTypeCreate
from wellness_pricing.api.history_api import router as history_router
from wellness_pricing.api.proposals_api import router as proposals_router
from wellness_pricing.api.state import engine, registry, cache, history


def setup_logging(level: int = logging.INFO):
    """Setup consistent logging format"""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Wellness Pricing API",
    description="Pricing calculator for wellness-service events",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(history_router)
app.include_router(proposals_router)


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=400, content=exc.to_dict())


def _preset_dict(preset: PresetConfiguration) -> dict:
    data = asdict(preset)
    data['expected_appointments'] = preset.expected_appointments
    return data


@app.get("/")
async def root():
    return {"status": "online", "message": "Wellness Pricing API Active"}


@app.post("/calculate")
async def calculate(req: CalculationRequest):
    """Price a single event."""
    result = engine.calculate(req.to_input())
    return result.to_dict(include_trace=True)


@app.post("/calculate/multiple")
async def calculate_multiple(req: MultiCalculationRequest):
    """Price several day/location configurations and total them."""
    aggregate = engine.calculate_multiple(
        [c.to_input() for c in req.configurations],
        events_per_year=req.events_per_year,
    )
    return aggregate.to_dict()


@app.get("/presets")
async def get_presets(service_type: str, size: Optional[str] = None):
    """Preset configurations for a service type, or one preset by size."""
    if service_type not in registry:
        raise HTTPException(status_code=404, detail=f"Unknown service type '{service_type}'")
    if size is None:
        return [_preset_dict(p) for p in engine.list_presets(service_type)]

    preset = engine.get_preset(service_type, size)
    if preset is None:
        raise HTTPException(status_code=404, detail=f"No '{size}' preset for '{service_type}'")
    return _preset_dict(preset)


@app.get("/service-types")
async def list_service_types():
    return [asdict(st) for st in registry]


@app.post("/service-types", status_code=201)
async def create_service_type(data: ServiceTypeCreate):
    """Register a custom service type."""
    service_type = engine.register_service_type(data.name, data.margin, data.requires_retouching)
    return asdict(service_type)


@app.get("/system/status")
async def get_status():
    return {
        "engine_active": True,
        "version": __version__,
        "service_types": registry.names(),
        "cache_entries": len(cache),
        "history_entries": len(history.list_entries()),
    }
