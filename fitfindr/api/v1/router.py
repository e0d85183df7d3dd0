"""API v1 router module."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from fitfindr.api.v1.geocoding import router as geocoding_router
from fitfindr.api.v1.locations import router as locations_router
from fitfindr.api.v1.search import router as search_router

router = APIRouter(default_response_class=JSONResponse)

# Search routes first so /locations/search is not taken as a location ID
router.include_router(search_router)
router.include_router(locations_router)
router.include_router(geocoding_router)


@router.get("/health")
def health_check() -> dict[str, str]:
    """Liveness check."""
    return {"status": "healthy"}
