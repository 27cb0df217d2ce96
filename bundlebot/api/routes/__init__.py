"""API routes package."""

from .bundle_routes import router as bundle_router, get_bundle_service, get_candidate_cache
from .health_routes import router as health_router

__all__ = ["bundle_router", "health_router", "get_bundle_service", "get_candidate_cache"]
