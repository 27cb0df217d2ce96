"""API 엔드포인트 패키지 - export only."""

from .routes import bundle_router, health_router, get_bundle_service, get_candidate_cache

__all__ = ["bundle_router", "health_router", "get_bundle_service", "get_candidate_cache"]
