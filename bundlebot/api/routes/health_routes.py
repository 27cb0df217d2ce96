"""헬스 체크 엔드포인트"""
from datetime import datetime

from fastapi import APIRouter, Depends

from bundlebot import __version__
from bundlebot.api.routes.bundle_routes import get_candidate_cache
from bundlebot.core.config import settings
from bundlebot.engine import CandidateCache
from bundlebot.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(cache: CandidateCache = Depends(get_candidate_cache)):
    """
    헬스 체크 엔드포인트

    - 서버 상태
    - 공급자 설정 여부 (키 존재만 확인, 외부 호출 없음)
    - 캐시 엔트리 수
    """
    providers = {
        "openai": settings.openai_enabled,
        "rapidapi": settings.rapidapi_enabled,
        "apify": settings.apify_enabled,
        "demo": True,
    }
    # 합성 공급자가 항상 있으므로 키가 없어도 응답은 가능
    status = "ok" if settings.rapidapi_enabled or settings.apify_enabled else "degraded"

    return HealthResponse(
        status=status,
        timestamp=datetime.now(),
        version=__version__,
        providers=providers,
        cache_entries=len(cache),
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "BundleBot",
        "version": __version__,
        "docs": "/docs",
    }
