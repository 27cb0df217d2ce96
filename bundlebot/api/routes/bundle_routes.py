"""Bundle Routes - HTTP → BundleService

HTTP Layer는 BundleService로 요청을 위임하는 단순한 Translator 역할만 수행합니다.
파이프라인의 어떤 실패도 깨진 응답으로 노출하지 않고 200 + 안전망 번들로 변환합니다.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from bundlebot.core.config import settings
from bundlebot.core.exceptions import InvalidPromptException
from bundlebot.core.logging import logger
from bundlebot.engine import CandidateCache
from bundlebot.schemas import BuildBundleRequest, BundleResponse, ErrorResponse
from bundlebot.services import BundleService, create_bundle_service, fallback_bundle

router = APIRouter(prefix="/api", tags=["bundle"])

# 싱글톤 (프로세스 로컬)
_candidate_cache: Optional[CandidateCache] = None
_bundle_service: Optional[BundleService] = None


def get_candidate_cache() -> CandidateCache:
    """CandidateCache 싱글톤 (프로세스 재시작 시 초기화)"""
    global _candidate_cache
    if _candidate_cache is None:
        _candidate_cache = CandidateCache(ttl_seconds=settings.cache_ttl)
    return _candidate_cache


def get_bundle_service(
    cache: CandidateCache = Depends(get_candidate_cache),
) -> BundleService:
    """BundleService 싱글톤"""
    global _bundle_service
    if _bundle_service is None:
        _bundle_service = create_bundle_service(cache)
    return _bundle_service


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/build-bundle",
    response_model=BundleResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
async def build_bundle(
    request: BuildBundleRequest,
    service: BundleService = Depends(get_bundle_service),
):
    """번들 생성 API

    Flow:
        1. 프롬프트 검증 (없으면 400)
        2. BundleService에 위임 (하드 타임아웃)
        3. 실패/타임아웃 시 안전망 번들 (200 + note)
    """
    if not request.prompt:
        return _bad_request("Missing prompt")

    timeout_s = settings.api_build_timeout_s
    try:
        return await asyncio.wait_for(service.build(request), timeout=timeout_s)
    except InvalidPromptException as e:
        logger.warning(f"[API] Input validation failed: {e}")
        return _bad_request(e.details.get("reason", "Missing prompt"))
    except asyncio.TimeoutError:
        logger.error(f"[API] Bundle pipeline timed out after {timeout_s}s")
        return fallback_bundle()
    except Exception as e:
        logger.error(f"[API] Bundle build failed: {type(e).__name__}: {e}", exc_info=True)
        return fallback_bundle()
