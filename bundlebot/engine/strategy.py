"""Execution Strategy - Source path decision logic

Determines which sourcing paths exist and how provider errors are treated.
"""

import asyncio
from enum import Enum

from bundlebot.engine.exceptions import ProviderError


class ExecutionPath(str, Enum):
    """후보 출처 경로

    카테고리 하나의 후보가 어느 단계에서 왔는지 나타냅니다.
    """

    CACHE = "cache"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    SYNTHETIC = "synthetic"


class ExecutionStrategy:
    """폴백 전략 결정

    SourceFallbackChain은 어떤 예외에서도 다음 단계로 넘어가지만,
    예상된 실패(공급자 오류/타임아웃)와 프로그래밍 오류를 구분해 로깅합니다.

    Usage:
        try:
            items = await provider.fetch(query, limit, timeout=5.0)
        except Exception as e:
            if ExecutionStrategy.is_expected_failure(e):
                logger.warning(...)
            else:
                logger.error(..., exc_info=True)
    """

    @staticmethod
    def is_expected_failure(error: BaseException) -> bool:
        """공급자 계약상 예상된 실패인지 여부

        - ProviderError: 네트워크/상태 코드/파싱/0건
        - TimeoutError(engine): 작업 미완료 또는 실패 종료 상태
        - asyncio.TimeoutError: 호출 타임아웃
        """
        return isinstance(error, (ProviderError, asyncio.TimeoutError))

    @staticmethod
    def should_cache(path: ExecutionPath, candidate_count: int) -> bool:
        """수집 결과 캐시 여부

        실제 공급자가 돌려준 비어 있지 않은 결과만 저장합니다.
        - 합성 후보는 장애의 산물이므로 저장하지 않음 (다음 요청에서 재시도)
        - 캐시 히트 결과는 다시 저장하지 않음 (타임스탬프 연장 방지)
        """
        if candidate_count <= 0:
            return False
        return path in (ExecutionPath.PRIMARY, ExecutionPath.SECONDARY)
