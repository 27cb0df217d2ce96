"""Source Fallback Chain - primary → secondary → synthetic

절대 예외를 던지지 않고, 항상 비어 있지 않은 후보 목록을 반환합니다.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from bundlebot.core.logging import logger
from bundlebot.engine.budget import BudgetManager
from bundlebot.engine.result import SourcingResult
from bundlebot.engine.strategy import ExecutionPath, ExecutionStrategy
from bundlebot.schemas import Candidate

from .base import ProviderAdapter
from .synthetic import SyntheticProvider


class SourceFallbackChain:
    """공급자 폴백 체인

    - 설정되지 않은 공급자는 네트워크 호출 없이 건너뜀
    - 첫 번째로 비어 있지 않은 결과를 반환
    - 모두 실패하면 합성 후보 limit개

    Usage:
        chain = SourceFallbackChain(primary=rapidapi, secondary=apify)
        items = await chain.search("bedding", 3)
    """

    def __init__(
        self,
        primary: Optional[ProviderAdapter] = None,
        secondary: Optional[ProviderAdapter] = None,
        synthetic: Optional[SyntheticProvider] = None,
        provider_timeout_s: float = 8.0,
        job_timeout_s: float = 15.0,
    ):
        self.primary = primary
        self.secondary = secondary
        self.synthetic = synthetic or SyntheticProvider()
        self.provider_timeout_s = provider_timeout_s
        self.job_timeout_s = job_timeout_s
        self.strategy = ExecutionStrategy()

    async def search(self, query: str, limit: int) -> list[Candidate]:
        """후보 검색 (never fails)"""
        result = await self.resolve(query, limit)
        return result.candidates

    async def resolve(
        self,
        query: str,
        limit: int,
        budget: Optional[BudgetManager] = None,
    ) -> SourcingResult:
        """후보 검색 + 출처 경로/오류 기록

        Args:
            query: 검색어 (카테고리)
            limit: 최대 후보 수
            budget: 요청 예산 (소진 시 외부 공급자 생략)

        Returns:
            SourcingResult: 비어 있지 않은 후보 목록과 출처 경로
        """
        started = time.monotonic()
        errors: list[str] = []

        stages = (
            (ExecutionPath.PRIMARY, self.primary),
            (ExecutionPath.SECONDARY, self.secondary),
        )
        for path, provider in stages:
            candidates = await self._try_provider(path, provider, query, limit, budget, errors)
            if candidates:
                return SourcingResult(
                    query=query,
                    path=path,
                    candidates=candidates[:limit],
                    errors=errors,
                    elapsed_ms=(time.monotonic() - started) * 1000,
                )

        logger.info(f"[Chain] synthetic fallback: query='{query}', errors={len(errors)}")
        return SourcingResult(
            query=query,
            path=ExecutionPath.SYNTHETIC,
            candidates=self.synthetic.generate(query, limit),
            errors=errors,
            elapsed_ms=(time.monotonic() - started) * 1000,
        )

    async def _try_provider(
        self,
        path: ExecutionPath,
        provider: Optional[ProviderAdapter],
        query: str,
        limit: int,
        budget: Optional[BudgetManager],
        errors: list[str],
    ) -> list[Candidate]:
        if provider is None or not provider.is_configured:
            return []

        job_based = getattr(provider, "job_based", False)
        timeout = self.job_timeout_s if job_based else self.provider_timeout_s
        if budget is not None:
            if budget.is_exhausted():
                logger.warning(
                    f"[Chain] {provider.name} skipped: budget exhausted (remaining: {budget.remaining():.2f}s)"
                )
                errors.append(f"{provider.name}: budget exhausted")
                return []
            timeout = min(timeout, budget.get_timeout_for("job" if job_based else "provider"))

        try:
            candidates = await asyncio.wait_for(
                provider.fetch(query, limit, timeout=timeout),
                timeout=timeout + 1.0,
            )
        except Exception as e:
            errors.append(f"{provider.name}: {e}")
            if self.strategy.is_expected_failure(e):
                logger.warning(f"[Chain] {provider.name} failed: query='{query}', error={type(e).__name__}: {e}")
            else:
                logger.error(
                    f"[Chain] {provider.name} crashed: query='{query}', error={type(e).__name__}: {e}",
                    exc_info=True,
                )
            return []

        if not candidates:
            errors.append(f"{provider.name}: empty result")
            logger.info(f"[Chain] {provider.name} returned no candidates: query='{query}'")
            return []

        if budget is not None and budget.start_time is not None:
            budget.checkpoint(f"{path.value}:{query}")
        logger.info(f"[Chain] {provider.name} success: query='{query}', candidates={len(candidates)}")
        return list(candidates)
