"""Candidate Aggregator - Per-category cache-or-fetch

Coordinates candidate sourcing for one spec:
1. Ordered, de-duplicated category list (must_have then nice_to_have, max 8)
2. Cache lookup per category
3. Fallback chain on miss (cache populated on real provider results)
4. Category tagging and flattening in category order

카테고리끼리는 공유 상태가 캐시뿐이므로 세마포어로 동시 실행 수를
제한해 병렬 수집하고, 결과는 원래 카테고리 순서로 합칩니다.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional

from bundlebot.core.logging import logger
from bundlebot.schemas import Candidate, Spec

from .budget import BudgetManager
from .cache import CandidateCache, build_cache_key
from .result import AggregationReport, SourcingResult
from .strategy import ExecutionPath, ExecutionStrategy

if TYPE_CHECKING:
    from bundlebot.providers.chain import SourceFallbackChain

PER_CATEGORY_LIMIT = 3
MAX_CATEGORIES = 8


def resolve_categories(spec: Spec, max_categories: int = MAX_CATEGORIES) -> list[str]:
    """must_have → nice_to_have 순서의 합집합 (첫 등장 기준 중복 제거, 상한 적용)"""
    seen: set[str] = set()
    categories: list[str] = []
    for category in [*spec.must_have, *spec.nice_to_have]:
        if category in seen:
            continue
        seen.add(category)
        categories.append(category)
    return categories[:max_categories]


class CandidateAggregator:
    """후보 수집기

    Usage:
        aggregator = CandidateAggregator(cache=CandidateCache(), chain=chain)
        candidates = await aggregator.aggregate(spec)
    """

    def __init__(
        self,
        cache: CandidateCache,
        chain: "SourceFallbackChain",
        per_category_limit: int = PER_CATEGORY_LIMIT,
        max_categories: int = MAX_CATEGORIES,
        concurrency: int = MAX_CATEGORIES,
    ):
        if cache is None:
            raise ValueError("cache must not be None")
        if chain is None:
            raise ValueError("chain must not be None")
        if concurrency <= 0:
            raise ValueError("concurrency must be positive")

        self.cache = cache
        self.chain = chain
        self.per_category_limit = per_category_limit
        self.max_categories = max_categories
        self.concurrency = concurrency
        self.strategy = ExecutionStrategy()

    async def aggregate(self, spec: Spec, budget: Optional[BudgetManager] = None) -> list[Candidate]:
        """카테고리가 붙은 평탄한 후보 목록"""
        report = await self.collect(spec, budget)
        return report.candidates

    async def collect(self, spec: Spec, budget: Optional[BudgetManager] = None) -> AggregationReport:
        """후보 수집 + 카테고리별 출처 리포트

        Args:
            spec: 정규화된 Spec
            budget: 요청 예산 (없으면 공급자 기본 타임아웃만 적용)

        Returns:
            AggregationReport: 카테고리 순서대로 합친 후보와 출처
        """
        categories = resolve_categories(spec, self.max_categories)
        logger.info(f"[Aggregator] categories={categories}")

        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(category: str) -> SourcingResult:
            async with semaphore:
                return await self._collect_category(category, budget)

        results = await asyncio.gather(*(bounded(c) for c in categories))

        candidates: list[Candidate] = []
        sources: dict[str, ExecutionPath] = {}
        for category, result in zip(categories, results):
            sources[category] = result.path
            candidates.extend(c.with_category(category) for c in result.candidates)

        if budget is not None and budget.start_time is not None:
            budget.checkpoint("aggregated")

        return AggregationReport(candidates=candidates, categories=categories, sources=sources)

    async def _collect_category(self, category: str, budget: Optional[BudgetManager]) -> SourcingResult:
        key = build_cache_key(category, self.per_category_limit)

        cached = self.cache.get(key)
        if cached:
            return SourcingResult(query=category, path=ExecutionPath.CACHE, candidates=cached)

        result = await self.chain.resolve(category, self.per_category_limit, budget=budget)
        if self.strategy.should_cache(result.path, len(result.candidates)):
            self.cache.set(key, result.candidates)
        return result
