"""Bundle Composer - Budget-aware greedy selection

두 제약(총액 <= budget, 품목 수 <= max_items)을 동시에 지키며 후보를 고릅니다.

1. Coverage pass: must_have 카테고리마다 가장 싼 '담을 수 있는' 후보 1개
2. Fill pass: 남은 전체 후보를 가격 오름차순으로 담을 수 있는 만큼

폭(카테고리별 1개)을 깊이(한 카테고리의 싼 품목 여러 개)보다 우선하는
first-fit-by-price 휴리스틱입니다. 예산 배낭 문제의 최적해를 보장하지 않습니다.
같은 가격은 안정 정렬이므로 수집 순서를 유지합니다.
"""

import math
from typing import Optional

from bundlebot.core.logging import logger
from bundlebot.schemas import Bundle, Candidate, Spec


class _Selection:
    """선택 상태 (pick 규칙 보유)"""

    def __init__(self, budget: float, max_items: int):
        self.budget = budget
        self.max_items = max_items
        self.indices: list[int] = []
        self.chosen: set[int] = set()
        self.total = 0.0

    def pick(self, index: int, candidate: Candidate) -> bool:
        if len(self.indices) >= self.max_items:
            return False
        if not math.isfinite(candidate.price):
            return False
        # 반환 총액(센트 반올림)이 예산을 넘지 않도록 반올림된 합으로 비교
        if round(self.total + candidate.price, 2) > self.budget:
            return False
        self.indices.append(index)
        self.chosen.add(index)
        self.total += candidate.price
        return True

    @property
    def is_full(self) -> bool:
        return len(self.indices) >= self.max_items


class BundleComposer:
    """예산 기반 번들 구성기

    Usage:
        bundle = BundleComposer().compose(spec, candidates)
    """

    def compose(self, spec: Spec, candidates: list[Candidate], title: Optional[str] = None) -> Bundle:
        """번들 구성

        Args:
            spec: 예산/품목 수/카테고리 우선순위
            candidates: 카테고리가 붙은 후보 풀 (수집 순서)
            title: 번들 제목 (기본값 spec.title)

        Returns:
            Bundle: 커버리지 순 → 채우기 순으로 정렬된 품목과 총액
        """
        selection = _Selection(budget=spec.budget, max_items=spec.max_items)
        indexed = list(enumerate(candidates))

        # 1) 커버리지: must_have 카테고리별 최저가 1개
        for category in spec.must_have:
            options = sorted(
                ((i, c) for i, c in indexed if c.category == category and i not in selection.chosen),
                key=lambda pair: pair[1].price,
            )
            for index, option in options:
                if selection.pick(index, option):
                    break
            else:
                logger.debug(f"[Composer] must-have not covered: category='{category}'")

        # 2) 채우기: 남은 후보 전체를 가격 오름차순으로
        remaining = sorted(
            ((i, c) for i, c in indexed if i not in selection.chosen),
            key=lambda pair: pair[1].price,
        )
        for index, option in remaining:
            if selection.is_full:
                break
            selection.pick(index, option)

        items = [candidates[i] for i in selection.indices]
        total = round(selection.total, 2)
        logger.info(
            f"[Composer] items={len(items)}/{spec.max_items}, total={total}/{spec.budget}, pool={len(candidates)}"
        )
        return Bundle(
            title=title or spec.title,
            budget=spec.budget,
            total=total,
            items=items,
        )
