"""Budget Manager - Per-request time budget

예산 할당 구조 (기본값):
- 전체 수집 예산: 25초
- 공급자 1회 호출: 최대 8초
- 작업형 공급자(Apify) 대기: 최대 15초
- 최소 여유: 0.5초 (이보다 적게 남으면 외부 호출 생략 → 합성 후보)
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass
class BudgetConfig:
    """예산 설정"""

    total_budget: float = 25.0  # 전체 예산 (초)
    provider_timeout: float = 8.0  # 공급자 단일 호출
    job_timeout: float = 15.0  # 작업형 공급자 폴링 포함 전체 대기
    min_remaining: float = 0.5  # 외부 호출 최소 여유 시간 (초)

    def __post_init__(self):
        """설정 검증"""
        if self.total_budget <= 0:
            raise ValueError(f"total_budget must be positive ({self.total_budget}s)")
        if self.provider_timeout > self.total_budget:
            raise ValueError(
                f"provider_timeout ({self.provider_timeout}s) exceeds total budget ({self.total_budget}s)"
            )


class BudgetManager:
    """요청 단위 시간 예산 관리자

    Aggregator → SourceFallbackChain → 공급자 어댑터로 전달되며,
    각 단계는 get_timeout_for()로 남은 예산 안의 타임아웃을 받습니다.
    요청마다 새로 생성합니다 (요청 간 공유 금지).

    Usage:
        manager = BudgetManager(BudgetConfig(total_budget=20.0))
        manager.start()

        if not manager.is_exhausted():
            timeout = manager.get_timeout_for("provider")

        manager.checkpoint("aggregated")
        report = manager.get_report()
    """

    def __init__(self, config: Optional[BudgetConfig] = None, clock: Optional[Callable[[], float]] = None):
        self.config = config or BudgetConfig()
        self._clock = clock or time.monotonic
        self.start_time: Optional[float] = None
        self._checkpoints: dict[str, float] = {}

    def start(self) -> "BudgetManager":
        """예산 측정 시작"""
        self.start_time = self._clock()
        self._checkpoints.clear()
        return self

    def checkpoint(self, name: str) -> None:
        """체크포인트 기록

        Raises:
            RuntimeError: start()가 호출되지 않은 경우
        """
        if self.start_time is None:
            raise RuntimeError("Budget not started. Call start() first.")
        self._checkpoints[name] = self._clock() - self.start_time

    def elapsed(self) -> float:
        """경과 시간 (초). start() 전에는 0.0"""
        if self.start_time is None:
            return 0.0
        return self._clock() - self.start_time

    def remaining(self) -> float:
        """남은 예산 (초, 음수 없음)"""
        return max(0.0, self.config.total_budget - self.elapsed())

    def is_exhausted(self) -> bool:
        return self.remaining() < self.config.min_remaining

    def get_timeout_for(self, stage: str) -> float:
        """단계별 타임아웃: 남은 예산과 단계 설정값 중 작은 값

        Args:
            stage: "provider" | "job"
        """
        remaining = self.remaining()

        if stage == "provider":
            return min(self.config.provider_timeout, remaining)
        elif stage == "job":
            return min(self.config.job_timeout, remaining)
        else:
            return remaining

    def get_report(self) -> dict:
        """예산 사용 리포트"""
        return {
            "total_budget": self.config.total_budget,
            "elapsed": round(self.elapsed(), 3),
            "remaining": round(self.remaining(), 3),
            "checkpoints": {k: round(v, 3) for k, v in self._checkpoints.items()},
            "is_exhausted": self.is_exhausted(),
        }
