"""Sourcing Result - Standardized result format

Results passed from the fallback chain to the aggregator, and from the
aggregator to the bundle service.
"""

from dataclasses import dataclass, field
from typing import Optional

from bundlebot.schemas import Candidate

from .strategy import ExecutionPath


@dataclass
class SourcingResult:
    """카테고리 1건의 수집 결과

    Attributes:
        query: 검색어 (카테고리)
        path: 결과 출처 경로
        candidates: 가격 오름차순 후보 목록 (비어 있지 않음)
        errors: 건너뛴 단계의 오류 메시지 (공급자명: 사유)
        elapsed_ms: 소요 시간 (밀리초)
    """

    query: str
    path: ExecutionPath
    candidates: list[Candidate]
    errors: list[str] = field(default_factory=list)
    elapsed_ms: Optional[float] = None

    @property
    def is_synthetic(self) -> bool:
        return self.path == ExecutionPath.SYNTHETIC


@dataclass
class AggregationReport:
    """요청 1건의 후보 수집 결과

    Attributes:
        candidates: 카테고리가 붙은 평탄한 후보 목록 (카테고리 순서 유지)
        categories: 실제로 조회한 카테고리 (중복 제거, 최대 8개)
        sources: 카테고리별 출처 경로
    """

    candidates: list[Candidate]
    categories: list[str]
    sources: dict[str, ExecutionPath] = field(default_factory=dict)

    def source_labels(self) -> dict[str, str]:
        return {category: path.value for category, path in self.sources.items()}
