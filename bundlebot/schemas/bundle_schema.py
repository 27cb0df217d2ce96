"""Pydantic 스키마 정의 (Spec / Candidate / Bundle)"""
import math
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


PLACEHOLDER_IMAGE = "https://via.placeholder.com/300"


class Spec(BaseModel):
    """구조화된 쇼핑 요구사항

    경계값(예산 50~5000, 최대 품목 3~15)은 SpecTranslator의 정규화 단계에서
    적용됩니다. 모델 자체는 양수/유한값과 센트 단위 예산만 보장합니다.
    """
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="번들 제목")
    budget: float = Field(..., gt=0, description="예산 (USD)")
    must_have: list[str] = Field(default_factory=list, description="반드시 포함할 카테고리 (순서 유지)")
    nice_to_have: list[str] = Field(default_factory=list, description="가능하면 포함할 카테고리")
    max_items: int = Field(..., ge=1, description="최대 품목 수")

    @field_validator("budget")
    @classmethod
    def validate_budget(cls, v: float) -> float:
        """센트 단위로 반올림 (번들 총액과 같은 정밀도)"""
        if not math.isfinite(v):
            raise ValueError("budget must be finite")
        rounded = round(v, 2)
        if rounded <= 0:
            raise ValueError("budget must be at least 0.01")
        return rounded


class Candidate(BaseModel):
    """정규화된 구매 후보 (불변)

    category는 수집 단계(Aggregator)에서 model_copy로 붙입니다.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="상품명")
    price: float = Field(..., ge=0, description="가격 (USD)")
    link: str = Field(..., min_length=1, description="상품 링크")
    image: str = Field(PLACEHOLDER_IMAGE, description="이미지 URL")
    reason: str = Field("Good value", description="추천 사유")
    source: str = Field(..., description="공급자 태그: rapidapi | apify | demo | fallback")
    category: Optional[str] = Field(None, description="수집 카테고리")

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("price must be finite")
        return v

    def with_category(self, category: str) -> "Candidate":
        """카테고리가 붙은 새 후보 반환 (원본은 변경하지 않음)"""
        return self.model_copy(update={"category": category})


class Bundle(BaseModel):
    """최종 번들 (total <= budget, len(items) <= max_items)"""
    title: str
    budget: float
    total: float = Field(..., ge=0, description="선택 품목 가격 합 (소수점 2자리)")
    items: list[Candidate] = Field(default_factory=list)


class DebugInfo(BaseModel):
    """debug=true 요청 시 응답에 포함되는 진단 정보"""
    provider_host: Optional[str] = Field(None, description="RapidAPI 호스트")
    candidate_count: int = Field(0, ge=0)
    categories: list[str] = Field(default_factory=list, description="조회한 카테고리 (순서 유지)")
    sources: dict[str, str] = Field(default_factory=dict, description="카테고리별 결과 출처")
    spec: Optional[Spec] = None
    budget_report: Optional[dict[str, Any]] = None


class BundleResponse(Bundle):
    """번들 생성 응답"""
    note: Optional[str] = Field(None, description="폴백 모드 안내")
    debug: Optional[DebugInfo] = None


class BuildBundleRequest(BaseModel):
    """번들 생성 요청"""
    prompt: str = Field("", description="자연어 쇼핑 요청 (길이 제한 없음)")
    budget: Optional[float] = Field(None, description="사용자 예산 (선택)")
    debug: bool = Field(False, description="진단 정보 포함 여부")

    @field_validator("prompt", mode="before")
    @classmethod
    def coerce_prompt(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("budget", mode="before")
    @classmethod
    def coerce_budget(cls, v: Any) -> Optional[float]:
        """숫자로 해석할 수 없거나 0인 예산은 '미지정'으로 취급"""
        if v is None or isinstance(v, bool):
            return None
        try:
            number = float(v)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number) or number == 0:
            return None
        return number


class ErrorResponse(BaseModel):
    """4xx 응답"""
    error: str


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
    providers: dict[str, bool]
    cache_entries: int
