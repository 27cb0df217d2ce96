"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # OpenAI (자연어 → Spec 변환)
    # 키가 없으면 정적 기본 Spec을 사용합니다.
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_timeout_s: float = 12.0

    # RapidAPI Google Shopping (1순위 공급자)
    # 예: rapidapi_host = "google-shopping-results.p.rapidapi.com"
    rapidapi_key: str = ""
    rapidapi_host: str = ""

    # Apify actor (2순위 공급자, 선택)
    apify_token: str = ""
    apify_actor_id: str = ""
    apify_base_url: str = "https://api.apify.com/v2"
    apify_poll_interval_s: float = 1.2
    apify_max_wait_s: float = 15.0

    # 후보 캐시 (프로세스 로컬, 45분)
    cache_ttl: int = 2700

    # 후보 수집
    # - per_category_limit: 카테고리별 후보 수 (캐시 키에도 포함)
    # - max_categories: 요청당 조회할 최대 카테고리 수 (외부 호출 fan-out 제한)
    per_category_limit: int = 3
    max_categories: int = 8
    aggregate_concurrency: int = 8

    # 공급자 호출 타임아웃 / 요청 단위 수집 예산
    provider_timeout_s: float = 8.0
    pipeline_budget_s: float = 25.0

    # 공유 HTTP 클라이언트 (curl_cffi)
    http_impersonate: str = "chrome110"
    http_max_clients: int = 20

    # API
    api_title: str = "BundleBot"
    api_version: str = "0.1.0"
    api_description: str = "자연어 요청과 예산으로 구매 가능한 상품 번들을 구성합니다."

    # 라우트 하드 캡: 초과 시 마지막 안전망 번들을 반환
    api_build_timeout_s: float = 30.0

    # 로깅
    log_level: str = "INFO"

    @field_validator("cache_ttl")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache_ttl must be positive")
        return v

    @field_validator("per_category_limit", "max_categories", "aggregate_concurrency", "http_max_clients")
    @classmethod
    def validate_positive_counts(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("counts must be positive")
        return v

    @field_validator(
        "openai_timeout_s",
        "apify_poll_interval_s",
        "apify_max_wait_s",
        "provider_timeout_s",
        "pipeline_budget_s",
        "api_build_timeout_s",
    )
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @property
    def rapidapi_enabled(self) -> bool:
        return bool(self.rapidapi_key and self.rapidapi_host)

    @property
    def apify_enabled(self) -> bool:
        return bool(self.apify_token and self.apify_actor_id)

    @property
    def openai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
