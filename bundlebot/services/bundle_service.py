"""번들 생성 서비스 - Spec 변환 → 후보 수집 → 번들 구성

HTTP 레이어는 이 서비스에 위임만 합니다. 예상치 못한 오류는 그대로 전파되며
라우트가 마지막 안전망 번들(fallback_bundle)로 변환합니다.
"""
from typing import Optional

from bundlebot.core.config import Settings, settings as default_settings
from bundlebot.core.exceptions import InvalidPromptException
from bundlebot.core.logging import logger, sanitize_for_log
from bundlebot.engine import (
    BudgetConfig,
    BudgetManager,
    BundleComposer,
    CandidateAggregator,
    CandidateCache,
)
from bundlebot.providers import (
    ApifyActorProvider,
    RapidApiShoppingProvider,
    SharedHttpClient,
    SourceFallbackChain,
    get_shared_http_client,
)
from bundlebot.schemas import BuildBundleRequest, BundleResponse, Candidate, DebugInfo

from .spec_service import SpecTranslator

FALLBACK_NOTE = "Fallback mode due to server error"


def fallback_bundle() -> BundleResponse:
    """파이프라인 어디서든 실패했을 때 반환하는 정적 번들"""
    items = [
        Candidate(name="Twin XL Bedding Set", price=79.99, link="https://example.com/bedding",
                  reason="Fits dorm beds; reviewed well", source="fallback"),
        Candidate(name="LED Desk Lamp", price=24.99, link="https://example.com/lamp",
                  reason="Dimmable + USB", source="fallback"),
        Candidate(name="Over-the-Door Hooks", price=12.99, link="https://example.com/hooks",
                  reason="Instant storage", source="fallback"),
    ]
    return BundleResponse(
        title="Bundle (Fallback)",
        budget=500,
        total=round(sum(item.price for item in items), 2),
        items=items,
        note=FALLBACK_NOTE,
    )


class BundleService:
    """번들 생성 파이프라인

    Flow:
        1. 프롬프트 검증
        2. SpecTranslator: 프롬프트 → Spec (실패 시 기본 Spec)
        3. CandidateAggregator: 카테고리별 캐시 또는 폴백 체인
        4. BundleComposer: 예산/품목 수 제약 하의 그리디 선택
    """

    def __init__(
        self,
        translator: SpecTranslator,
        aggregator: CandidateAggregator,
        composer: Optional[BundleComposer] = None,
        budget_config: Optional[BudgetConfig] = None,
        provider_host: Optional[str] = None,
    ):
        self.translator = translator
        self.aggregator = aggregator
        self.composer = composer or BundleComposer()
        self.budget_config = budget_config or BudgetConfig()
        self.provider_host = provider_host

    async def build(self, request: BuildBundleRequest) -> BundleResponse:
        """번들 생성

        Raises:
            InvalidPromptException: 프롬프트가 비어 있는 경우
        """
        prompt = request.prompt.strip()
        if not prompt:
            raise InvalidPromptException()

        logger.info(f"[Bundle] request: prompt='{sanitize_for_log(prompt)}', budget={request.budget}")

        budget = BudgetManager(self.budget_config).start()

        spec = await self.translator.translate(prompt, request.budget)
        budget.checkpoint("spec")

        report = await self.aggregator.collect(spec, budget)
        bundle = self.composer.compose(spec, report.candidates)
        budget.checkpoint("composed")

        response = BundleResponse(
            title=bundle.title,
            budget=bundle.budget,
            total=bundle.total,
            items=bundle.items,
        )
        if request.debug:
            response.debug = DebugInfo(
                provider_host=self.provider_host,
                candidate_count=len(report.candidates),
                categories=report.categories,
                sources=report.source_labels(),
                spec=spec,
                budget_report=budget.get_report(),
            )

        logger.info(
            f"[Bundle] done: items={len(bundle.items)}, total={bundle.total}, "
            f"elapsed={budget.elapsed():.2f}s"
        )
        return response


def create_bundle_service(
    cache: CandidateCache,
    config: Optional[Settings] = None,
    http_client: Optional[SharedHttpClient] = None,
) -> BundleService:
    """설정으로부터 공급자/체인/수집기/서비스를 조립"""
    config = config or default_settings
    http = http_client or get_shared_http_client()

    primary = RapidApiShoppingProvider(
        api_key=config.rapidapi_key,
        host=config.rapidapi_host,
        http_client=http,
    )
    secondary = ApifyActorProvider(
        token=config.apify_token,
        actor_id=config.apify_actor_id,
        base_url=config.apify_base_url,
        poll_interval_s=config.apify_poll_interval_s,
        max_wait_s=config.apify_max_wait_s,
        http_client=http,
    )
    chain = SourceFallbackChain(
        primary=primary,
        secondary=secondary,
        provider_timeout_s=config.provider_timeout_s,
        job_timeout_s=config.apify_max_wait_s,
    )
    aggregator = CandidateAggregator(
        cache=cache,
        chain=chain,
        per_category_limit=config.per_category_limit,
        max_categories=config.max_categories,
        concurrency=config.aggregate_concurrency,
    )
    translator = SpecTranslator(
        api_key=config.openai_api_key,
        model=config.openai_model,
        base_url=config.openai_base_url,
        timeout_s=config.openai_timeout_s,
        http_client=http,
    )
    budget_config = BudgetConfig(
        total_budget=config.pipeline_budget_s,
        provider_timeout=min(config.provider_timeout_s, config.pipeline_budget_s),
        job_timeout=config.apify_max_wait_s,
    )

    logger.info(
        f"[Bundle] providers: rapidapi={config.rapidapi_enabled}, apify={config.apify_enabled}, "
        f"openai={config.openai_enabled}"
    )
    return BundleService(
        translator=translator,
        aggregator=aggregator,
        budget_config=budget_config,
        provider_host=config.rapidapi_host or None,
    )
