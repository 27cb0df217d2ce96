"""Spec 변환 서비스 - 자연어 프롬프트 → 구조화된 Spec

OpenAI chat completions(strict JSON)를 한 번 호출하고 결과를 정규화합니다.
키가 없거나, 호출이 실패하거나, 응답이 깨져 있으면 정적 기본 Spec을 반환합니다.
어떤 경우에도 예외를 밖으로 던지지 않습니다.
"""
import json
import math
from typing import Any, Optional

from bundlebot.core.exceptions import SpecTranslationException
from bundlebot.core.logging import logger, sanitize_for_log
from bundlebot.providers.http_client import SharedHttpClient, get_shared_http_client
from bundlebot.schemas import Spec

DEFAULT_BUDGET = 500.0
DEFAULT_MAX_ITEMS = 10
DEFAULT_MUST_HAVE = ("bedding", "lighting", "storage")
DEFAULT_NICE_TO_HAVE = ("desk accessories", "fan", "laundry")

BUDGET_BOUNDS = (50.0, 5000.0)
MAX_ITEMS_BOUNDS = (3, 15)
MAX_CATEGORIES_PER_LIST = 10

# LLM에 보내는 프롬프트 최대 길이 (요청 자체는 길이 제한 없음)
MAX_PROMPT_CHARS = 2000

SYSTEM_PROMPT = """
You are BundleBot. Output STRICT JSON only:
{ "title": string, "budget": number, "must_have": string[], "nice_to_have": string[], "max_items": number }
If user gives a budget, use it; else choose a reasonable one.
Keep categories short: "bedding","lighting","storage","desk accessories","fan","laundry","bath","kitchen".
""".strip()


def string_or(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def number_or(value: Any, default: float) -> float:
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def strings_or(value: Any, default: tuple[str, ...]) -> list[str]:
    """문자열 목록 정규화 (공백 제거, 빈 값/중복 제거, 최대 10개)"""
    if not isinstance(value, list):
        return list(default)

    result: list[str] = []
    for item in value:
        if item is None:
            continue
        text = str(item).strip()
        if text and text not in result:
            result.append(text)
    return result[:MAX_CATEGORIES_PER_LIST]


def _user_budget_or_default(budget: Optional[float]) -> float:
    if budget is not None and math.isfinite(budget):
        return budget
    return DEFAULT_BUDGET


def default_spec(prompt: str, budget: Optional[float] = None) -> Spec:
    """LLM을 쓸 수 없을 때의 정적 기본 Spec"""
    return Spec(
        title=f"Bundle for: {prompt}",
        budget=round(clamp(_user_budget_or_default(budget), *BUDGET_BOUNDS), 2),
        must_have=list(DEFAULT_MUST_HAVE),
        nice_to_have=list(DEFAULT_NICE_TO_HAVE),
        max_items=DEFAULT_MAX_ITEMS,
    )


def normalize_spec(raw: Any, prompt: str, budget: Optional[float] = None) -> Spec:
    """LLM 응답(dict)을 경계값 안의 Spec으로 정규화

    Raises:
        SpecTranslationException: 응답이 JSON 객체가 아닌 경우
    """
    if not isinstance(raw, dict):
        raise SpecTranslationException(f"expected JSON object, got {type(raw).__name__}")

    spec_budget = number_or(raw.get("budget"), _user_budget_or_default(budget))
    max_items = number_or(raw.get("max_items"), DEFAULT_MAX_ITEMS)

    return Spec(
        title=string_or(raw.get("title"), f"Bundle for: {prompt}"),
        budget=round(clamp(spec_budget, *BUDGET_BOUNDS), 2),
        must_have=strings_or(raw.get("must_have"), DEFAULT_MUST_HAVE),
        nice_to_have=strings_or(raw.get("nice_to_have"), DEFAULT_NICE_TO_HAVE),
        max_items=int(clamp(max_items, *MAX_ITEMS_BOUNDS)),
    )


class SpecTranslator:
    """자연어 → Spec 변환기"""

    def __init__(
        self,
        api_key: str = "",
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout_s: float = 12.0,
        http_client: Optional[SharedHttpClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.http = http_client or get_shared_http_client()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def translate(self, prompt: str, budget: Optional[float] = None) -> Spec:
        """프롬프트 → Spec (실패 시 기본 Spec)"""
        try:
            raw = await self._request_spec(prompt, budget)
            spec = normalize_spec(raw, prompt, budget)
            logger.info(
                f"[Spec] translated: budget={spec.budget}, max_items={spec.max_items}, "
                f"must_have={spec.must_have}"
            )
            return spec
        except SpecTranslationException as e:
            logger.warning(f"[Spec] fallback spec: {e}")
            return default_spec(prompt, budget)

    async def _request_spec(self, prompt: str, budget: Optional[float]) -> Any:
        if not self.is_configured:
            raise SpecTranslationException("No OPENAI_API_KEY set")

        budget_text = f"{budget:g}" if budget is not None else "N/A"
        if len(prompt) > MAX_PROMPT_CHARS:
            logger.info(f"[Spec] prompt truncated: {len(prompt)} → {MAX_PROMPT_CHARS} chars")
            prompt = prompt[:MAX_PROMPT_CHARS]
        user_message = "\n".join([
            f"User request: {json.dumps(prompt, ensure_ascii=False)}",
            f"User budget: {budget_text}",
            "Return exactly:",
            '{"title":"...","budget":500,"must_have":["..."],"nice_to_have":["..."],"max_items":10}',
        ])
        logger.debug(f"[Spec] requesting: prompt='{sanitize_for_log(prompt)}'")

        resp = await self.http.post_json(
            f"{self.base_url}/chat/completions",
            timeout_s=self.timeout_s,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": self.model,
                "temperature": 0.2,
                "response_format": {"type": "json_object"},
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_message},
                ],
            },
        )
        if resp is None:
            raise SpecTranslationException("network failure")
        if not resp.ok:
            raise SpecTranslationException(
                f"OpenAI {resp.status}: {resp.text[:200]}",
                details={"status": resp.status},
            )

        try:
            content = resp.payload["choices"][0]["message"]["content"] or "{}"
        except (TypeError, KeyError, IndexError) as e:
            raise SpecTranslationException(f"unexpected completion shape: {type(e).__name__}") from e

        try:
            return json.loads(content)
        except (json.JSONDecodeError, TypeError) as e:
            raise SpecTranslationException(f"malformed JSON content: {e}") from e
