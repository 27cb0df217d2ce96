"""RapidAPI Google Shopping provider (primary source)."""

from __future__ import annotations

from typing import Any, Optional

from bundlebot.core.logging import logger
from bundlebot.engine.exceptions import ProviderError
from bundlebot.schemas import Candidate

from .http_client import SharedHttpClient, get_shared_http_client
from .normalization import FieldRules, RowNormalizer

RAPIDAPI_RULES = FieldRules(
    name=("title", "name", "product_title"),
    price=("price", "extracted_price", "price_str", "price_string"),
    link=("link", "product_link", "url"),
    image=("thumbnail", "image", "image_link"),
    rating=("rating", "stars", "reviews"),
    merchant=("source", "store", "merchant"),
)

# 응답 형태별 결과 목록 키
_ROW_KEYS = ("results", "shopping_results", "data")


def extract_rows(payload: Any) -> list:
    """응답 JSON에서 결과 행 목록 추출. 형태를 알 수 없으면 ProviderError"""
    if not isinstance(payload, dict):
        raise ProviderError("rapidapi", f"unexpected payload type: {type(payload).__name__}")
    for key in _ROW_KEYS:
        rows = payload.get(key)
        if isinstance(rows, list) and rows:
            return rows
    return []


class RapidApiShoppingProvider:
    """RapidAPI Google Shopping 어댑터

    GET https://<host>/search?q=...&gl=US&hl=en&num=...
    """

    name = "rapidapi"
    job_based = False

    def __init__(
        self,
        api_key: str,
        host: str,
        http_client: Optional[SharedHttpClient] = None,
    ):
        self.api_key = api_key
        self.host = host
        self.http = http_client or get_shared_http_client()
        self.normalizer = RowNormalizer(RAPIDAPI_RULES, source=self.name)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.host)

    async def fetch(self, query: str, limit: int, timeout: float = 8.0) -> list[Candidate]:
        if not self.is_configured:
            raise ProviderError(self.name, "not configured")

        resp = await self.http.get_json(
            f"https://{self.host}/search",
            timeout_s=timeout,
            params={"q": query, "gl": "US", "hl": "en", "num": str(max(3, limit))},
            headers={"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": self.host},
        )
        if resp is None:
            raise ProviderError(self.name, "network failure")
        if not resp.ok:
            raise ProviderError(self.name, resp.text[:200] or "bad status", status=resp.status)
        if resp.payload is None:
            raise ProviderError(self.name, "response is not JSON", status=resp.status)

        candidates = self.normalizer.normalize(extract_rows(resp.payload), limit)
        if not candidates:
            raise ProviderError(self.name, "no rows survived normalization", status=resp.status)

        logger.debug(f"[RapidAPI] query='{query}', candidates={len(candidates)}")
        return candidates
