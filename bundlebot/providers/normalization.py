"""Provider row normalization.

공급자마다 응답 필드명이 제각각이므로(title/name/product_title, link/url ...)
논리 필드별 우선순위 키 목록(FieldRules)을 선언하고, 앞에서부터 처음
값이 있는 키를 사용합니다.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from bundlebot.core.logging import logger
from bundlebot.schemas import PLACEHOLDER_IMAGE, Candidate

_PRICE_RE = re.compile(r"(\d+(?:\.\d+)?)")


def parse_price(value: Any) -> float:
    """가격 값에서 숫자 추출.

    숫자는 그대로, 문자열은 쉼표/공백 제거 후 첫 숫자 구간을 사용합니다.
    ("$24.99" → 24.99, "1,299.00 USD" → 1299.0). 실패 시 NaN.
    """
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)

    text = re.sub(r"[,\s]", "", str(value))
    match = _PRICE_RE.search(text)
    if not match:
        return math.nan
    return float(match.group(1))


def build_reason(rating: Any = None, merchant: Any = None) -> str:
    """평점/판매처로 사람이 읽을 추천 사유 생성"""
    parts = []
    if merchant:
        parts.append(str(merchant))
    if rating:
        parts.append(f"Rating: {rating}")
    return " • ".join(parts) if parts else "Good value"


def first_present(row: dict[str, Any], keys: Iterable[str]) -> Any:
    """키 목록 중 처음으로 값이 있는(None/빈 문자열 아님) 값을 반환"""
    for key in keys:
        value = row.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


@dataclass(frozen=True)
class FieldRules:
    """논리 필드별 추출 규칙 (앞쪽 키 우선)"""

    name: tuple[str, ...] = ("title", "name")
    price: tuple[str, ...] = ("price", "extracted_price", "price_str")
    link: tuple[str, ...] = ("link", "url")
    image: tuple[str, ...] = ("image", "thumbnail")
    rating: tuple[str, ...] = ("rating", "stars")
    merchant: tuple[str, ...] = ("store", "source")


class RowNormalizer:
    """원시 응답 행 → Candidate 변환기

    Usage:
        normalizer = RowNormalizer(RAPIDAPI_RULES, source="rapidapi")
        candidates = normalizer.normalize(rows, limit=3)
    """

    def __init__(self, rules: FieldRules, source: str):
        self.rules = rules
        self.source = source

    def normalize_row(self, row: Any) -> Optional[Candidate]:
        """행 하나를 정규화. 가격/링크/상품명 중 하나라도 없으면 None (폐기)"""
        if not isinstance(row, dict):
            return None

        name = first_present(row, self.rules.name)
        price = parse_price(first_present(row, self.rules.price))
        link = first_present(row, self.rules.link)

        if not isinstance(name, str) or not name.strip():
            return None
        if not isinstance(link, str) or not link.strip():
            return None
        if not math.isfinite(price) or price < 0:
            return None

        image = first_present(row, self.rules.image)
        reason = build_reason(
            rating=first_present(row, self.rules.rating),
            merchant=first_present(row, self.rules.merchant),
        )

        return Candidate(
            name=name.strip(),
            price=price,
            link=link.strip(),
            image=image if isinstance(image, str) else PLACEHOLDER_IMAGE,
            reason=reason,
            source=self.source,
        )

    def normalize(self, rows: Iterable[Any], limit: int) -> list[Candidate]:
        """행 목록 정규화 → 가격 오름차순(안정 정렬) → limit개"""
        rows = list(rows)
        candidates = [c for c in (self.normalize_row(r) for r in rows) if c is not None]

        dropped = len(rows) - len(candidates)
        if dropped:
            logger.debug(f"[{self.source}] dropped {dropped}/{len(rows)} rows during normalization")

        candidates.sort(key=lambda c: c.price)
        return candidates[:limit]
