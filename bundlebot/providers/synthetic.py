"""Synthetic placeholder provider (last stage of the fallback chain)."""

from __future__ import annotations

import re
import string

from bundlebot.schemas import PLACEHOLDER_IMAGE, Candidate

# 고정 가격대 (앞의 세 개는 고정, 이후는 7.50씩 증가)
BASE_PRICE_POINTS = (24.99, 32.50, 18.75)
PRICE_STEP = 7.50

_REASONS = (
    "Good reviews • Low price",
    "Solid quality • Popular pick",
    "Cheapest viable option",
)


def capitalize_words(text: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), str(text or ""))


def _option_label(index: int) -> str:
    letters = string.ascii_uppercase
    if index < len(letters):
        return letters[index]
    return f"{letters[index % len(letters)]}{index // len(letters)}"


class SyntheticProvider:
    """외부 공급자가 모두 실패해도 결과가 비지 않도록 하는 결정적 더미 후보 생성기

    항상 설정된 것으로 간주되며 네트워크 호출이 없고 예외를 던지지 않습니다.
    """

    name = "demo"
    job_based = False

    @property
    def is_configured(self) -> bool:
        return True

    def generate(self, query: str, limit: int) -> list[Candidate]:
        """정확히 max(1, limit)개의 후보를 가격 오름차순으로 생성"""
        count = max(1, limit)
        title = capitalize_words(query.strip()) or "Item"
        slug = re.sub(r"[^a-z0-9]+", "-", query.strip().lower()).strip("-") or "item"

        candidates = []
        for i in range(count):
            if i < len(BASE_PRICE_POINTS):
                price = BASE_PRICE_POINTS[i]
            else:
                price = round(max(BASE_PRICE_POINTS) + PRICE_STEP * (i - len(BASE_PRICE_POINTS) + 1), 2)
            label = _option_label(i)
            candidates.append(
                Candidate(
                    name=f"{title} — Option {label}",
                    price=price,
                    link=f"https://example.com/{slug}/{label.lower()}",
                    image=PLACEHOLDER_IMAGE,
                    reason=_REASONS[i] if i < len(_REASONS) else "Good value",
                    source=self.name,
                )
            )

        candidates.sort(key=lambda c: c.price)
        return candidates

    async def fetch(self, query: str, limit: int, timeout: float = 0.0) -> list[Candidate]:
        return self.generate(query, limit)
