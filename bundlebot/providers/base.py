"""Provider Protocol - Interface for product-search adapters

Defines the common interface that every candidate source must implement.
"""

from typing import Protocol

from bundlebot.schemas import Candidate


class ProviderAdapter(Protocol):
    """상품 검색 공급자 프로토콜

    구현 예시:
        class MyProvider:
            name = "my-provider"

            @property
            def is_configured(self) -> bool:
                return bool(self.api_key)

            async def fetch(self, query: str, limit: int, timeout: float) -> list[Candidate]:
                ...
    """

    name: str
    job_based: bool  # True면 작업 폴링형 (job 타임아웃 적용)

    @property
    def is_configured(self) -> bool:
        """자격 증명이 있어 호출 가능한지 여부 (False면 네트워크 호출 없이 건너뜀)"""
        ...

    async def fetch(self, query: str, limit: int, timeout: float) -> list[Candidate]:
        """검색 실행

        Args:
            query: 검색어 (카테고리)
            limit: 최대 후보 수
            timeout: 호출 전체 타임아웃 (초)

        Returns:
            list[Candidate]: 가격 오름차순, 최대 limit개, 비어 있지 않음

        Raises:
            ProviderError: 네트워크/상태 코드/파싱 실패 또는 정규화 후 0건
            TimeoutError: 작업형 공급자의 작업 미완료/실패
        """
        ...
