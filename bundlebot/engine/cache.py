"""Candidate Cache - Process-local TTL store

카테고리별 후보 목록을 45분 동안 보관합니다.
- 만료는 조회 시점에만 판단 (lazy expiry, 선제적 삭제 없음)
- clock 주입으로 TTL을 실제 대기 없이 테스트
- set은 잠금 안에서 항목을 통째로 교체
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from bundlebot.core.logging import logger
from bundlebot.schemas import Candidate

DEFAULT_TTL_SECONDS = 45 * 60

Clock = Callable[[], float]


def build_cache_key(category: str, limit: int) -> str:
    """(카테고리, 조회 수)로 캐시 키 생성

    Args:
        category: 카테고리 (대소문자 무시)
        limit: 카테고리별 조회 수

    Returns:
        캐시 키 (예: "q:bedding|l:3")
    """
    return f"q:{category.strip().lower()}|l:{limit}"


@dataclass(frozen=True)
class CacheEntry:
    key: str
    timestamp: float
    candidates: tuple[Candidate, ...]


class CandidateCache:
    """TTL 기반 후보 캐시

    Usage:
        cache = CandidateCache(ttl_seconds=2700)
        cache.set("q:bedding|l:3", candidates)
        cached = cache.get("q:bedding|l:3")  # 만료 또는 미저장이면 None
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Optional[Clock] = None):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock: Clock = clock or time.monotonic
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[list[Candidate]]:
        """캐시 조회

        미저장 키와 만료된 키를 구분하지 않고 모두 None을 반환합니다.
        """
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"[Cache] miss: key={key}")
            return None

        age = self._clock() - entry.timestamp
        if age >= self.ttl_seconds:
            logger.debug(f"[Cache] stale: key={key}, age={age:.1f}s")
            return None

        logger.debug(f"[Cache] hit: key={key}, size={len(entry.candidates)}")
        return list(entry.candidates)

    def set(self, key: str, candidates: list[Candidate]) -> None:
        """캐시 저장 (기존 항목은 새 타임스탬프로 교체)"""
        entry = CacheEntry(key=key, timestamp=self._clock(), candidates=tuple(candidates))
        with self._lock:
            self._entries[key] = entry
        logger.info(f"[Cache] set: key={key}, size={len(entry.candidates)}, ttl={self.ttl_seconds}s")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
