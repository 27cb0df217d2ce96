"""Apify actor provider (secondary source, job-based).

원격 작업(actor run)을 시작하고, 고정 간격으로 상태를 폴링하다가
성공하면 결과 데이터셋을 가져옵니다.

    PENDING ──▶ SUCCEEDED ──▶ dataset fetch
       │
       └──────▶ FAILED | ABORTED | TIMED_OUT ──▶ TimeoutError (즉시)
    (deadline 초과) ──────────────────────────▶ TimeoutError

대기는 asyncio.sleep이므로 호출 태스크가 취소되면 대기도 함께 취소됩니다.
"""

from __future__ import annotations

import asyncio
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from bundlebot.core.logging import logger
from bundlebot.engine.exceptions import ProviderError, TimeoutError
from bundlebot.schemas import Candidate

from .http_client import JsonResponse, SharedHttpClient, get_shared_http_client
from .normalization import FieldRules, RowNormalizer

APIFY_RULES = FieldRules(
    name=("title", "name"),
    price=("price", "extracted_price", "price_str"),
    link=("link", "url"),
    image=("image", "thumbnail"),
    rating=("rating", "stars"),
    merchant=("store", "source"),
)


class JobState(str, Enum):
    """원격 작업 상태"""

    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    ABORTED = "ABORTED"
    TIMED_OUT = "TIMED_OUT"

    @classmethod
    def from_status(cls, status: Any) -> "JobState":
        """Apify 상태 문자열 → JobState (READY/RUNNING/ABORTING 등은 PENDING)"""
        normalized = str(status or "").strip().upper().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            return cls.PENDING

    @property
    def is_terminal(self) -> bool:
        return self != JobState.PENDING

    @property
    def is_failure(self) -> bool:
        return self in (JobState.FAILED, JobState.ABORTED, JobState.TIMED_OUT)


class ApifyActorProvider:
    """Apify actor 어댑터"""

    name = "apify"
    job_based = True

    def __init__(
        self,
        token: str,
        actor_id: str,
        base_url: str = "https://api.apify.com/v2",
        poll_interval_s: float = 1.2,
        max_wait_s: float = 15.0,
        http_client: Optional[SharedHttpClient] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.token = token
        self.actor_id = actor_id
        self.base_url = base_url.rstrip("/")
        self.poll_interval_s = poll_interval_s
        self.max_wait_s = max_wait_s
        self.http = http_client or get_shared_http_client()
        self._sleep = sleep or asyncio.sleep
        self._clock = clock or time.monotonic
        self.normalizer = RowNormalizer(APIFY_RULES, source=self.name)

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.actor_id)

    async def fetch(self, query: str, limit: int, timeout: float = 15.0) -> list[Candidate]:
        if not self.is_configured:
            raise ProviderError(self.name, "not configured")

        wait_s = min(self.max_wait_s, timeout)
        deadline = self._clock() + wait_s
        fetch_count = max(3, limit)

        run_id = await self._start_run(query, fetch_count, deadline)
        logger.debug(f"[Apify] run started: run_id={run_id}, query='{query}'")

        state = JobState.PENDING
        while self._clock() < deadline:
            await self._sleep(min(self.poll_interval_s, max(0.0, deadline - self._clock())))

            run = await self._poll_run(run_id, deadline)
            state = JobState.from_status(run.get("status"))

            if state == JobState.SUCCEEDED:
                dataset_id = run.get("defaultDatasetId")
                if not dataset_id:
                    raise ProviderError(self.name, "dataset id missing")
                return await self._fetch_dataset(dataset_id, fetch_count, limit, deadline)

            if state.is_failure:
                raise TimeoutError(self.name, f"run ended with {state.value}", state=state.value)

        raise TimeoutError(
            self.name,
            f"run did not complete within {wait_s:.1f}s",
            state=state.value,
        )

    def _request_timeout(self, deadline: float) -> float:
        return max(0.1, deadline - self._clock())

    async def _start_run(self, query: str, fetch_count: int, deadline: float) -> str:
        resp = await self.http.post_json(
            f"{self.base_url}/acts/{self.actor_id}/runs",
            timeout_s=self._request_timeout(deadline),
            params={"token": self.token},
            json={"input": {"query": query, "maxItems": fetch_count}},
        )
        data = self._data_or_raise(resp, "start")
        run_id = data.get("id")
        if not run_id:
            raise ProviderError(self.name, "run id missing", status=resp.status if resp else None)
        return str(run_id)

    async def _poll_run(self, run_id: str, deadline: float) -> dict[str, Any]:
        resp = await self.http.get_json(
            f"{self.base_url}/actor-runs/{run_id}",
            timeout_s=self._request_timeout(deadline),
            params={"token": self.token},
        )
        return self._data_or_raise(resp, "poll")

    async def _fetch_dataset(self, dataset_id: str, fetch_count: int, limit: int, deadline: float) -> list[Candidate]:
        resp = await self.http.get_json(
            f"{self.base_url}/datasets/{dataset_id}/items",
            timeout_s=self._request_timeout(deadline),
            params={"token": self.token, "limit": str(fetch_count)},
        )
        if resp is None:
            raise ProviderError(self.name, "network failure (dataset)")
        if not resp.ok:
            raise ProviderError(self.name, f"dataset: {resp.text[:200]}", status=resp.status)

        rows = resp.payload if isinstance(resp.payload, list) else []
        candidates = self.normalizer.normalize(rows, limit)
        if not candidates:
            raise ProviderError(self.name, "no rows survived normalization", status=resp.status)
        return candidates

    def _data_or_raise(self, resp: Optional[JsonResponse], stage: str) -> dict[str, Any]:
        if resp is None:
            raise ProviderError(self.name, f"network failure ({stage})")
        if not resp.ok:
            raise ProviderError(self.name, f"{stage}: {resp.text[:200]}", status=resp.status)
        payload = resp.payload
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise ProviderError(self.name, f"{stage}: malformed payload", status=resp.status)
        return data
