"""공유 HTTP 클라이언트 (curl_cffi)

- 요청마다 AsyncSession을 만들면 TLS/커넥션 오버헤드가 커지므로
  프로세스 단위로 세션을 재사용합니다.
- 공급자 API와 OpenAI는 모두 JSON이므로 JSON 응답 헬퍼만 제공합니다.
- 앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional, Dict

from curl_cffi.requests import AsyncSession

from bundlebot.core.config import settings
from bundlebot.core.logging import logger


@dataclass
class JsonResponse:
    status: int
    payload: Any = None  # JSON 파싱 실패 시 None
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class SharedHttpClient:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._session: Optional[AsyncSession] = None

    async def _ensure_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                impersonate=settings.http_impersonate,
                headers=self.default_headers(),
                allow_redirects=True,
                max_clients=settings.http_max_clients,
                trust_env=False,
            )
            return self._session

    def default_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Accept-Language": "en-US,en;q=0.9",
        }

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        timeout_s: float,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Optional[JsonResponse]:
        """JSON 요청. 전송 단계 실패(연결/타임아웃) 시 None"""
        sess = await self._ensure_session()
        try:
            resp = await sess.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                timeout=timeout_s,
            )
        except Exception as e:
            logger.info(f"[HTTP_CLIENT] {method} failed: {type(e).__name__}: {repr(e)}")
            return None

        status = getattr(resp, "status_code", 0) or 0
        text = getattr(resp, "text", "") or ""
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        return JsonResponse(status=status, payload=payload, text=text)

    async def get_json(self, url: str, *, timeout_s: float, **kwargs: Any) -> Optional[JsonResponse]:
        return await self.request_json("GET", url, timeout_s=timeout_s, **kwargs)

    async def post_json(self, url: str, *, timeout_s: float, **kwargs: Any) -> Optional[JsonResponse]:
        return await self.request_json("POST", url, timeout_s=timeout_s, **kwargs)

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                return
            try:
                await self._session.close()
            except Exception as e:
                logger.debug(f"[HTTP_CLIENT] close failed: {type(e).__name__}")
            self._session = None


_shared_http_client = SharedHttpClient()


def get_shared_http_client() -> SharedHttpClient:
    return _shared_http_client


async def shutdown_shared_http_client() -> None:
    await _shared_http_client.close()
