"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 주입
- 전역 상태 초기화

금지:
- 실제 외부 호출 (OpenAI/RapidAPI/Apify)
- 테스트 데이터 정의 (fixtures 패키지 사용)
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# 설정 모듈 import 전에 외부 자격 증명을 비워 둔다
for _key in ("OPENAI_API_KEY", "RAPIDAPI_KEY", "RAPIDAPI_HOST", "APIFY_TOKEN", "APIFY_ACTOR_ID"):
    os.environ[_key] = ""

from bundlebot.engine import CandidateCache  # noqa: E402

from tests.fakes import FakeClock  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(fake_clock: FakeClock) -> CandidateCache:
    """가짜 시계를 쓰는 빈 캐시 (45분 TTL)"""
    return CandidateCache(ttl_seconds=2700, clock=fake_clock)
