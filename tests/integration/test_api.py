"""API 통합 테스트 (FastAPI 앱 + 가짜 공급자)"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from bundlebot.api import get_bundle_service, get_candidate_cache
from bundlebot.api.routes import bundle_routes
from bundlebot.app import create_app
from bundlebot.core.config import settings
from bundlebot.engine import CandidateAggregator, CandidateCache
from bundlebot.providers import SourceFallbackChain
from bundlebot.services import BundleService, SpecTranslator
from tests.fakes import FakeHttpClient, FakeProvider, make_candidate
from tests.fixtures import API_PAYLOADS

app = create_app()


def client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


def make_service(cache: CandidateCache) -> BundleService:
    primary = FakeProvider(
        "rapidapi",
        by_query={
            "bedding": [make_candidate("Pillow Pack", 24.99), make_candidate("Quilt Set", 79.99)],
            "lighting": [make_candidate("Book Light", 13.99)],
            "storage": [make_candidate("Hooks", 7.25)],
        },
        results=[make_candidate("Generic", 99.0)],
    )
    translator = SpecTranslator(api_key="", http_client=FakeHttpClient(lambda *a: None))
    aggregator = CandidateAggregator(cache=cache, chain=SourceFallbackChain(primary=primary))
    return BundleService(translator=translator, aggregator=aggregator, provider_host="shopping.example.com")


class SlowService:
    async def build(self, request):
        await asyncio.sleep(5)


@pytest.fixture
def overrides():
    cache = CandidateCache()
    app.dependency_overrides[get_candidate_cache] = lambda: cache
    app.dependency_overrides[get_bundle_service] = lambda: make_service(cache)
    yield app.dependency_overrides
    app.dependency_overrides.clear()


@pytest.mark.asyncio
class TestHealthAPI:
    """헬스 체크 API 테스트"""

    async def test_health_check(self, overrides) -> None:
        async with client() as c:
            response = await c.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["providers"]["demo"] is True
        assert data["providers"]["rapidapi"] is False
        assert data["cache_entries"] == 0
        assert "timestamp" in data
        assert "version" in data

    async def test_root_endpoint(self) -> None:
        async with client() as c:
            response = await c.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "BundleBot"
        assert data["docs"] == "/docs"


@pytest.mark.asyncio
class TestBuildBundleAPI:
    """번들 생성 API 테스트"""

    async def test_build_bundle(self, overrides) -> None:
        async with client() as c:
            response = await c.post("/api/build-bundle", json=API_PAYLOADS["dorm"])

        assert response.status_code == 200
        data = response.json()
        assert data["budget"] == 60
        assert data["total"] == 46.23
        assert [item["name"] for item in data["items"]] == ["Pillow Pack", "Book Light", "Hooks"]
        assert data["items"][0]["category"] == "bedding"
        assert "note" not in data
        assert "debug" not in data

    async def test_build_bundle_debug(self, overrides) -> None:
        async with client() as c:
            response = await c.post("/api/build-bundle", json=API_PAYLOADS["dorm_debug"])

        assert response.status_code == 200
        debug = response.json()["debug"]
        assert debug["provider_host"] == "shopping.example.com"
        assert debug["categories"][:3] == ["bedding", "lighting", "storage"]
        assert debug["sources"]["bedding"] == "primary"

    async def test_invalid_budget_treated_as_absent(self, overrides) -> None:
        async with client() as c:
            response = await c.post("/api/build-bundle", json=API_PAYLOADS["string_budget"])

        assert response.status_code == 200
        assert response.json()["budget"] == 500

    async def test_second_request_served_from_cache(self, overrides) -> None:
        async with client() as c:
            await c.post("/api/build-bundle", json=API_PAYLOADS["dorm"])
            response = await c.post("/api/build-bundle", json=API_PAYLOADS["dorm_debug"])

        sources = response.json()["debug"]["sources"]
        assert set(sources.values()) == {"cache"}

    async def test_get_not_allowed(self, overrides) -> None:
        async with client() as c:
            response = await c.get("/api/build-bundle")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}

    async def test_unknown_route_uses_error_shape(self, overrides) -> None:
        async with client() as c:
            response = await c.get("/api/unknown")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    async def test_long_prompt_accepted(self, overrides) -> None:
        async with client() as c:
            response = await c.post("/api/build-bundle", json={"prompt": "dorm " * 500, "budget": 60})

        assert response.status_code == 200
        data = response.json()
        assert data["items"]
        assert data["title"].startswith("Bundle for: dorm dorm")

    @pytest.mark.parametrize("payload", ["empty_prompt", "missing_prompt"])
    async def test_missing_prompt(self, overrides, payload) -> None:
        async with client() as c:
            response = await c.post("/api/build-bundle", json=API_PAYLOADS[payload])

        assert response.status_code == 400
        assert response.json() == {"error": "Missing prompt"}

    async def test_malformed_body(self, overrides) -> None:
        async with client() as c:
            response = await c.post(
                "/api/build-bundle",
                content=b"{not json",
                headers={"Content-Type": "application/json"},
            )

        assert response.status_code == 400
        assert "error" in response.json()

    async def test_internal_failure_returns_fallback(self, overrides) -> None:
        broken = AsyncMock()
        broken.build.side_effect = RuntimeError("unexpected shape")
        overrides[get_bundle_service] = lambda: broken

        async with client() as c:
            response = await c.post("/api/build-bundle", json=API_PAYLOADS["dorm"])

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Bundle (Fallback)"
        assert data["total"] == 117.97
        assert data["note"] == "Fallback mode due to server error"
        assert len(data["items"]) == 3

    async def test_pipeline_timeout_returns_fallback(self, overrides, monkeypatch) -> None:
        overrides[get_bundle_service] = lambda: SlowService()
        monkeypatch.setattr(settings, "api_build_timeout_s", 0.05)

        async with client() as c:
            response = await c.post("/api/build-bundle", json=API_PAYLOADS["dorm"])

        assert response.status_code == 200
        assert response.json()["note"] == "Fallback mode due to server error"

    async def test_broken_service_called_once(self, overrides) -> None:
        broken = AsyncMock()
        broken.build.side_effect = KeyError("choices")
        overrides[get_bundle_service] = lambda: broken

        async with client() as c:
            response = await c.post("/api/build-bundle", json=API_PAYLOADS["no_budget"])

        assert response.status_code == 200
        broken.build.assert_awaited_once()
        assert broken.build.await_args.args[0].prompt == "camping weekend"


class TestDependencies:
    """싱글톤 의존성 테스트"""

    def test_bundle_service_built_once(self, monkeypatch) -> None:
        monkeypatch.setattr(bundle_routes, "_bundle_service", None)
        cache = CandidateCache()

        with patch.object(bundle_routes, "create_bundle_service", return_value=MagicMock()) as factory:
            first = bundle_routes.get_bundle_service(cache)
            second = bundle_routes.get_bundle_service(cache)

        assert first is second
        factory.assert_called_once_with(cache)

    def test_candidate_cache_singleton(self, monkeypatch) -> None:
        monkeypatch.setattr(bundle_routes, "_candidate_cache", None)

        cache = bundle_routes.get_candidate_cache()

        assert cache is bundle_routes.get_candidate_cache()
        assert cache.ttl_seconds == settings.cache_ttl
