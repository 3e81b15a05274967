from __future__ import annotations

import json
from typing import Callable, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from recipe_ingest.app.deps import get_ingest_service, get_recipe_store
from recipe_ingest.app.infra.store.memory import InMemoryRecipeStore
from recipe_ingest.app.main import app
from recipe_ingest.services.errors import ModelCallError, RateLimitedError
from recipe_ingest.services.ingest import IngestService

TIKTOK_URL = "https://www.tiktok.com/@chef/video/7301234567890"
INSTAGRAM_URL = "https://www.instagram.com/reel/Cx1AbC2dEf/"
PAGE_URL = "https://example.com/recipes/soup"

STRUCTURED_PAGE = (
    '<html><head><script type="application/ld+json">'
    + json.dumps({"@type": "Recipe", "name": "Tomato Soup", "totalTime": "PT1H30M"})
    + "</script></head><body></body></html>"
)


class ModelClientStub:
    def __init__(self, output: str = '{"title": "Garlic Noodles"}', error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.calls = 0

    def generate(self, prompt: str, **kwargs: object) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.output


def default_handler(request: httpx.Request) -> httpx.Response:
    if request.url.host in ("www.tiktok.com", "api.instagram.com"):
        return httpx.Response(200, json={"title": "caption with a recipe", "thumbnail_url": "https://cdn/t.jpg"})
    return httpx.Response(200, text=STRUCTURED_PAGE)


class Harness:
    def __init__(self) -> None:
        self.store = InMemoryRecipeStore()
        self.model = ModelClientStub()
        self.handler: Callable[[httpx.Request], httpx.Response] = default_handler

    def service(self) -> IngestService:
        return IngestService(
            self.store,
            self.model,
            http_client=httpx.Client(transport=httpx.MockTransport(self.handler)),
        )


@pytest.fixture
def harness() -> Iterator[Harness]:
    state = Harness()
    app.dependency_overrides[get_ingest_service] = state.service
    app.dependency_overrides[get_recipe_store] = lambda: state.store
    yield state
    app.dependency_overrides.clear()


@pytest.fixture
def client(harness: Harness) -> TestClient:
    return TestClient(app)


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["ok"] is True


class TestAutoExtractRoutes:
    def test_tiktok(self, client: TestClient, harness: Harness) -> None:
        response = client.post("/api/tiktok/auto-extract", json={"tiktokUrl": TIKTOK_URL, "userId": "u1"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Recipe extracted from TikTok and saved!"
        assert body["recipe"]["title"] == "Garlic Noodles"
        assert body["recipe"]["source"] == "TikTok"
        assert body["recipe"]["sourceUrl"] == TIKTOK_URL
        assert body["recipe"]["thumbnailUrl"] == "https://cdn/t.jpg"
        assert body["recipe"]["ownerId"] == "u1"
        assert harness.model.calls == 1

    def test_instagram(self, client: TestClient) -> None:
        response = client.post("/api/instagram/auto-extract", json={"instagramUrl": INSTAGRAM_URL, "userId": "u1"})

        assert response.status_code == 200
        assert response.json()["recipe"]["source"] == "Instagram"

    def test_website_structured(self, client: TestClient, harness: Harness) -> None:
        response = client.post("/api/website/auto-extract", json={"websiteUrl": PAGE_URL, "userId": "u1"})

        assert response.status_code == 200
        recipe = response.json()["recipe"]
        assert recipe["title"] == "Tomato Soup"
        assert recipe["totalTime"] == "1h 30min"
        assert recipe["ingredients"] == []
        assert harness.model.calls == 0

    def test_generic_route_detects_platform(self, client: TestClient) -> None:
        response = client.post("/api/auto-extract", json={"url": INSTAGRAM_URL, "userId": "u1"})

        assert response.status_code == 200
        assert response.json()["recipe"]["source"] == "Instagram"

    def test_image(self, client: TestClient) -> None:
        response = client.post(
            "/api/image/auto-extract",
            json={"image": "data:image/png;base64,iVBORw0KGgo=", "userId": "u1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["recipe"]["source"] == "ImageScan"
        assert body["recipe"]["sourceUrl"] == ""
        assert body["message"] == "Recipe extracted from image and saved!"

    def test_missing_user_is_rejected(self, client: TestClient) -> None:
        response = client.post("/api/tiktok/auto-extract", json={"tiktokUrl": TIKTOK_URL})
        assert response.status_code == 422


class TestErrorMapping:
    def test_wrong_platform_is_a_fetch_error(self, client: TestClient, harness: Harness) -> None:
        response = client.post("/api/tiktok/auto-extract", json={"url": PAGE_URL, "userId": "u1"})

        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "fetch_error"
        assert harness.store.list_by_owner("u1") == []

    def test_malformed_output(self, client: TestClient, harness: Harness) -> None:
        harness.model.output = "I'm sorry, there is no recipe here."

        response = client.post("/api/tiktok/auto-extract", json={"url": TIKTOK_URL, "userId": "u1"})

        assert response.status_code == 422
        assert response.json()["detail"] == {
            "kind": "malformed_output",
            "message": "Could not extract recipe from source",
        }
        assert harness.store.list_by_owner("u1") == []

    def test_rate_limited(self, client: TestClient, harness: Harness) -> None:
        harness.model.error = RateLimitedError("quota")

        response = client.post("/api/tiktok/auto-extract", json={"url": TIKTOK_URL, "userId": "u1"})

        assert response.status_code == 429
        assert response.json()["detail"]["kind"] == "rate_limited"

    def test_model_failure(self, client: TestClient, harness: Harness) -> None:
        harness.model.error = ModelCallError("upstream down")

        response = client.post("/api/tiktok/auto-extract", json={"url": TIKTOK_URL, "userId": "u1"})

        assert response.status_code == 502
        assert "upstream down" not in response.text

    def test_unexpected_error(self, client: TestClient, harness: Harness) -> None:
        harness.model.error = RuntimeError("boom")

        response = client.post("/api/tiktok/auto-extract", json={"url": TIKTOK_URL, "userId": "u1"})

        assert response.status_code == 500
        assert response.json()["detail"]["kind"] == "internal_error"


class TestRecipeRoutes:
    def test_list_and_favorite(self, client: TestClient) -> None:
        created = client.post("/api/website/auto-extract", json={"url": PAGE_URL, "userId": "u1"}).json()["recipe"]

        listed = client.get("/api/recipes/u1").json()
        assert [r["id"] for r in listed["recipes"]] == [created["id"]]
        assert client.get("/api/recipes/u2").json()["recipes"] == []

        favorited = client.post(f"/api/recipes/u1/{created['id']}/favorite")
        assert favorited.status_code == 200
        assert favorited.json()["favorite"] is True

        unfavorited = client.delete(f"/api/recipes/u1/{created['id']}/favorite")
        assert unfavorited.json()["favorite"] is False

    def test_favorite_unknown_recipe(self, client: TestClient) -> None:
        response = client.post("/api/recipes/u1/missing/favorite")
        assert response.status_code == 404
        assert response.json()["detail"]["kind"] == "not_found"


class TestPreviewRoute:
    def test_preview_is_not_saved(self, client: TestClient, harness: Harness) -> None:
        response = client.post("/api/test-extract", json={"caption": "Noodles with garlic", "source": "Instagram"})

        assert response.status_code == 200
        body = response.json()
        assert body["recipe"]["title"] == "Garlic Noodles"
        assert body["recipe"]["source"] == "Instagram"
        assert body["message"] == "Preview only, not saved"
        assert harness.store.list_by_owner("") == []

    def test_blank_caption(self, client: TestClient) -> None:
        response = client.post("/api/test-extract", json={"caption": "   "})
        assert response.status_code == 400
