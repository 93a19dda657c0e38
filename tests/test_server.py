"""Tests for the resolution API server."""

import json
from dataclasses import replace
from pathlib import Path

import pytest
from aiohttp.test_utils import TestClient
from sitestage.config import Config
from sitestage.server import create_app
from sitestage.site import Site


@pytest.fixture
def client(test_config: Config, aiohttp_client) -> TestClient:
    """Create test client with configured app."""
    app = create_app(test_config)
    return aiohttp_client(app)


class TestCreateApp:
    """Tests for create_app()."""

    def test__preloaded_site__used(self, test_config: Config) -> None:
        site = Site.from_config(test_config)

        app = create_app(test_config, site=site)

        assert len(app.router.routes()) > 0


class TestGetResolve:
    """Tests for GET /api/resolve/{path}."""

    @pytest.mark.asyncio
    async def test__static_path__returns_key(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/resolve/de/preise")

        assert response.status == 200
        assert await response.json() == {
            "key": "pricing",
            "locale": "de",
            "dynamicValue": None,
        }

    @pytest.mark.asyncio
    async def test__dynamic_path__returns_value(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/resolve/en/use-cases/order-to-cash")

        assert response.status == 200
        data = await response.json()
        assert data["key"] == "useCases"
        assert data["dynamicValue"] == "order-to-cash"

    @pytest.mark.asyncio
    async def test__unknown_path__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/resolve/en/nope")

        assert response.status == 404
        data = await response.json()
        assert data["error"] == "Route not found"
        assert data["path"] == "en/nope"


class TestGetTranslate:
    """Tests for GET /api/translate."""

    @pytest.mark.asyncio
    async def test__translates_path(self, client) -> None:
        test_client = await client
        response = await test_client.get(
            "/api/translate",
            params={"path": "/de/success-story/hector", "locale": "en"},
        )

        assert response.status == 200
        assert await response.json() == {"path": "/en/success-story/hector"}

    @pytest.mark.asyncio
    async def test__unresolvable_path__returns_locale_root(self, client) -> None:
        test_client = await client
        response = await test_client.get(
            "/api/translate",
            params={"path": "/de/gibt-es-nicht", "locale": "en"},
        )

        assert await response.json() == {"path": "/en"}

    @pytest.mark.asyncio
    async def test__missing_locale__returns_400(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/translate", params={"path": "/de"})

        assert response.status == 400


class TestGetHead:
    """Tests for GET /api/head."""

    @pytest.mark.asyncio
    async def test__content_page__returns_record_description(self, client) -> None:
        test_client = await client
        response = await test_client.get(
            "/api/head",
            params={"path": "/en/success-story/hector/"},
        )

        assert response.status == 200
        assert await response.json() == {
            "canonical": "https://www.example.com/en/success-story/hector",
            "description": "Hector description",
            "lang": "en",
        }

    @pytest.mark.asyncio
    async def test__static_page__returns_default_description(self, client) -> None:
        test_client = await client
        response = await test_client.get("/api/head", params={"path": "/de/team"})

        data = await response.json()
        assert data["description"] == "Default description"
        assert data["lang"] == "de"


class TestGetNavigation:
    """Tests for GET /api/navigation."""

    @pytest.mark.asyncio
    async def test__returns_items_and_languages(self, client) -> None:
        test_client = await client
        response = await test_client.get(
            "/api/navigation",
            params={"path": "/en/success-stories/2024"},
        )

        assert response.status == 200
        data = await response.json()
        assert data["locale"] == "en"
        assert len(data["items"]) == 7
        active = [item["key"] for item in data["items"] if item["active"]]
        assert active == ["successStories"]
        assert [link["locale"] for link in data["languages"]] == ["de", "en"]


class TestGetSitemap:
    """Tests for GET /sitemap.xml."""

    @pytest.mark.asyncio
    async def test__returns_xml(self, client) -> None:
        test_client = await client
        response = await test_client.get("/sitemap.xml")

        assert response.status == 200
        assert response.content_type == "application/xml"
        body = await response.text()
        assert "<loc>https://www.example.com/de/use-cases/order-to-cash</loc>" in body

    @pytest.mark.asyncio
    async def test__missing_catalog__returns_500(
        self,
        test_config: Config,
        aiohttp_client,
    ) -> None:
        """Report a failed build instead of serving a partial sitemap."""
        config = replace(test_config, catalogs={})
        test_client = await aiohttp_client(create_app(config))

        response = await test_client.get("/sitemap.xml")

        assert response.status == 500
        assert await response.json() == {"error": "Sitemap build failed"}

    @pytest.mark.asyncio
    async def test__shadowed_record__returns_500(
        self,
        tmp_path: Path,
        test_config: Config,
        aiohttp_client,
    ) -> None:
        """Answer registry violations found during the build with JSON."""
        registry_file = tmp_path / "routes.toml"
        registry_file.write_text("""
locales = ["en"]

[[routes]]
key = "featured"
paths = { en = "/en/stories/featured" }

[[routes]]
key = "story"
catalog = "stories"
paths = { en = "/en/stories/:id" }
""")
        stories = tmp_path / "stories.json"
        stories.write_text(json.dumps({"records": [{"id": "featured"}]}))
        config = replace(
            test_config,
            site=replace(test_config.site, registry_file=registry_file),
            catalogs={"stories": stories},
        )
        test_client = await aiohttp_client(create_app(config))

        response = await test_client.get("/sitemap.xml")

        assert response.status == 500
        assert await response.json() == {"error": "Sitemap build failed"}
