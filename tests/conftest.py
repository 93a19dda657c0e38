"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
from sitestage.config import Config, ServerConfig, SiteConfig, SitemapConfig
from sitestage.core.registry import RouteRegistry
from sitestage.core.resolver import Resolver
from sitestage.routes import default_registry

ORIGIN = "https://www.example.com"

SUCCESS_STORIES = {
    "records": [
        {
            "id": "hector",
            "summary": {"de": "Hector Zusammenfassung", "en": "Hector summary"},
            "metaDescription": {"de": "Hector Beschreibung", "en": "Hector description"},
            "relatedStories": [
                {"id": "nested-story", "summary": {"de": "Nested", "en": "Nested"}},
            ],
        },
        {
            "id": "megatron",
            "summary": {"de": "Megatron Zusammenfassung", "en": "Megatron summary"},
        },
        {
            "id": "idm",
            "summary": {"de": "IDM Zusammenfassung", "en": "IDM summary"},
        },
    ],
}

USE_CASES = {
    "records": [
        {
            "id": "order-to-cash",
            "title": {"de": "Order-to-Cash", "en": "Order to Cash"},
            "additionalUseCases": [{"id": "credit-check"}],
        },
    ],
}


@pytest.fixture
def registry() -> RouteRegistry:
    return default_registry()


@pytest.fixture
def resolver(registry: RouteRegistry) -> Resolver:
    return Resolver(registry)


@pytest.fixture
def catalog_dir(tmp_path: Path) -> Path:
    """Write sample catalogs to tmp_path/content."""
    content = tmp_path / "content"
    content.mkdir(exist_ok=True)
    (content / "success_stories.json").write_text(json.dumps(SUCCESS_STORIES))
    (content / "use_cases.json").write_text(json.dumps(USE_CASES))
    return content


@pytest.fixture
def test_config(tmp_path: Path, catalog_dir: Path) -> Config:
    """Create a test configuration with tmp_path catalogs and output.

    Uses the built-in registry and no string table.
    """
    return Config(
        server=ServerConfig(),
        site=SiteConfig(origin=ORIGIN, default_description="Default description"),
        sitemap=SitemapConfig(output=tmp_path / "public" / "sitemap.xml"),
        catalogs={
            "successStories": catalog_dir / "success_stories.json",
            "useCases": catalog_dir / "use_cases.json",
        },
    )
