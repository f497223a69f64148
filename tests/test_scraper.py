"""Tests for the page-scraping providers."""

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from catalog_digest.config import Settings
from catalog_digest.services.scraper import (
    BrowserScraper,
    ScrapingBeeScraper,
    _meta_description,
    build_scraper,
)

_ENDPOINT = "https://app.scrapingbee.com/api/v1/"


def _response(status: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", _ENDPOINT), **kwargs)


class TestScrapingBeeScraper:
    def test_maps_json_response(self):
        get = AsyncMock(
            return_value=_response(json={"meta_description": " Cozy socks. ", "body": "<p>Hi</p>"})
        )
        with patch("httpx.AsyncClient.get", new=get):
            page = asyncio.run(ScrapingBeeScraper("key", _ENDPOINT).render("https://x.com/p1"))

        assert page.meta_description == "Cozy socks."
        assert page.body == "<p>Hi</p>"
        params = get.await_args.kwargs["params"]
        assert params == {"api_key": "key", "url": "https://x.com/p1", "json_response": "true"}

    def test_missing_fields_default(self):
        with patch("httpx.AsyncClient.get", new=AsyncMock(return_value=_response(json={}))):
            page = asyncio.run(ScrapingBeeScraper("key", _ENDPOINT).render("https://x.com/p1"))

        assert page.meta_description == ""
        assert page.body is None

    def test_http_error_propagates(self):
        with patch("httpx.AsyncClient.get", new=AsyncMock(return_value=_response(500))):
            with pytest.raises(httpx.HTTPStatusError):
                asyncio.run(ScrapingBeeScraper("key", _ENDPOINT).render("https://x.com/p1"))

    def test_non_object_json_raises(self):
        with patch("httpx.AsyncClient.get", new=AsyncMock(return_value=_response(json=[1, 2]))):
            with pytest.raises(ValueError):
                asyncio.run(ScrapingBeeScraper("key", _ENDPOINT).render("https://x.com/p1"))

    def test_missing_api_key_raises(self):
        with pytest.raises(RuntimeError):
            asyncio.run(ScrapingBeeScraper("", _ENDPOINT).render("https://x.com/p1"))


class TestMetaDescription:
    def test_name_description(self):
        html = '<html><head><meta name="description" content=" Warm hat "></head></html>'
        assert _meta_description(html) == "Warm hat"

    def test_og_description_fallback(self):
        html = '<html><head><meta property="og:description" content="OG text"></head></html>'
        assert _meta_description(html) == "OG text"

    def test_absent(self):
        assert _meta_description("<html><body><p>Body</p></body></html>") == ""


class TestBuildScraper:
    def test_scrapingbee_by_default(self):
        scraper = build_scraper(Settings(scrapingbee_api_key="key", scraper_timeout=30))
        assert isinstance(scraper, ScrapingBeeScraper)
        assert scraper.api_key == "key"
        assert scraper.timeout == 30

    def test_browser_backend(self):
        scraper = build_scraper(Settings(scraper="browser", scraper_timeout=12))
        assert isinstance(scraper, BrowserScraper)
        assert scraper.timeout_ms == 12_000

    def test_browser_rejects_non_http_url(self):
        with pytest.raises(ValueError):
            asyncio.run(BrowserScraper().render("file:///etc/passwd"))
