"""Page-scraping providers.

The description stage only depends on :class:`PageScraper`: give it a URL,
get back a :class:`~catalog_digest.models.page.RenderedPage`.  Two providers
are shipped:

``ScrapingBeeScraper``
    Delegates rendering to the ScrapingBee API (``json_response=true``), which
    returns the rendered body plus a server-derived meta description.

``BrowserScraper``
    Renders the page locally with headless Chromium via Playwright and reads
    the meta description out of the rendered HTML.
"""

import logging
from functools import lru_cache
from typing import Protocol

import httpx
from bs4 import BeautifulSoup
from playwright.async_api import async_playwright

from catalog_digest.config import Settings, get_settings
from catalog_digest.models.page import RenderedPage
from catalog_digest.services.fetcher import validate_url

logger = logging.getLogger(__name__)

BROWSER_TIMEOUT_MS = 30_000


class PageScraper(Protocol):
    async def render(self, url: str) -> RenderedPage: ...


class ScrapingBeeScraper:
    def __init__(self, api_key: str, endpoint: str, timeout: float = 60.0) -> None:
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout

    async def render(self, url: str) -> RenderedPage:
        """Render *url* through ScrapingBee.

        Raises:
            RuntimeError: if no API key is configured.
            httpx.HTTPError: on network errors and non-2xx responses.
            ValueError: if the API does not answer with a JSON object.
        """
        if not self.api_key:
            raise RuntimeError("SCRAPINGBEE_API_KEY is not configured.")

        params = {"api_key": self.api_key, "url": url, "json_response": "true"}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(self.endpoint, params=params)
            resp.raise_for_status()
            data = resp.json()

        if not isinstance(data, dict):
            raise ValueError("Unexpected ScrapingBee response shape.")

        return RenderedPage(
            meta_description=(data.get("meta_description") or "").strip(),
            body=data.get("body") or None,
        )


def _meta_description(html: str) -> str:
    soup = BeautifulSoup(html, "lxml")
    for attrs in ({"name": "description"}, {"property": "og:description"}):
        meta = soup.find("meta", attrs=attrs)
        if meta and meta.get("content"):
            return str(meta["content"]).strip()
    return ""


class BrowserScraper:
    def __init__(self, timeout_ms: int = BROWSER_TIMEOUT_MS) -> None:
        self.timeout_ms = timeout_ms

    async def render(self, url: str) -> RenderedPage:
        """Render *url* with headless Chromium.

        Raises:
            ValueError: if the URL is not a public http(s) URL.
            playwright.async_api.Error: on browser/network errors.
        """
        validate_url(url)

        async with async_playwright() as pw:
            browser = await pw.chromium.launch(
                headless=True,
                # --no-sandbox is required when running as root inside a container.
                args=["--no-sandbox", "--disable-dev-shm-usage", "--disable-gpu"],
            )
            context = await browser.new_context()
            page = await context.new_page()
            try:
                await page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
                html = await page.content()
            finally:
                await context.close()
                await browser.close()

        return RenderedPage(meta_description=_meta_description(html), body=html or None)


def build_scraper(settings: Settings) -> PageScraper:
    if settings.scraper == "browser":
        return BrowserScraper(timeout_ms=int(settings.scraper_timeout * 1000))
    return ScrapingBeeScraper(
        api_key=settings.scrapingbee_api_key,
        endpoint=settings.scrapingbee_endpoint,
        timeout=settings.scraper_timeout,
    )


@lru_cache(maxsize=1)
def get_scraper() -> PageScraper:
    """Return the process-wide scraper selected by ``CATALOG_SCRAPER``."""
    scraper = build_scraper(get_settings())
    logger.info("Using page scraper %s", type(scraper).__name__)
    return scraper
