"""Derive a product description from a rendered product page."""

import logging
from typing import Optional

from bs4 import BeautifulSoup

from catalog_digest.models.enrichment import (
    FETCH_FAILED_MESSAGE,
    NO_BODY_MESSAGE,
    NO_DESCRIPTION_MESSAGE,
    Degraded,
    Enriched,
    Outcome,
)
from catalog_digest.models.page import RenderedPage
from catalog_digest.services.scraper import PageScraper, get_scraper

logger = logging.getLogger(__name__)

MAX_PARAGRAPHS = 10


def _paragraph_text(html: str) -> str:
    """First MAX_PARAGRAPHS ``<p>`` texts in document order, one per line."""
    soup = BeautifulSoup(html, "lxml")
    paragraphs = soup.find_all("p", limit=MAX_PARAGRAPHS)
    return "\n".join(p.get_text() for p in paragraphs).strip()


def describe_page(page: RenderedPage) -> Outcome:
    """Pick the best description available in *page*.

    Order: the provider's meta description, then the page's leading
    paragraphs.  A page without a body, or whose paragraphs are all empty,
    degrades.
    """
    if page.meta_description.strip():
        return Enriched(text=page.meta_description.strip())

    if not page.body:
        return Degraded(reason="no_body", message=NO_BODY_MESSAGE)

    text = _paragraph_text(page.body)
    if text:
        return Enriched(text=text)
    return Degraded(reason="no_description", message=NO_DESCRIPTION_MESSAGE)


async def fetch_description(
    url: Optional[str], scraper: Optional[PageScraper] = None
) -> Outcome:
    """Render *url* and derive its description.  Never raises."""
    if not url:
        logger.warning("Skipping description fetch for product without a location")
        return Degraded(reason="fetch_failed", message=FETCH_FAILED_MESSAGE)

    try:
        page = await (scraper or get_scraper()).render(url)
        outcome = describe_page(page)
    except Exception as exc:
        logger.warning("Error fetching description for %s: %s", url, exc)
        return Degraded(reason="fetch_failed", message=FETCH_FAILED_MESSAGE)

    if isinstance(outcome, Degraded):
        logger.warning("Description degraded for %s: %s", url, outcome.reason)
    else:
        logger.debug("Fetched description for %s (%d chars)", url, len(outcome.text))
    return outcome
