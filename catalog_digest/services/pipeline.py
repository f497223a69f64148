"""Catalog discovery and per-product enrichment.

``aggregate`` runs in two phases:

1. Discovery (sequential, all-or-nothing): robots.txt → sitemap index →
   product sitemap.  Any failure raises a :class:`PipelineError` and no
   products are returned.
2. Enrichment (concurrent, best-effort): for each of the first *limit*
   products, fetch its description and then summarize it.  Failures are
   contained to the product as :class:`Degraded` values.
"""

import asyncio
import logging
from typing import List, Optional

import httpx

from catalog_digest.config import get_settings
from catalog_digest.errors import ResolutionError
from catalog_digest.models.enrichment import SUMMARY_FAILED_MESSAGE, Degraded
from catalog_digest.models.product import EnrichedProductRecord, ProductRecord
from catalog_digest.services.description import fetch_description
from catalog_digest.services.fetcher import fetch_url
from catalog_digest.services.robots import resolve_sitemap_url
from catalog_digest.services.scraper import PageScraper
from catalog_digest.services.sitemap import parse_product_sitemap, parse_sitemap_index
from catalog_digest.services.summarizer import TextGenerator, summarize

logger = logging.getLogger(__name__)


async def _fetch_sitemap(url: str, what: str) -> str:
    try:
        return await fetch_url(url)
    except (ValueError, httpx.HTTPError, RuntimeError) as exc:
        raise ResolutionError(f"Error fetching {what} {url}: {exc}") from exc


async def resolve_product_sitemap(site_url: str) -> str:
    """Return the product sitemap URL for *site_url* (first sitemap-index entry).

    Raises:
        ValueError: *site_url* is not a public http(s) URL.
        ResolutionError: robots.txt or the sitemap index could not be fetched,
            or no sitemap is declared.
        ParseError: the sitemap index is malformed.
    """
    index_url = await resolve_sitemap_url(site_url)
    index_xml = await _fetch_sitemap(index_url, "sitemap index")
    product_sitemap_url = parse_sitemap_index(index_xml)
    logger.info("Product sitemap URL: %s", product_sitemap_url)
    return product_sitemap_url


async def discover_products(site_url: str) -> List[ProductRecord]:
    """Return every product record listed in the site's product sitemap."""
    product_sitemap_url = await resolve_product_sitemap(site_url)
    xml_text = await _fetch_sitemap(product_sitemap_url, "product sitemap")
    products = parse_product_sitemap(xml_text)
    logger.info("Product sitemap %s lists %d products", product_sitemap_url, len(products))
    return products


async def enrich_product(
    product: ProductRecord,
    scraper: Optional[PageScraper] = None,
    generator: Optional[TextGenerator] = None,
) -> EnrichedProductRecord:
    """Attach a description and summary to *product*.  Never raises."""
    description = await fetch_description(product.location, scraper)
    if isinstance(description, Degraded):
        summary = Degraded(reason="description_unavailable", message=SUMMARY_FAILED_MESSAGE)
    else:
        summary = await summarize(description.text, generator)

    return EnrichedProductRecord(
        location=product.location,
        images=product.images,
        description=description,
        summary=summary,
    )


async def aggregate(
    site_url: str,
    limit: int = 6,
    *,
    scraper: Optional[PageScraper] = None,
    generator: Optional[TextGenerator] = None,
    max_concurrency: Optional[int] = None,
) -> List[EnrichedProductRecord]:
    """Discover the site's products and enrich the first *limit* of them.

    Results keep sitemap order regardless of which product finishes first.
    At most *max_concurrency* products (default: ``CATALOG_MAX_CONCURRENCY``)
    are enriched at the same time.

    Raises:
        ValueError: if *limit* or *max_concurrency* is below 1, or *site_url*
            is not a public http(s) URL.
        ResolutionError, ParseError: if catalog discovery fails.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")
    if max_concurrency is None:
        max_concurrency = get_settings().max_concurrency
    if max_concurrency < 1:
        raise ValueError("max_concurrency must be at least 1")

    products = (await discover_products(site_url))[:limit]

    semaphore = asyncio.Semaphore(max_concurrency)

    async def _bounded(product: ProductRecord) -> EnrichedProductRecord:
        async with semaphore:
            return await enrich_product(product, scraper, generator)

    enriched = await asyncio.gather(*(_bounded(p) for p in products))

    degraded = sum(1 for p in enriched if isinstance(p.summary, Degraded))
    logger.info(
        "Aggregated %d products for %s (%d without summary)", len(enriched), site_url, degraded
    )
    return list(enriched)

