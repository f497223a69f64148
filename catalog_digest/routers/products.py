"""Product catalog endpoints: discovery, descriptions and summaries."""

import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import HttpUrl
from slowapi import Limiter
from slowapi.util import get_remote_address

from catalog_digest.config import get_settings
from catalog_digest.errors import PipelineError
from catalog_digest.models.enrichment import outcome_text
from catalog_digest.models.request import (
    ContentRequest,
    ProductsRequest,
    SitemapRequest,
    SummarizeRequest,
)
from catalog_digest.models.response import (
    ContentResponse,
    ProductsResponse,
    SitemapResponse,
    SummarizeResponse,
)
from catalog_digest.services.description import fetch_description
from catalog_digest.services.pipeline import aggregate, resolve_product_sitemap
from catalog_digest.services.summarizer import summarize

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/api", tags=["Products"])


@router.post(
    "/products",
    response_model=ProductsResponse,
    summary="Discover a site's products and summarize them",
    description=(
        "Reads the site's robots.txt, follows the declared sitemap index to the "
        "product sitemap, and returns the first `limit` products with a scraped "
        "description and a three-bullet AI summary each.  Products whose page or "
        "summary could not be produced are still returned with a `degraded` "
        "description/summary."
    ),
)
@limiter.limit("5/minute")
async def list_products(request: Request, body: ProductsRequest) -> ProductsResponse:
    url = _site_url(body.url)
    limit = body.limit or get_settings().product_limit
    logger.info("Products request received", extra={"url": url, "limit": limit})

    try:
        products = await aggregate(url, limit=limit)
    except ValueError as exc:
        logger.warning("Invalid or blocked URL: %s – %s", url, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except PipelineError as exc:
        logger.error("Error in /api/products for %s: %s", url, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    return ProductsResponse(site_url=url, products_found=len(products), products=products)


@router.post(
    "/sitemap",
    response_model=SitemapResponse,
    summary="Resolve the product sitemap URL of a site",
)
@limiter.limit("10/minute")
async def product_sitemap(request: Request, body: SitemapRequest) -> SitemapResponse:
    domain = _site_url(body.domain)
    logger.info("Sitemap request received", extra={"domain": domain})

    try:
        sitemap_url = await resolve_product_sitemap(domain)
    except ValueError as exc:
        logger.warning("Invalid or blocked URL: %s – %s", domain, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except PipelineError as exc:
        logger.error("Error in /api/sitemap for %s: %s", domain, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    return SitemapResponse(domain=domain, sitemap_url=sitemap_url)


@router.post("/content", response_model=ContentResponse, summary="Describe a single product page")
@limiter.limit("10/minute")
async def product_content(request: Request, body: ContentRequest) -> ContentResponse:
    url = str(body.url)
    logger.info("Content request received", extra={"url": url})
    description = await fetch_description(url)
    return ContentResponse(url=url, description=description, text=outcome_text(description))


@router.post("/summarize", response_model=SummarizeResponse, summary="Summarize a description")
@limiter.limit("10/minute")
async def summarize_description(request: Request, body: SummarizeRequest) -> SummarizeResponse:
    logger.info("Summarize request received", extra={"chars": len(body.description)})
    summary = await summarize(body.description)
    return SummarizeResponse(summary=summary, text=outcome_text(summary))


def _site_url(url: HttpUrl) -> str:
    """``HttpUrl`` renders a bare host with a trailing slash; drop it."""
    return str(url).rstrip("/")
