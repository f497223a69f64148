"""Locate a site's sitemap through its robots policy."""

import logging
import re

import httpx

from catalog_digest.errors import ResolutionError
from catalog_digest.services.fetcher import fetch_url, validate_url

logger = logging.getLogger(__name__)

ROBOTS_PATH = "/robots.txt"

# First "Sitemap: <url>" declaration; the match is confined to a single line.
_SITEMAP_PATTERN = re.compile(r"Sitemap: (.*)")


def robots_url(site_url: str) -> str:
    return site_url.rstrip("/") + ROBOTS_PATH


def extract_sitemap_reference(robots_text: str) -> str:
    """Return the URL of the first ``Sitemap:`` line in *robots_text*.

    Raises:
        ResolutionError: when no sitemap is declared.
    """
    match = _SITEMAP_PATTERN.search(robots_text)
    if not match or not match.group(1).strip():
        raise ResolutionError("Sitemap URL not found in robots.txt")
    return match.group(1).strip()


async def resolve_sitemap_url(site_url: str) -> str:
    """Fetch ``{site_url}/robots.txt`` and return the declared sitemap URL.

    Raises:
        ValueError: if *site_url* is not a public http(s) URL.
        ResolutionError: if robots.txt cannot be fetched or declares no sitemap.
    """
    if not site_url:
        raise ResolutionError("Site URL is required")
    validate_url(site_url)

    url = robots_url(site_url)
    try:
        robots_text = await fetch_url(url)
    except (ValueError, httpx.HTTPError, RuntimeError) as exc:
        raise ResolutionError(f"Error fetching robots.txt from {url}: {exc}") from exc

    sitemap_url = extract_sitemap_reference(robots_text)
    logger.info("Sitemap declared in %s: %s", url, sitemap_url)
    return sitemap_url
