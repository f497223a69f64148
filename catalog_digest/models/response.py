from typing import List

from pydantic import BaseModel

from catalog_digest.models.enrichment import Outcome
from catalog_digest.models.product import EnrichedProductRecord


class ProductsResponse(BaseModel):
    site_url: str
    products_found: int
    products: List[EnrichedProductRecord]
    message: str = "Products fetched successfully!"


class SitemapResponse(BaseModel):
    domain: str
    sitemap_url: str


class ContentResponse(BaseModel):
    url: str
    description: Outcome
    text: str
    """The description text, or the placeholder message when it could not be derived."""


class SummarizeResponse(BaseModel):
    summary: Outcome
    text: str
    message: str = "Summary fetched successfully"
