from pydantic import BaseModel, Field, HttpUrl


class ProductsRequest(BaseModel):
    url: HttpUrl
    limit: int | None = Field(
        default=None,
        ge=1,
        le=50,
        description="Number of products to enrich (1–50). Defaults to the configured product limit.",
    )


class SitemapRequest(BaseModel):
    domain: HttpUrl


class ContentRequest(BaseModel):
    url: HttpUrl


class SummarizeRequest(BaseModel):
    description: str = Field(..., min_length=1)
