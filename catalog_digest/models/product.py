from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from catalog_digest.models.enrichment import Outcome, outcome_text


class ProductImage(BaseModel):
    url: Optional[str] = None
    title: Optional[str] = None


class ProductRecord(BaseModel):
    """One ``<url>`` entry of a product sitemap."""

    model_config = ConfigDict(populate_by_name=True)

    location: Optional[str] = Field(default=None, alias="loc")
    images: List[ProductImage] = Field(default_factory=list)


class EnrichedProductRecord(ProductRecord):
    """A product record plus its scraped description and generated summary."""

    description: Outcome
    summary: Outcome

    @computed_field  # type: ignore[prop-decorator]
    @property
    def summary_text(self) -> str:
        return outcome_text(self.summary)
