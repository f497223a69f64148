from typing import Optional

from pydantic import BaseModel


class RenderedPage(BaseModel):
    """What a page-scraping provider hands back for one URL."""

    meta_description: str = ""
    body: Optional[str] = None  # rendered HTML; None when the provider returned none
