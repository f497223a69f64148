"""Sitemap-index and product-sitemap parsing.

Elements are matched on their local name, so documents that declare the
standard namespaces (``sitemaps.org/schemas/sitemap/0.9`` and Google's
``sitemap-image/1.1``) and bare documents without namespaces parse the same.
"""

import logging
from typing import Iterator, List, Optional
from xml.etree import ElementTree

from catalog_digest.errors import ParseError
from catalog_digest.models.product import ProductImage, ProductRecord

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """``{http://...}loc`` → ``loc``."""
    return tag.rsplit("}", 1)[-1]


def _children(elem: ElementTree.Element, name: str) -> Iterator[ElementTree.Element]:
    for child in elem:
        if isinstance(child.tag, str) and _local_name(child.tag) == name:
            yield child


def _child_text(elem: ElementTree.Element, name: str) -> Optional[str]:
    """Trimmed text of the first *name* child, or None when absent or empty."""
    child = next(_children(elem, name), None)
    if child is None or not child.text or not child.text.strip():
        return None
    return child.text.strip()


def _parse_root(xml_text: str, expected: str) -> ElementTree.Element:
    try:
        root = ElementTree.fromstring(xml_text.strip())
    except ElementTree.ParseError as exc:
        raise ParseError(f"Malformed sitemap XML: {exc}") from exc

    if _local_name(root.tag) != expected:
        raise ParseError(
            f"Expected <{expected}> root element, found <{_local_name(root.tag)}>"
        )
    return root


def parse_sitemap_index(xml_text: str) -> str:
    """Return the ``<loc>`` of the first ``<sitemap>`` entry of a sitemap index.

    Only the first entry is used; any further sitemaps listed in the index are
    ignored.

    Raises:
        ParseError: on malformed XML or when the root, entry or location is missing.
    """
    root = _parse_root(xml_text, "sitemapindex")

    first = next(_children(root, "sitemap"), None)
    if first is None:
        raise ParseError("Sitemap index contains no <sitemap> entries")

    loc = _child_text(first, "loc")
    if loc is None:
        raise ParseError("First <sitemap> entry has no <loc>")
    return loc


def _parse_image(elem: ElementTree.Element) -> ProductImage:
    return ProductImage(url=_child_text(elem, "loc"), title=_child_text(elem, "title"))


def parse_product_sitemap(xml_text: str) -> List[ProductRecord]:
    """Parse every ``<url>`` entry of a product sitemap, in document order.

    An entry without ``<loc>`` is kept with ``location=None`` so positions stay
    aligned with the source document.  Each ``<image:image>`` child becomes a
    :class:`ProductImage`; missing ``image:loc`` / ``image:title`` are None.

    Raises:
        ParseError: on malformed XML, a non-``urlset`` root, or no ``<url>`` entries.
    """
    root = _parse_root(xml_text, "urlset")

    products = [
        ProductRecord(
            location=_child_text(entry, "loc"),
            images=[_parse_image(img) for img in _children(entry, "image")],
        )
        for entry in _children(root, "url")
    ]
    if not products:
        raise ParseError("Product sitemap contains no <url> entries")

    missing = sum(1 for p in products if p.location is None)
    if missing:
        logger.warning("%d of %d sitemap entries have no <loc>", missing, len(products))
    return products
