"""Pipeline-level errors.

Only the catalog-discovery stages raise.  Per-product enrichment never does;
its failures are carried as :class:`~catalog_digest.models.enrichment.Degraded`
values instead.
"""


class PipelineError(Exception):
    """Catalog discovery failed; the whole aggregation call is aborted."""


class ResolutionError(PipelineError):
    """A robots policy or sitemap could not be fetched, or no sitemap is declared."""


class ParseError(PipelineError):
    """Sitemap XML is malformed or lacks a required element."""
