"""Frontmatter validation and catalog indexing for subagent documents.

This package provides the core of the subagent catalog:

* :func:`validate` -- checks one document's YAML frontmatter against the
  schema and returns :class:`Valid` or :class:`Invalid`.
* :func:`build_index` -- validates a document collection and returns a
  :class:`CatalogIndex` of entries and failures.
* :class:`Entry` -- the parsed metadata of one document.
* :func:`render_catalog` / :func:`render_failures` -- output for the
  catalog website and CI.
* :class:`CatalogError` -- base class for all library exceptions.

Install::

    pip install subagent-catalog
"""

from catalog_core.exceptions import (
    CatalogError,
    DocumentNotFoundError,
    DocumentSourceError,
    EntryNotFoundError,
    FrontmatterError,
)
from catalog_core.index import DUPLICATE_SOURCE_PATH, CatalogIndex, Failure, build_index
from catalog_core.parsing import parse_frontmatter
from catalog_core.rendering import render_catalog, render_failures
from catalog_core.schema import SCHEMA_VERSION, DocumentType, Entry, Platform
from catalog_core.validation import Invalid, Valid, ValidationOutcome, validate

__all__ = [
    "DUPLICATE_SOURCE_PATH",
    "SCHEMA_VERSION",
    "CatalogError",
    "CatalogIndex",
    "DocumentNotFoundError",
    "DocumentSourceError",
    "DocumentType",
    "Entry",
    "EntryNotFoundError",
    "Failure",
    "FrontmatterError",
    "Invalid",
    "Platform",
    "Valid",
    "ValidationOutcome",
    "build_index",
    "parse_frontmatter",
    "render_catalog",
    "render_failures",
    "validate",
]
