"""Exception hierarchy for the subagent catalog.

All exceptions raised by :mod:`catalog_core` (and by the document sources
that follow the library conventions) inherit from :class:`CatalogError`,
allowing callers to catch the entire family with a single ``except``
clause.

Per-document content problems are **not** exceptions: the validator
models them as :class:`~catalog_core.Invalid` outcomes.  Exceptions are
reserved for:

* :class:`FrontmatterError` -- the header block of a document is
  structurally unusable.  Raised by
  :func:`~catalog_core.parse_frontmatter` and converted to an
  ``Invalid`` outcome by :func:`~catalog_core.validate`.
* :class:`EntryNotFoundError` -- a lookup against a built index failed.
* :class:`DocumentSourceError` -- a discovery collaborator (filesystem,
  HTTP) could not deliver a document.
"""


class CatalogError(Exception):
    """Base exception for all subagent catalog errors."""


class FrontmatterError(CatalogError, ValueError):
    """The frontmatter block of a document is missing or unparseable.

    Example::

        try:
            metadata, body = parse_frontmatter(text)
        except FrontmatterError as exc:
            print(f"structural error: {exc}")
    """


class EntryNotFoundError(CatalogError, LookupError):
    """A requested entry does not exist in the catalog index.

    Raised by :meth:`CatalogIndex.get_entry
    <catalog_core.CatalogIndex.get_entry>` when no document with the
    given source path validated successfully.
    """


class DocumentSourceError(CatalogError):
    """A document source failed to read or fetch a document."""


class DocumentNotFoundError(DocumentSourceError, LookupError):
    """A document requested from a source does not exist."""
