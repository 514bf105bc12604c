"""Map source configuration to document sources and collect documents."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from catalog_cli.config import CatalogConfig

_logger = logging.getLogger(__name__)

#: Source types that are recognized by :func:`collect_from_source`.
SUPPORTED_SOURCES: frozenset[str] = frozenset({"fs", "http"})

# Options forwarded to each source constructor.  Runtime objects such as
# an ``httpx`` client cannot come from a config file.
_FS_KEYS = frozenset({"pattern", "exclude", "max_file_bytes"})
_HTTP_KEYS = frozenset({"headers", "params", "require_tls", "max_response_bytes", "max_concurrency"})


async def collect_from_source(provider: str, options: dict[str, Any]) -> list[tuple[str, str]]:
    """Read every document from one configured source.

    Args:
        provider: One of the :data:`SUPPORTED_SOURCES` keys.
        options: Source options.  ``fs`` takes ``root`` (default ``"."``)
            plus :class:`~catalog_fs.LocalDocumentSource` keywords;
            ``http`` takes ``base_url`` and ``paths`` plus
            :class:`~catalog_http.HTTPDocumentSource` keywords.  Unknown
            keys are ignored.

    Returns:
        ``(source_path, document_text)`` pairs in source order.

    Raises:
        ValueError: If *provider* is not recognized or required options
            are missing.
        DocumentSourceError: If a document cannot be read.
    """
    if provider == "fs":
        from catalog_fs import LocalDocumentSource

        root = Path(options.get("root", "."))
        kwargs = {k: v for k, v in options.items() if k in _FS_KEYS}
        return list(LocalDocumentSource(root, **kwargs).iter_documents())

    if provider == "http":
        from catalog_http import HTTPDocumentSource

        if "base_url" not in options:
            raise ValueError("Source 'http' requires a 'base_url' option")
        paths = options.get("paths") or []
        kwargs = {k: v for k, v in options.items() if k in _HTTP_KEYS}
        async with HTTPDocumentSource(options["base_url"], **kwargs) as source:
            return await source.fetch_documents(paths)

    raise ValueError(
        f"Unknown source type: {provider!r}. "
        f"Supported types: {', '.join(sorted(SUPPORTED_SOURCES))}"
    )


async def collect_documents(config: CatalogConfig) -> list[tuple[str, str]]:
    """Collect documents from every configured source, in config order."""
    documents: list[tuple[str, str]] = []
    for source_cfg in config.sources:
        docs = await collect_from_source(source_cfg.provider, source_cfg.options)
        _logger.info("Source %r yielded %d document(s)", source_cfg.provider, len(docs))
        documents.extend(docs)
    return documents
