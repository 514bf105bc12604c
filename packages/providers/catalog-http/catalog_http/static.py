"""HTTP static-file document source.

This module implements :class:`HTTPDocumentSource`, which fetches catalog
documents from any static HTTP file host (raw GitHub content, S3, a CDN,
Nginx, ...) and returns them as ``(source_path, document_text)`` pairs
ready for :func:`~catalog_core.build_index`.

Static hosts cannot list directories, so the caller supplies the source
paths to fetch.  Each path is appended to the base URL::

    {base_url}/cursor/refactorer.md
    {base_url}/windsurf/doc-writer.md

All methods are ``async`` and use `httpx <https://www.python-httpx.org/>`_
for non-blocking HTTP requests.
"""

from __future__ import annotations

import asyncio
import logging
import re
import warnings
from collections.abc import Iterable
from urllib.parse import quote, urlparse

import httpx

from catalog_core import DocumentNotFoundError, DocumentSourceError

_logger = logging.getLogger(__name__)

# Each segment of a source path must start with an alphanumeric character
# and contain only alphanumerics, hyphens, dots and underscores.  This
# rules out traversal sequences such as ``../``.
_SAFE_SEGMENT_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]*$")

#: Default maximum HTTP response size in bytes (10 MB).
DEFAULT_MAX_RESPONSE_BYTES: int = 10 * 1024 * 1024

#: Default HTTP request timeout in seconds.
DEFAULT_TIMEOUT_SECONDS: float = 30.0

#: Default number of requests in flight at once.
DEFAULT_MAX_CONCURRENCY: int = 8


class HTTPDocumentSource:
    """Document source backed by a static HTTP file host.

    The source owns an :class:`httpx.AsyncClient` for connection pooling.
    If you supply your own client the source will use it without closing
    it.  Otherwise call :meth:`aclose` or use ``async with`` when you are
    finished.

    Args:
        base_url: Root URL where the catalog tree is hosted.  A trailing
            slash is stripped automatically.
        client: Optional pre-configured :class:`httpx.AsyncClient`.
            When provided, the caller is responsible for closing it.
        headers: Optional extra headers sent with every request (e.g.
            ``Authorization``).
        params: Optional query parameters appended to every request.
        require_tls: If ``True``, reject ``http://`` base URLs with
            a :class:`ValueError`.  Defaults to ``False``, which
            allows HTTP but emits a :class:`UserWarning`.
        max_response_bytes: Maximum allowed response size in bytes.
        max_concurrency: Maximum number of simultaneous requests made by
            :meth:`fetch_documents`.

    Example::

        async with HTTPDocumentSource("https://cdn.example.com/catalog") as source:
            docs = await source.fetch_documents(["cursor/refactorer.md"])
        index = build_index(docs)
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        require_tls: bool = False,
        max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if client is not None and (headers is not None or params is not None):
            raise ValueError(
                "Cannot specify both 'client' and 'headers'/'params'. "
                "Configure headers and params on the client directly."
            )
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"base_url must be an http(s) URL, got {base_url!r}")
        if parsed.scheme == "http":
            if require_tls:
                raise ValueError(
                    "require_tls is enabled but base_url uses plain HTTP. "
                    "Use an HTTPS URL or set require_tls=False."
                )
            warnings.warn(
                "base_url uses unencrypted HTTP. "
                "Catalog content fetched over HTTP can be tampered with in transit. "
                "Use HTTPS in production.",
                UserWarning,
                stacklevel=2,
            )

        self._base_url = base_url.rstrip("/")
        self._max_response_bytes = max_response_bytes
        self._max_concurrency = max_concurrency
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers=headers,
            params=params,
            timeout=httpx.Timeout(DEFAULT_TIMEOUT_SECONDS),
            follow_redirects=False,
        )

    def __repr__(self) -> str:
        return f"HTTPDocumentSource({self._base_url!r})"

    async def aclose(self) -> None:
        """Close the underlying HTTP client if it is owned by this source."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HTTPDocumentSource:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def fetch_document(self, source_path: str) -> str:
        """Fetch the text of a single document.

        Args:
            source_path: ``/``-separated path relative to the base URL.

        Returns:
            The document text.

        Raises:
            ValueError: If *source_path* contains unsafe segments.
            DocumentNotFoundError: If the host answers 404.
            DocumentSourceError: On other HTTP or connection errors, or
                if the response exceeds *max_response_bytes*.
        """
        url = f"{self._base_url}/{self._quote_path(source_path)}"
        try:
            resp = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise DocumentSourceError(f"HTTP request for {source_path!r} failed") from exc
        if resp.status_code == 404:
            raise DocumentNotFoundError(f"Document not found: {source_path!r}")
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DocumentSourceError(
                f"HTTP {resp.status_code} error fetching {source_path!r}"
            ) from exc
        if len(resp.content) > self._max_response_bytes:
            raise DocumentSourceError(
                f"Document {source_path!r} exceeds maximum size "
                f"({self._max_response_bytes} bytes)"
            )
        return resp.text

    async def fetch_documents(self, source_paths: Iterable[str]) -> list[tuple[str, str]]:
        """Fetch several documents concurrently.

        Results are returned in the order of *source_paths*, regardless of
        the order in which responses arrive, so the resulting index is
        deterministic.

        Args:
            source_paths: Paths relative to the base URL.

        Returns:
            ``(source_path, document_text)`` pairs.

        Raises:
            ValueError: If any path contains unsafe segments.
            DocumentSourceError: If any document cannot be fetched.
        """
        paths = list(source_paths)
        for path in paths:
            self._quote_path(path)

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _fetch(path: str) -> tuple[str, str]:
            async with semaphore:
                return path, await self.fetch_document(path)

        _logger.debug("Fetching %d document(s) from %s", len(paths), self._base_url)
        return list(await asyncio.gather(*(_fetch(p) for p in paths)))

    # ------------------------------------------------------------------
    # Input validation
    # ------------------------------------------------------------------

    @staticmethod
    def _quote_path(source_path: str) -> str:
        """Validate *source_path* and return it URL-quoted segment by segment.

        Raises:
            ValueError: If any segment is empty or unsafe.
        """
        segments = source_path.split("/")
        for segment in segments:
            if not _SAFE_SEGMENT_RE.match(segment):
                raise ValueError(
                    f"Invalid source path: {source_path!r}; each segment must start "
                    f"with an alphanumeric character and contain only alphanumeric "
                    f"characters, hyphens, dots, and underscores"
                )
        return "/".join(quote(segment, safe="") for segment in segments)
