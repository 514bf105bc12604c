"""HTTP document source for the subagent catalog.

This package provides :class:`HTTPDocumentSource`, which fetches catalog
documents from a static HTTP file host (raw GitHub content, S3, a CDN,
or any web server serving raw files).
"""

from catalog_http.static import HTTPDocumentSource

__all__ = ["HTTPDocumentSource"]
