"""Local filesystem document source for the subagent catalog.

This package provides :class:`LocalDocumentSource`, which walks a local
directory tree and yields catalog documents for
:func:`~catalog_core.build_index`.
"""

from catalog_fs.local import DEFAULT_EXCLUDE, LocalDocumentSource

__all__ = ["DEFAULT_EXCLUDE", "LocalDocumentSource"]
