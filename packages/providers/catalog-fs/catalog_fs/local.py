"""Local filesystem document source.

This module implements :class:`LocalDocumentSource`, which discovers
catalog documents under a local directory tree and yields them as
``(source_path, document_text)`` pairs ready for
:func:`~catalog_core.build_index`.

The source only reads files.  It does not parse or validate them; that
is the job of :func:`~catalog_core.validate`.
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from catalog_core import DocumentNotFoundError, DocumentSourceError

_logger = logging.getLogger(__name__)

#: Default maximum file size in bytes (10 MB).
DEFAULT_MAX_FILE_BYTES: int = 10 * 1024 * 1024

#: Default glob pattern, relative to the root.
DEFAULT_PATTERN: str = "**/*.md"

#: Repository housekeeping files that carry no frontmatter.
DEFAULT_EXCLUDE: tuple[str, ...] = (
    "README.md",
    "CONTRIBUTING.md",
    "CHANGELOG.md",
    "CODE_OF_CONDUCT.md",
    "LICENSE.md",
    "SECURITY.md",
)


class LocalDocumentSource:
    """Document source backed by a local directory tree.

    Every file under *root* matching *pattern* is a document, except
    hidden files and directories (``.git``, ``.github``, ...) and
    files matching one of the *exclude* patterns.  Exclude patterns are
    matched against both the file name and the path relative to *root*.

    Source paths are POSIX-style paths relative to *root*, so an index
    built on one machine has the same keys as on any other.

    Example layout::

        root/
        ├── README.md                  # excluded by default
        ├── cursor/
        │   ├── refactorer.md
        │   └── test-writer.md
        └── windsurf/
            └── doc-writer.md

    Args:
        root: Directory containing the catalog documents.
        pattern: Glob pattern selecting documents.  Defaults to every
            Markdown file in the tree.
        exclude: Glob patterns of files to skip.
        max_file_bytes: Maximum allowed file size in bytes.

    Raises:
        NotADirectoryError: If *root* does not exist or is not a
            directory.

    Example::

        source = LocalDocumentSource(Path("./catalog"))
        index = build_index(source.iter_documents())
    """

    def __init__(
        self,
        root: Path,
        *,
        pattern: str = DEFAULT_PATTERN,
        exclude: Iterable[str] = DEFAULT_EXCLUDE,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
    ) -> None:
        self._root = Path(root)
        if not self._root.is_dir():
            raise NotADirectoryError(f"Catalog root does not exist: {self._root}")
        self._pattern = pattern
        self._exclude = tuple(exclude)
        self._max_file_bytes = max_file_bytes

    def __repr__(self) -> str:
        return f"LocalDocumentSource({str(self._root)!r})"

    @property
    def root(self) -> Path:
        return self._root

    def list_paths(self) -> list[str]:
        """Return the source paths of all documents, sorted."""
        paths: list[str] = []
        for path in self._root.glob(self._pattern):
            relative = path.relative_to(self._root)
            if not path.is_file() or self._is_hidden(relative) or self._is_excluded(relative):
                continue
            paths.append(relative.as_posix())
        return sorted(paths)

    def iter_documents(self) -> Iterator[tuple[str, str]]:
        """Yield ``(source_path, document_text)`` for every document.

        Documents are yielded in sorted source-path order so that
        repeated runs see the same sequence.

        Raises:
            DocumentSourceError: If a document cannot be read, exceeds
                the size limit, is not valid UTF-8, or resolves outside
                the root.
        """
        paths = self.list_paths()
        _logger.debug("Found %d document(s) under %s", len(paths), self._root)
        for source_path in paths:
            yield source_path, self.read_document(source_path)

    def read_document(self, source_path: str) -> str:
        """Read a single document by its source path.

        Args:
            source_path: Path relative to the root.

        Returns:
            UTF-8 file contents.

        Raises:
            DocumentNotFoundError: If the file does not exist.
            DocumentSourceError: If the file cannot be read, exceeds the
                size limit, is not valid UTF-8, or resolves outside the
                root.
        """
        path = (self._root / source_path).resolve()
        if not path.is_relative_to(self._root.resolve()):
            raise DocumentSourceError(f"Invalid source path: {source_path!r}")
        if not path.is_file():
            raise DocumentNotFoundError(f"Document not found: {source_path!r}")
        size = path.stat().st_size
        if size > self._max_file_bytes:
            raise DocumentSourceError(
                f"Document {source_path!r} exceeds maximum size ({self._max_file_bytes} bytes)"
            )
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DocumentSourceError(f"Document {source_path!r} is not valid UTF-8") from exc
        except OSError as exc:
            raise DocumentSourceError(f"Failed to read document {source_path!r}: {exc}") from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _is_hidden(relative: Path) -> bool:
        return any(part.startswith(".") for part in relative.parts)

    def _is_excluded(self, relative: Path) -> bool:
        posix = relative.as_posix()
        return any(
            fnmatch.fnmatch(relative.name, pattern) or fnmatch.fnmatch(posix, pattern)
            for pattern in self._exclude
        )
