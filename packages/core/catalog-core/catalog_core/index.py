"""Catalog index built from a collection of documents.

:func:`build_index` validates every ``(source_path, document_text)`` pair
it receives and aggregates the outcomes into a :class:`CatalogIndex`:
an immutable snapshot holding the valid entries keyed by source path
and the failures in input order.

The index is rebuilt wholesale on every run.  Discovery of documents is
left to a document source such as
:class:`~catalog_fs.LocalDocumentSource`.

Example::

    from catalog_core import build_index
    from catalog_fs import LocalDocumentSource

    index = build_index(LocalDocumentSource(Path("./catalog")).iter_documents())
    for entry in index.filter_by("platform", "cursor"):
        print(entry.name)
    if not index.ok:
        print(f"{len(index.failures)} document(s) failed validation")
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from concurrent.futures import Executor
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from catalog_core.exceptions import EntryNotFoundError
from catalog_core.schema import DocumentType, Entry, Platform, attribute_name
from catalog_core.validation import Invalid, ValidationOutcome, validate

_logger = logging.getLogger(__name__)

#: Reason recorded for a document whose source path was already seen.
DUPLICATE_SOURCE_PATH = "duplicate source path"

# Entry attributes holding collections; filtering tests membership.
_COLLECTION_ATTRIBUTES = frozenset({"tags", "recommended_llms"})


@dataclass(frozen=True)
class Failure:
    """A document that did not make it into the index.

    Attributes:
        source_path: Identifier of the failing document.
        reasons: Every violation found, never empty.
    """

    source_path: str
    reasons: tuple[str, ...]


class CatalogIndex:
    """Immutable snapshot of a validated document collection.

    Every input document appears exactly once: either in :attr:`entries`
    or in :attr:`failures`.  Iterating the index yields entries in input
    order.
    """

    def __init__(self, entries: Mapping[str, Entry], failures: Iterable[Failure]) -> None:
        self._entries: Mapping[str, Entry] = MappingProxyType(dict(entries))
        self._failures: tuple[Failure, ...] = tuple(failures)

    def __repr__(self) -> str:
        return f"CatalogIndex({len(self._entries)} entries, {len(self._failures)} failures)"

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries.values())

    def __contains__(self, source_path: object) -> bool:
        return source_path in self._entries

    @property
    def entries(self) -> Mapping[str, Entry]:
        """Read-only mapping of source path to :class:`~catalog_core.Entry`."""
        return self._entries

    @property
    def failures(self) -> tuple[Failure, ...]:
        """Failing documents, in the order they were received."""
        return self._failures

    @property
    def ok(self) -> bool:
        """``True`` when no document failed."""
        return not self._failures

    def get_entry(self, source_path: str) -> Entry:
        """Return the entry indexed under *source_path*.

        Raises:
            EntryNotFoundError: If no valid document has that path.
        """
        try:
            return self._entries[source_path]
        except KeyError:
            raise EntryNotFoundError(f"Entry '{source_path}' not found in catalog") from None

    def list_entries(self) -> list[Entry]:
        """Return all entries sorted by source path."""
        return sorted(self._entries.values(), key=lambda e: e.source_path)

    def filter_by(self, field: str, value: Any) -> list[Entry]:
        """Return the entries whose *field* matches *value*.

        *field* may be a header key (``"recommendedLLMs"``) or an entry
        attribute (``"recommended_llms"``).  Scalar fields match by
        equality; ``tags`` and ``recommendedLLMs`` match when they
        contain *value*.  Enumerated fields accept either the enum
        member or its string value.

        Raises:
            ValueError: If *field* is not an entry field, or if *value*
                is not a single text value for ``tags`` or
                ``recommendedLLMs``.
        """
        attr = attribute_name(field)
        if attr in _COLLECTION_ATTRIBUTES:
            if not isinstance(value, str):
                raise ValueError(
                    f"Filter on {field!r} takes a single text value, got {type(value).__name__}"
                )
            return [e for e in self._entries.values() if value in getattr(e, attr)]
        return [e for e in self._entries.values() if getattr(e, attr) == value]

    def count_by_platform(self) -> dict[str, int]:
        """Count entries per platform, including platforms with no entries."""
        counts = Counter(e.platform for e in self._entries.values())
        return {p.value: counts[p] for p in Platform}

    def count_by_type(self) -> dict[str, int]:
        """Count entries per document type, including empty types."""
        counts = Counter(e.type for e in self._entries.values())
        return {t.value: counts[t] for t in DocumentType}

    def count_by_tag(self) -> dict[str, int]:
        """Count entries per tag, most common first, ties by tag name."""
        counts = Counter(tag for e in self._entries.values() for tag in e.tags)
        return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))


def _validate_pair(document: tuple[str, str]) -> ValidationOutcome:
    source_path, text = document
    return validate(text, source_path=source_path)


def build_index(
    documents: Iterable[tuple[str, str]],
    *,
    executor: Executor | None = None,
) -> CatalogIndex:
    """Validate a collection of documents and build a catalog index.

    Documents are processed in the order received.  A source path that
    was already seen is recorded as a failure with reason
    :data:`DUPLICATE_SOURCE_PATH`, whatever either document contains;
    the first occurrence wins.

    No document can make this call fail: every problem is recorded in
    :attr:`CatalogIndex.failures`.

    Args:
        documents: ``(source_path, document_text)`` pairs.
        executor: Optional :class:`concurrent.futures.Executor` used to
            validate documents in parallel.  Results are merged in input
            order, so the index is identical to a sequential build.

    Returns:
        A new :class:`CatalogIndex`.
    """
    pairs = list(documents)
    if executor is None:
        outcomes: Iterable[ValidationOutcome] = map(_validate_pair, pairs)
    else:
        outcomes = executor.map(_validate_pair, pairs)

    entries: dict[str, Entry] = {}
    failures: list[Failure] = []
    seen: set[str] = set()

    for (source_path, _), outcome in zip(pairs, outcomes):
        if source_path in seen:
            _logger.warning("%s: %s", source_path, DUPLICATE_SOURCE_PATH)
            failures.append(Failure(source_path, (DUPLICATE_SOURCE_PATH,)))
            continue
        seen.add(source_path)

        if isinstance(outcome, Invalid):
            _logger.debug("%s: %d problem(s)", source_path, len(outcome.reasons))
            failures.append(Failure(source_path, outcome.reasons))
        else:
            entries[source_path] = outcome.entry

    _logger.info(
        "Built catalog index: %d entries, %d failures",
        len(entries),
        len(failures),
    )
    return CatalogIndex(entries, failures)
