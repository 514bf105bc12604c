"""Render a :class:`~catalog_core.CatalogIndex` for its consumers.

Three catalog formats are supported by :func:`render_catalog`:

``"json"``
    The document published for the catalog website: schema version,
    every entry, every failure, and the summary counts.

``"xml"``
    A ``<catalog>`` block listing each entry's name, description,
    type, and platform.  Suited to embedding in an assistant prompt.

``"markdown"``
    A human-readable listing grouped by platform.

:func:`render_failures` produces the plain-text report shown by CI.
"""

from __future__ import annotations

import json
from typing import Literal
from xml.etree.ElementTree import Element, SubElement, indent, tostring

from catalog_core.index import CatalogIndex
from catalog_core.schema import SCHEMA_VERSION, Platform

CatalogFormat = Literal["json", "xml", "markdown"]

#: Formats accepted by :func:`render_catalog`.
SUPPORTED_FORMATS: tuple[str, ...] = ("json", "xml", "markdown")


def render_catalog(index: CatalogIndex, *, format: CatalogFormat = "json") -> str:
    """Render *index* in the requested format.

    Entries are listed in source-path order.

    Args:
        index: The index to render.
        format: ``"json"`` (default), ``"xml"`` or ``"markdown"``.

    Returns:
        The rendered catalog.

    Raises:
        ValueError: If *format* is not supported.
    """
    if format == "json":
        return _render_json(index)
    if format == "xml":
        return _render_xml(index)
    if format == "markdown":
        return _render_markdown(index)
    msg = f"Unsupported format {format!r}; expected one of: {', '.join(SUPPORTED_FORMATS)}."
    raise ValueError(msg)


def render_failures(index: CatalogIndex) -> str:
    """Return a report listing every failing document and all its reasons."""
    total = len(index) + len(index.failures)
    if index.ok:
        return f"All {total} document(s) passed validation."

    lines = [f"{len(index.failures)} of {total} document(s) failed validation:", ""]
    for failure in index.failures:
        lines.append(f"{failure.source_path}:")
        lines.extend(f"  - {reason}" for reason in failure.reasons)
    return "\n".join(lines)


# ------------------------------------------------------------------
# Private helpers
# ------------------------------------------------------------------


def _render_json(index: CatalogIndex) -> str:
    payload = {
        "schemaVersion": SCHEMA_VERSION,
        "entries": [entry.to_dict() for entry in index.list_entries()],
        "failures": [
            {"sourcePath": f.source_path, "reasons": list(f.reasons)} for f in index.failures
        ],
        "counts": {
            "platform": index.count_by_platform(),
            "type": index.count_by_type(),
            "tag": index.count_by_tag(),
        },
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _render_xml(index: CatalogIndex) -> str:
    entries = index.list_entries()
    if not entries:
        return "<catalog />"

    root = Element("catalog")
    for entry in entries:
        entry_el = SubElement(root, "entry", path=entry.source_path)
        for tag, text in (
            ("name", entry.name),
            ("description", entry.description),
            ("type", entry.type.value),
            ("platform", entry.platform.value),
        ):
            SubElement(entry_el, tag).text = text
    indent(root, space="  ")
    return tostring(root, encoding="unicode")


def _render_markdown(index: CatalogIndex) -> str:
    entries = index.list_entries()
    if not entries:
        return "No catalog entries are currently available."

    lines: list[str] = ["# Catalog", ""]
    for platform in Platform:
        group = [e for e in entries if e.platform is platform]
        if not group:
            continue
        lines.append(f"## {platform.value}")
        lines.append("")
        for entry in group:
            lines.append(f"- **{entry.name}** ({entry.type.value}): {entry.description}")
        lines.append("")

    return "\n".join(lines)
