"""Frontmatter parsing for catalog documents.

A catalog document starts with a YAML header delimited by ``---`` lines,
followed by free-form Markdown::

    ---
    name: Refactorer
    description: Finds SRP violations.
    type: subagent
    platform: cursor
    ---
    # Refactorer
    ...

:func:`parse_frontmatter` raises :class:`~catalog_core.FrontmatterError`
describing the structural problem; the validator turns it into a single
reason.
"""

from __future__ import annotations

import re
from typing import Any

import yaml

from catalog_core.exceptions import FrontmatterError

#: Maximum size of the YAML header in bytes.  Larger headers are rejected
#: before they reach the YAML parser.
MAX_FRONTMATTER_BYTES: int = 64 * 1024

_BOM = "\ufeff"
_OPENING_RE = re.compile(r"\A---[ \t]*\r?\n")
_CLOSING_RE = re.compile(r"^---[ \t]*\r?$", re.MULTILINE)


def parse_frontmatter(raw: str) -> tuple[dict[str, Any], str]:
    """Split a document into its YAML header mapping and Markdown body.

    The header must begin on the very first line (an optional UTF-8 BOM
    is ignored) and is closed by the next line consisting solely of
    ``---``.  An empty header yields an empty dict.

    Args:
        raw: Full text of the document.

    Returns:
        A ``(metadata, body)`` tuple.  *body* is stripped of surrounding
        whitespace.

    Raises:
        FrontmatterError: If the header is missing, unterminated, too
            large, not valid YAML, or does not contain a mapping.
    """
    text = raw[len(_BOM) :] if raw.startswith(_BOM) else raw

    opening = _OPENING_RE.match(text)
    if opening is None:
        if text.rstrip() == "---":
            raise FrontmatterError("unterminated frontmatter: no closing '---' line")
        raise FrontmatterError("missing frontmatter: document must start with a '---' line")

    closing = _CLOSING_RE.search(text, opening.end())
    if closing is None:
        raise FrontmatterError("unterminated frontmatter: no closing '---' line")

    fm_text = text[opening.end() : closing.start()].rstrip("\r\n")
    if len(fm_text.encode("utf-8", "surrogatepass")) > MAX_FRONTMATTER_BYTES:
        raise FrontmatterError(
            f"invalid frontmatter: header exceeds {MAX_FRONTMATTER_BYTES} bytes"
        )

    try:
        metadata = yaml.safe_load(fm_text)
    except yaml.YAMLError as exc:
        problem = getattr(exc, "problem", None) or "malformed YAML"
        mark = getattr(exc, "problem_mark", None)
        where = f" (line {mark.line + 2})" if mark is not None else ""
        raise FrontmatterError(f"invalid frontmatter: {problem}{where}") from exc
    except RecursionError as exc:
        raise FrontmatterError("invalid frontmatter: nesting too deep") from exc

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise FrontmatterError(
            f"invalid frontmatter: expected a mapping, got {type(metadata).__name__}"
        )

    body = text[closing.end() :].strip()
    return metadata, body

