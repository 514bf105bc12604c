"""Validate catalog documents against the frontmatter schema.

The primary entry-point is :func:`validate`, which accepts the raw text
of one document and returns either :class:`Valid` (carrying the parsed
:class:`~catalog_core.Entry`) or :class:`Invalid` (carrying every
violation found, in the fixed field order of
:data:`~catalog_core.schema.FIELD_ORDER`).

Malformed input is an expected case, not an exceptional one:
:func:`validate` never raises for document content.

Example::

    from catalog_core import Invalid, validate

    outcome = validate(text, source_path="agents/refactorer.md")
    if isinstance(outcome, Invalid):
        for reason in outcome.reasons:
            print(f"  - {reason}")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

from catalog_core.exceptions import FrontmatterError
from catalog_core.parsing import parse_frontmatter
from catalog_core.schema import (
    EXTENSION_FIELDS,
    FIELD_ORDER,
    KNOWN_MODELS,
    DocumentType,
    Entry,
    Platform,
)

_logger = logging.getLogger(__name__)

_TYPES: dict[str, DocumentType] = {member.value: member for member in DocumentType}
_PLATFORMS: dict[str, Platform] = {member.value: member for member in Platform}


@dataclass(frozen=True)
class Valid:
    """Outcome of a document whose frontmatter satisfies the schema."""

    entry: Entry


@dataclass(frozen=True)
class Invalid:
    """Outcome of a document that violates the schema.

    Attributes:
        reasons: One human-readable message per distinct violation.
            Never empty.
    """

    reasons: tuple[str, ...]


ValidationOutcome = Union[Valid, Invalid]


def validate(document_text: str, source_path: str = "<document>") -> ValidationOutcome:
    """Validate a single document's frontmatter.

    Validation rules:

    * The document must open with a ``---`` delimited YAML mapping.  A
      structural problem yields a single reason and no field checks.
    * ``name`` and ``description`` (required) -- non-empty text.
    * ``type`` (required) -- one of :class:`~catalog_core.DocumentType`.
    * ``platform`` (required) -- one of :class:`~catalog_core.Platform`.
    * ``category``, ``author`` (optional) -- text.
    * ``version`` (optional) -- text; numbers are converted to text.
    * ``recommendedLLMs``, ``tags`` (optional) -- lists of text.
    * Any other key is tolerated.

    Args:
        document_text: Full text of the document.
        source_path: Identifier recorded on the resulting entry and used
            in log messages.

    Returns:
        :class:`Valid` or :class:`Invalid`.
    """
    try:
        metadata, body = parse_frontmatter(document_text)
    except FrontmatterError as exc:
        return Invalid(reasons=(str(exc),))

    errors: list[str] = []
    values: dict[str, Any] = {}
    for key in FIELD_ORDER:
        _CHECKS[key](key, metadata, values, errors)

    unknown = {str(k) for k in metadata} - set(FIELD_ORDER) - EXTENSION_FIELDS
    if unknown:
        _logger.warning(
            "%s: unknown frontmatter keys: %s",
            source_path,
            ", ".join(sorted(unknown)),
        )

    if errors:
        return Invalid(reasons=tuple(errors))

    unknown_models = [m for m in values.get("recommended_llms", ()) if m not in KNOWN_MODELS]
    if unknown_models:
        _logger.debug("%s: unrecognized models: %s", source_path, ", ".join(unknown_models))

    return Valid(entry=Entry(body=body, source_path=source_path, **values))


# ------------------------------------------------------------------
# Field checks
# ------------------------------------------------------------------
#
# Each check receives the header key, the parsed mapping, the dict of
# Entry keyword arguments being assembled, and the error list.


def _check_required_text(
    key: str, metadata: dict[str, Any], values: dict[str, Any], errors: list[str]
) -> str | None:
    if key not in metadata:
        errors.append(f"missing field: {key}")
        return None
    value = metadata[key]
    if value is None:
        errors.append(f"empty field: {key}")
        return None
    if not isinstance(value, str):
        errors.append(f"invalid field: {key} must be text, got {type(value).__name__}")
        return None
    if not value.strip():
        errors.append(f"empty field: {key}")
        return None
    values[key] = value
    return value


def _check_type(
    key: str, metadata: dict[str, Any], values: dict[str, Any], errors: list[str]
) -> None:
    value = _check_required_text(key, metadata, {}, errors)
    if value is None:
        return
    if value not in _TYPES:
        errors.append(f"unknown type: {value!r}")
        return
    values["type"] = _TYPES[value]


def _check_platform(
    key: str, metadata: dict[str, Any], values: dict[str, Any], errors: list[str]
) -> None:
    value = _check_required_text(key, metadata, {}, errors)
    if value is None:
        return
    if value not in _PLATFORMS:
        errors.append(f"unknown platform: {value!r}")
        return
    values["platform"] = _PLATFORMS[value]


def _check_optional_text(
    key: str, metadata: dict[str, Any], values: dict[str, Any], errors: list[str]
) -> None:
    value = metadata.get(key)
    if value is None:
        return
    if not isinstance(value, str):
        errors.append(f"invalid field: {key} must be text, got {type(value).__name__}")
        return
    values[key] = value


def _check_version(
    key: str, metadata: dict[str, Any], values: dict[str, Any], errors: list[str]
) -> None:
    value = metadata.get(key)
    if value is None:
        return
    # YAML reads ``version: 1.0`` as a float.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        errors.append(f"invalid field: {key} must be text, got {type(value).__name__}")
        return
    values[key] = value


def _text_items(key: str, metadata: dict[str, Any], errors: list[str]) -> list[str] | None:
    value = metadata.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        errors.append(f"invalid field: {key} must be a list of text, got {type(value).__name__}")
        return None
    for i, item in enumerate(value):
        if not isinstance(item, str):
            errors.append(f"invalid field: {key}[{i}] must be text, got {type(item).__name__}")
            return None
    return value


def _check_models(
    key: str, metadata: dict[str, Any], values: dict[str, Any], errors: list[str]
) -> None:
    items = _text_items(key, metadata, errors)
    if items is not None:
        values["recommended_llms"] = tuple(items)


def _check_tags(
    key: str, metadata: dict[str, Any], values: dict[str, Any], errors: list[str]
) -> None:
    items = _text_items(key, metadata, errors)
    if items is not None:
        values["tags"] = frozenset(items)


_CHECKS = {
    "name": _check_required_text,
    "description": _check_required_text,
    "type": _check_type,
    "platform": _check_platform,
    "category": _check_optional_text,
    "recommendedLLMs": _check_models,
    "tags": _check_tags,
    "author": _check_optional_text,
    "version": _check_version,
}
