"""Frontmatter schema contract for catalog documents.

This module is the machine-readable form of the catalog's frontmatter
policy: the closed value sets for ``type`` and ``platform``, the fixed
field order used when reporting problems, and the :class:`Entry`
dataclass that a successfully validated document becomes.

The contract is versioned through :data:`SCHEMA_VERSION`.  Extending an
enumeration or adding a field is a schema change and bumps the version.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

#: Version of the frontmatter schema contract implemented here.
SCHEMA_VERSION: str = "1"


class DocumentType(str, Enum):
    """Kind of catalog document."""

    SUBAGENT = "subagent"
    SKILL = "skill"


class Platform(str, Enum):
    """IDE or assistant platform a document targets."""

    CURSOR = "cursor"
    OPENCLAW = "openclaw"
    WINDSURF = "windsurf"
    AIDER = "aider"
    CONTINUE = "continue"
    CODY = "cody"
    COPILOT = "copilot"
    OTHER = "other"


#: Mandatory header keys, in reporting order.
REQUIRED_FIELDS: tuple[str, ...] = ("name", "description", "type", "platform")

#: Optional header keys, in reporting order.
OPTIONAL_FIELDS: tuple[str, ...] = (
    "category",
    "recommendedLLMs",
    "tags",
    "author",
    "version",
)

#: Every recognized header key, in the fixed declaration order.
FIELD_ORDER: tuple[str, ...] = REQUIRED_FIELDS + OPTIONAL_FIELDS

#: Header keys that appear across the catalog without being part of the
#: schema.  They are ignored silently; other unknown keys log a warning.
EXTENSION_FIELDS: frozenset[str] = frozenset({"license", "repository", "documentation"})

#: Model names the catalog knows about.  ``recommendedLLMs`` values
#: outside this set are still accepted.
KNOWN_MODELS: frozenset[str] = frozenset(
    {
        "claude-3.5-sonnet",
        "claude-3.7-sonnet",
        "claude-sonnet-4",
        "claude-opus-4",
        "gpt-4o",
        "gpt-4.1",
        "gpt-5",
        "o3",
        "o4-mini",
        "gemini-2.5-pro",
        "gemini-2.5-flash",
        "deepseek-v3",
        "deepseek-r1",
        "llama-3.1-405b",
        "qwen-2.5-coder",
    }
)

# Header key -> Entry attribute, for the keys whose names differ.
_ATTRIBUTE_NAMES: dict[str, str] = {"recommendedLLMs": "recommended_llms"}


def attribute_name(key: str) -> str:
    """Map a header key (or attribute name) to the :class:`Entry` attribute.

    Raises:
        ValueError: If *key* names neither a schema field nor an
            :class:`Entry` attribute.
    """
    if key in _ATTRIBUTE_NAMES:
        return _ATTRIBUTE_NAMES[key]
    if key in FIELD_ORDER or key in _ATTRIBUTE_NAMES.values() or key == "source_path":
        return key
    if key == "sourcePath":
        return "source_path"
    raise ValueError(
        f"Unknown entry field {key!r}; expected one of: {', '.join(FIELD_ORDER)}"
    )


@dataclass(frozen=True)
class Entry:
    """The validated representation of one catalog document.

    Entries are immutable.  Re-validating a document produces a new
    entry rather than updating an existing one.

    Attributes:
        name: Display name of the subagent or skill.
        description: Short summary, ideally one or two sentences.
        type: Whether the document is a subagent or a skill.
        platform: Target platform.
        category: Free-text grouping such as ``"Development"``.
        recommended_llms: Suggested models, in the author's order.
        tags: Facet labels; order is irrelevant.
        author: Optional author credit.
        version: Optional version string, usually semver-shaped.
        body: Markdown content following the header.
        source_path: Identifier of the originating document.
    """

    name: str
    description: str
    type: DocumentType
    platform: Platform
    category: str | None = None
    recommended_llms: tuple[str, ...] = ()
    tags: frozenset[str] = field(default_factory=frozenset)
    author: str | None = None
    version: str | None = None
    body: str = ""
    source_path: str = ""

    def to_dict(self, *, include_body: bool = True) -> dict[str, Any]:
        """Return a JSON-ready mapping keyed by the header field names.

        Tags are emitted sorted so the output is deterministic.
        """
        data: dict[str, Any] = {
            "sourcePath": self.source_path,
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
            "platform": self.platform.value,
            "category": self.category,
            "recommendedLLMs": list(self.recommended_llms),
            "tags": sorted(self.tags),
            "author": self.author,
            "version": self.version,
        }
        if include_body:
            data["body"] = self.body
        return data
