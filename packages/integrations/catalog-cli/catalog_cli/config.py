"""Pydantic configuration models for the catalog CLI.

This module defines the declarative configuration schema used by
``python -m catalog_cli --config catalog.yaml``.

String values may contain ``${VAR}`` or ``${VAR:-fallback}``
placeholders that are resolved from environment variables at load time.

Example config (YAML)::

    name: Subagent Catalog
    format: json
    sources:
      - provider: fs
        options:
          root: ./catalog
          exclude: [README.md, drafts/*]
      - provider: http
        options:
          base_url: https://raw.githubusercontent.com/example/catalog/main
          headers:
            Authorization: Bearer ${GITHUB_TOKEN}
          paths:
            - cursor/refactorer.md
            - windsurf/doc-writer.md
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

_logger = logging.getLogger(__name__)


class SourceConfig(BaseModel):
    """Configuration for a single document source."""

    provider: str = Field(..., description="Source type (e.g., 'fs', 'http')")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Source-specific options passed to the source constructor",
    )


class CatalogConfig(BaseModel):
    """Top-level configuration for a catalog build.

    Attributes:
        name: Display name of the catalog, used in log output.
        format: Default output format of the ``build`` command.
        sources: One or more document sources, read in order.
    """

    name: str = Field("Catalog", description="Display name for the catalog")
    format: Literal["json", "xml", "markdown"] = Field(
        "json", description="Default output format for 'build'"
    )
    sources: list[SourceConfig] = Field(..., description="Document sources", min_length=1)


def load_config(path: Path) -> CatalogConfig:
    """Load a JSON or YAML config file and validate it.

    ``${VAR}`` placeholders are resolved before validation.

    Args:
        path: Path to a ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        The validated :class:`CatalogConfig`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not valid YAML or JSON.
        pydantic.ValidationError: If the content does not match the schema.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ValueError(f"{path}: invalid YAML: {exc}") from exc
    else:
        data = json.loads(raw)
    return CatalogConfig.model_validate(resolve_env_vars(data))


# ------------------------------------------------------------------
# Environment variable resolution
# ------------------------------------------------------------------

# ``${NAME}`` or ``${NAME:-fallback}``.
_PLACEHOLDER_RE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def resolve_env_vars(data: Any) -> Any:
    """Substitute environment placeholders throughout parsed config data.

    ``${NAME}`` takes the value of ``NAME``; ``${NAME:-fallback}`` takes
    *fallback* when ``NAME`` is unset or empty.  A variable with neither
    a value nor a fallback becomes ``""`` and logs a warning.

    Mapping keys and non-string scalars are left untouched.
    """
    if isinstance(data, dict):
        return {key: resolve_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [resolve_env_vars(item) for item in data]
    if isinstance(data, str):
        return _PLACEHOLDER_RE.sub(_substitute, data)
    return data


def _substitute(match: re.Match[str]) -> str:
    name = match.group("name")
    value = os.environ.get(name)
    if value:
        return value
    default = match.group("default")
    if default is not None:
        return default
    _logger.warning("Catalog config references unset environment variable ${%s}", name)
    return ""
