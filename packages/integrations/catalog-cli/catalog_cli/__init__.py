"""Command-line front end for the subagent catalog.

This package wires :mod:`catalog_core` to its document sources and
exposes two commands:

* ``check`` -- validate every document; a non-empty failure list maps to
  exit status 1 so CI can block the pull request.
* ``build`` -- render the catalog index as JSON, XML or Markdown for the
  catalog website.

CLI::

    python -m catalog_cli check --root ./catalog
    subagent-catalog build --config catalog.yaml --output site/catalog.json
"""

from catalog_cli.config import CatalogConfig, SourceConfig, load_config, resolve_env_vars
from catalog_cli.sources import collect_documents

__all__ = [
    "CatalogConfig",
    "SourceConfig",
    "collect_documents",
    "load_config",
    "resolve_env_vars",
]
