"""Validate and index a subagent catalog from the command line.

Usage::

    python -m catalog_cli check --root ./catalog
    python -m catalog_cli check --config catalog.yaml
    python -m catalog_cli build --root ./catalog --format json --output site/catalog.json
    python -m catalog_cli build --root ./catalog --format markdown --platform cursor

``check`` prints every validation failure and exits with status 1 when
any document failed, so it can gate pull requests in CI.  ``build``
renders the catalog for the website; with ``--strict`` it also exits 1
on failures.

Exit statuses:

* ``0`` -- success.
* ``1`` -- one or more documents failed validation.
* ``2`` -- the catalog could not be read (bad config, missing root,
  unreadable document).

The config file is a JSON or YAML document conforming to
:class:`~catalog_cli.config.CatalogConfig`.  Without ``--config`` a
single filesystem source rooted at ``--root`` is used.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from catalog_core import (
    CatalogError,
    CatalogIndex,
    DocumentType,
    Platform,
    build_index,
    render_catalog,
    render_failures,
)

from catalog_cli.config import CatalogConfig, SourceConfig, load_config
from catalog_cli.sources import collect_documents

_logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subagent-catalog",
        description="Validate and index a catalog of subagent and skill documents.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    common = argparse.ArgumentParser(add_help=False)
    where = common.add_mutually_exclusive_group()
    where.add_argument(
        "--root",
        type=Path,
        default=Path("."),
        help="Catalog directory to scan (default: current directory).",
    )
    where.add_argument(
        "--config",
        type=Path,
        help="Path to a JSON or YAML configuration file.",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser(
        "check",
        parents=[common],
        help="Validate every document and report failures.",
    )

    build = commands.add_parser(
        "build",
        parents=[common],
        help="Render the catalog index.",
    )
    build.add_argument(
        "--format",
        choices=["json", "xml", "markdown"],
        help="Output format (default: from config, else json).",
    )
    build.add_argument("--platform", choices=[p.value for p in Platform])
    build.add_argument("--type", choices=[t.value for t in DocumentType])
    build.add_argument("--tag")
    build.add_argument("--output", type=Path, help="Write to a file instead of stdout.")
    build.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any document failed validation.",
    )
    return parser


def _load(args: argparse.Namespace) -> CatalogConfig:
    if args.config is not None:
        if not args.config.exists():
            raise FileNotFoundError(f"config file not found: {args.config}")
        return load_config(args.config)
    return CatalogConfig(sources=[SourceConfig(provider="fs", options={"root": str(args.root)})])


def _facet(index: CatalogIndex, args: argparse.Namespace) -> CatalogIndex:
    """Narrow *index* to the entries matching the requested facets."""
    for field, value in (("platform", args.platform), ("type", args.type), ("tags", args.tag)):
        if value is not None:
            matches = index.filter_by(field, value)
            index = CatalogIndex({e.source_path: e for e in matches}, index.failures)
    return index


def main(argv: Sequence[str] | None = None) -> int:
    """Parse CLI arguments, build the catalog index, and report."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _load(args)
        documents = asyncio.run(collect_documents(config))
    except (CatalogError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    index = build_index(documents)
    _logger.info("%s: %r", config.name, index)

    if args.command == "check":
        print(render_failures(index))
        return EXIT_OK if index.ok else EXIT_INVALID

    output = render_catalog(_facet(index, args), format=args.format or config.format)
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output + "\n", encoding="utf-8")
    else:
        print(output)

    if not index.ok:
        print(
            f"{len(index.failures)} document(s) failed validation; "
            "run 'check' for details.",
            file=sys.stderr,
        )
        if args.strict:
            return EXIT_INVALID
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
