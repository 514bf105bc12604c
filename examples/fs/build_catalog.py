"""Build the catalog index in-process from a local directory.

This script demonstrates using catalog-core and catalog-fs directly,
without the CLI.

Flow:
    1. Read every document with a LocalDocumentSource
    2. Validate them in parallel with build_index
    3. Print the failure report and the per-platform counts
    4. Render the catalog as Markdown

Requirements:
    pip install -e .

Usage:
    python examples/fs/build_catalog.py
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from catalog_core import build_index, render_catalog, render_failures
from catalog_fs import LocalDocumentSource

EXAMPLES = Path(__file__).resolve().parent.parent


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # ------------------------------------------------------------------
    # 1. Collect documents from the sample catalog and the drafts folder
    # ------------------------------------------------------------------
    documents = list(LocalDocumentSource(EXAMPLES / "catalog").iter_documents())
    documents += LocalDocumentSource(EXAMPLES / "invalid").iter_documents()

    # ------------------------------------------------------------------
    # 2. Validate and index
    # ------------------------------------------------------------------
    with ThreadPoolExecutor(max_workers=4) as pool:
        index = build_index(documents, executor=pool)

    print("=== Validation ===")
    print(render_failures(index))
    print()

    print("=== Entries per platform ===")
    for platform, count in index.count_by_platform().items():
        if count:
            print(f"  {platform:10s} {count}")
    print()

    # ------------------------------------------------------------------
    # 3. Query and render
    # ------------------------------------------------------------------
    print("=== Tagged code-quality ===")
    for entry in index.filter_by("tags", "code-quality"):
        print(f"  - {entry.name} ({entry.source_path})")
    print()

    print(render_catalog(index, format="markdown"))


if __name__ == "__main__":
    main()
