"""Validate catalog documents served over HTTP.

Static hosts cannot list directories, so the document paths are given
explicitly.  Documents are fetched concurrently and validated once all
of them have arrived.

Requirements:
    pip install -e .
    export CATALOG_BASE_URL=https://raw.githubusercontent.com/<org>/<repo>/main/catalog
    export GITHUB_TOKEN=...          # optional, for private repositories

Usage:
    python examples/http/fetch_catalog.py cursor/refactorer.md windsurf/doc-writer.md
"""

import asyncio
import os
import sys

from catalog_core import build_index, render_catalog, render_failures
from catalog_http import HTTPDocumentSource


async def main(paths: list[str]) -> int:
    base_url = os.environ["CATALOG_BASE_URL"]
    headers = {}
    if token := os.environ.get("GITHUB_TOKEN"):
        headers["Authorization"] = f"Bearer {token}"

    async with HTTPDocumentSource(base_url, headers=headers, require_tls=True) as source:
        documents = await source.fetch_documents(paths)

    index = build_index(documents)
    print(render_failures(index))
    print()
    print(render_catalog(index, format="xml"))
    return 0 if index.ok else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
