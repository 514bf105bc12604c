"""Tests for HTTPDocumentSource."""

import asyncio
import warnings

import httpx
import pytest
import respx

from catalog_core import DocumentNotFoundError, DocumentSourceError, build_index
from catalog_http import HTTPDocumentSource
from catalog_http.static import DEFAULT_TIMEOUT_SECONDS

BASE = "https://catalog.example.com"

REFACTORER_MD = """\
---
name: Refactorer
description: Finds SRP violations.
type: subagent
platform: cursor
---
# Refactorer
"""

DOC_WRITER_MD = """\
---
name: Doc Writer
description: Writes docstrings.
type: skill
platform: windsurf
---
# Doc Writer
"""


class TestFetchDocument:
    @respx.mock
    async def test_fetch_document(self):
        respx.get(f"{BASE}/cursor/refactorer.md").respond(text=REFACTORER_MD)
        async with HTTPDocumentSource(BASE) as source:
            text = await source.fetch_document("cursor/refactorer.md")
        assert text == REFACTORER_MD

    @respx.mock
    async def test_missing_document_raises(self):
        respx.get(f"{BASE}/cursor/nope.md").respond(status_code=404)
        async with HTTPDocumentSource(BASE) as source:
            with pytest.raises(DocumentNotFoundError):
                await source.fetch_document("cursor/nope.md")

    @respx.mock
    async def test_server_error_raises_source_error(self):
        respx.get(f"{BASE}/broken.md").respond(status_code=500)
        async with HTTPDocumentSource(BASE) as source:
            with pytest.raises(DocumentSourceError, match="500"):
                await source.fetch_document("broken.md")

    @respx.mock
    async def test_connection_error(self):
        respx.get(f"{BASE}/fail.md").mock(side_effect=httpx.ConnectError("refused"))
        async with HTTPDocumentSource(BASE) as source:
            with pytest.raises(DocumentSourceError, match="failed"):
                await source.fetch_document("fail.md")

    @respx.mock
    async def test_error_messages_do_not_leak_url(self):
        respx.get(f"{BASE}/secret.md").respond(status_code=403)
        async with HTTPDocumentSource(BASE) as source:
            with pytest.raises(DocumentSourceError, match="403") as exc_info:
                await source.fetch_document("secret.md")
        assert BASE not in str(exc_info.value)


class TestFetchDocuments:
    @respx.mock
    async def test_results_in_input_order(self):
        respx.get(f"{BASE}/windsurf/doc-writer.md").respond(text=DOC_WRITER_MD)
        respx.get(f"{BASE}/cursor/refactorer.md").respond(text=REFACTORER_MD)
        paths = ["windsurf/doc-writer.md", "cursor/refactorer.md"]
        async with HTTPDocumentSource(BASE, max_concurrency=1) as source:
            docs = await source.fetch_documents(paths)
        assert docs == [
            ("windsurf/doc-writer.md", DOC_WRITER_MD),
            ("cursor/refactorer.md", REFACTORER_MD),
        ]

    async def test_empty_paths(self):
        async with HTTPDocumentSource(BASE) as source:
            assert await source.fetch_documents([]) == []

    async def test_unsafe_path_rejected_before_fetching(self):
        async with HTTPDocumentSource(BASE) as source:
            with pytest.raises(ValueError, match="Invalid source path"):
                await source.fetch_documents(["ok.md", "../etc/passwd"])

    @respx.mock
    async def test_build_index_from_fetched_documents(self):
        respx.get(f"{BASE}/cursor/refactorer.md").respond(text=REFACTORER_MD)
        respx.get(f"{BASE}/bad.md").respond(text="# no header")
        async with HTTPDocumentSource(BASE) as source:
            docs = await source.fetch_documents(["cursor/refactorer.md", "bad.md"])
        index = build_index(docs)
        assert list(index.entries) == ["cursor/refactorer.md"]
        assert [f.source_path for f in index.failures] == ["bad.md"]

    def test_max_concurrency_must_be_positive(self):
        with pytest.raises(ValueError, match="max_concurrency"):
            HTTPDocumentSource(BASE, max_concurrency=0)


class TestClientLifecycle:
    @respx.mock
    async def test_external_client_not_closed(self):
        respx.get(f"{BASE}/a.md").respond(text=REFACTORER_MD)
        client = httpx.AsyncClient()
        source = HTTPDocumentSource(BASE, client=client)
        await source.fetch_document("a.md")
        await source.aclose()
        assert not client.is_closed
        await client.aclose()

    @respx.mock
    async def test_async_context_manager_closes_owned_client(self):
        respx.get(f"{BASE}/a.md").respond(text=REFACTORER_MD)
        async with HTTPDocumentSource(BASE) as source:
            await source.fetch_document("a.md")
        assert source._client.is_closed

    async def test_aclose_idempotent(self):
        source = HTTPDocumentSource(BASE)
        await source.aclose()
        await source.aclose()

    def test_trailing_slash_stripped(self):
        source = HTTPDocumentSource(f"{BASE}/")
        assert source._base_url == BASE

    @respx.mock
    async def test_custom_headers(self):
        route = respx.get(f"{BASE}/a.md").respond(text=REFACTORER_MD)
        async with HTTPDocumentSource(BASE, headers={"Authorization": "Bearer tok"}) as source:
            await source.fetch_document("a.md")
        assert route.calls[0].request.headers["Authorization"] == "Bearer tok"

    @respx.mock
    async def test_custom_params(self):
        route = respx.get(f"{BASE}/a.md").respond(text=REFACTORER_MD)
        async with HTTPDocumentSource(BASE, params={"ref": "main"}) as source:
            await source.fetch_document("a.md")
        assert "ref=main" in str(route.calls[0].request.url)

    def test_headers_and_client_conflict(self):
        client = httpx.AsyncClient()
        with pytest.raises(ValueError, match="Cannot specify both"):
            HTTPDocumentSource(BASE, client=client, headers={"X-Key": "v"})


class TestSecurity:
    def test_require_tls_rejects_http(self):
        with pytest.raises(ValueError, match="require_tls"):
            HTTPDocumentSource("http://example.com/catalog", require_tls=True)

    def test_non_http_scheme_rejected(self):
        with pytest.raises(ValueError, match="http"):
            HTTPDocumentSource("file:///etc")

    def test_http_url_emits_warning(self):
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            source = HTTPDocumentSource("http://example.com/catalog")
        assert len(w) == 1
        assert "unencrypted HTTP" in str(w[0].message)
        asyncio.run(source.aclose())

    def test_https_url_no_warning(self):
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            HTTPDocumentSource(BASE, require_tls=True)
        assert len(w) == 0

    def test_default_timeout_set(self):
        source = HTTPDocumentSource(BASE)
        assert source._client.timeout.connect == DEFAULT_TIMEOUT_SECONDS
        assert source._client.timeout.read == DEFAULT_TIMEOUT_SECONDS

    def test_follow_redirects_disabled(self):
        assert HTTPDocumentSource(BASE)._client.follow_redirects is False

    @respx.mock
    async def test_oversized_response_rejected(self):
        respx.get(f"{BASE}/big.md").respond(text="x" * 100)
        async with HTTPDocumentSource(BASE, max_response_bytes=50) as source:
            with pytest.raises(DocumentSourceError, match="exceeds maximum size"):
                await source.fetch_document("big.md")

    @respx.mock
    async def test_response_exactly_at_max_passes(self):
        respx.get(f"{BASE}/exact.md").respond(text="x" * 100)
        async with HTTPDocumentSource(BASE, max_response_bytes=100) as source:
            assert len(await source.fetch_document("exact.md")) == 100

    @pytest.mark.parametrize(
        "bad_path",
        [
            "",
            "../secret.md",
            "cursor/../secret.md",
            "cursor//double.md",
            "/absolute.md",
            ".hidden.md",
            "has space.md",
            "back\\slash.md",
            "ünicode.md",
        ],
    )
    async def test_invalid_paths_rejected(self, bad_path: str):
        async with HTTPDocumentSource(BASE) as source:
            with pytest.raises(ValueError, match="Invalid source path"):
                await source.fetch_document(bad_path)

    @respx.mock
    async def test_nested_path_with_dots_accepted(self):
        respx.get(f"{BASE}/cursor/v1.2/refactorer.md").respond(text=REFACTORER_MD)
        async with HTTPDocumentSource(BASE) as source:
            assert await source.fetch_document("cursor/v1.2/refactorer.md") == REFACTORER_MD
