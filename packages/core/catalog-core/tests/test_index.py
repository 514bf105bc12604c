"""Tests for build_index and CatalogIndex."""

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from catalog_core import (
    DUPLICATE_SOURCE_PATH,
    CatalogIndex,
    DocumentType,
    EntryNotFoundError,
    Failure,
    Platform,
    build_index,
)


def _doc(
    name: str = "Refactorer",
    description: str = "Finds SRP violations.",
    type: str = "subagent",
    platform: str = "cursor",
    extra: str = "",
) -> str:
    return (
        f"---\nname: {name}\ndescription: {description}\n"
        f"type: {type}\nplatform: {platform}\n{extra}---\n# {name}\n"
    )


INVALID_DOC = "---\nname: X\ntype: agent\nplatform: cursor\n---\n"


class TestBuildIndex:
    def test_end_to_end_single_entry(self):
        text = _doc(extra="category: Development\n")
        index = build_index([("agents/refactorer.md", text)])
        assert index.failures == ()
        assert list(index.entries) == ["agents/refactorer.md"]
        entry = index.entries["agents/refactorer.md"]
        assert entry.name == "Refactorer"
        assert entry.description == "Finds SRP violations."
        assert entry.type is DocumentType.SUBAGENT
        assert entry.platform is Platform.CURSOR
        assert entry.category == "Development"
        assert entry.source_path == "agents/refactorer.md"

    def test_invalid_document_recorded(self):
        index = build_index([("agents/x.md", INVALID_DOC)])
        assert len(index) == 0
        assert index.failures == (
            Failure(
                "agents/x.md",
                ("missing field: description", "unknown type: 'agent'"),
            ),
        )

    def test_unparseable_document_is_isolated(self):
        nested = "---\nname: " + "[" * 5000 + "]" * 5000 + "\n---\nbody"
        index = build_index([("deep.md", nested), ("agents/refactorer.md", _doc())])
        assert list(index.entries) == ["agents/refactorer.md"]
        assert index.failures == (
            Failure("deep.md", ("invalid frontmatter: nesting too deep",)),
        )

    def test_empty_input(self):
        index = build_index([])
        assert len(index) == 0
        assert index.failures == ()
        assert index.ok

    def test_completeness(self):
        docs = [
            ("a.md", _doc("A")),
            ("b.md", INVALID_DOC),
            ("c.md", "no header"),
            ("d.md", _doc("D", platform="aider")),
            ("a.md", _doc("A again")),
        ]
        index = build_index(docs)
        assert len(index.entries) + len(index.failures) == len(docs)
        assert list(index.entries) == ["a.md", "d.md"]
        assert [f.source_path for f in index.failures] == ["b.md", "c.md", "a.md"]
        assert all(f.reasons for f in index.failures)

    def test_failures_keep_input_order(self):
        docs = [("z.md", "x"), ("a.md", "y"), ("m.md", "z")]
        index = build_index(docs)
        assert [f.source_path for f in index.failures] == ["z.md", "a.md", "m.md"]

    def test_accepts_generator(self):
        index = build_index((f"{i}.md", _doc(f"E{i}")) for i in range(3))
        assert len(index) == 3

    def test_structural_error_does_not_abort_run(self):
        docs = [("bad.md", "---\nunterminated"), ("good.md", _doc())]
        index = build_index(docs)
        assert "good.md" in index
        assert index.failures[0].source_path == "bad.md"
        assert len(index.failures[0].reasons) == 1


class TestDuplicatePaths:
    def test_first_write_wins(self):
        docs = [("a.md", _doc("First")), ("a.md", _doc("Second"))]
        index = build_index(docs)
        assert index.entries["a.md"].name == "First"
        assert index.failures == (Failure("a.md", (DUPLICATE_SOURCE_PATH,)),)

    def test_duplicate_of_invalid_document(self):
        docs = [("a.md", INVALID_DOC), ("a.md", _doc())]
        index = build_index(docs)
        assert len(index) == 0
        assert len(index.failures) == 2
        assert index.failures[1] == Failure("a.md", (DUPLICATE_SOURCE_PATH,))

    def test_duplicate_invalid_reports_only_duplicate(self):
        docs = [("a.md", _doc()), ("a.md", INVALID_DOC)]
        index = build_index(docs)
        assert index.failures == (Failure("a.md", ("duplicate source path",)),)

    def test_duplicate_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            build_index([("a.md", _doc()), ("a.md", _doc())])
        assert "duplicate source path" in caplog.text


class TestParallelBuild:
    def test_executor_matches_sequential(self):
        docs = [(f"{i % 7}.md", _doc(f"E{i}") if i % 3 else INVALID_DOC) for i in range(20)]
        sequential = build_index(docs)
        with ThreadPoolExecutor(max_workers=4) as pool:
            parallel = build_index(docs, executor=pool)
        assert dict(parallel.entries) == dict(sequential.entries)
        assert parallel.failures == sequential.failures


def _sample_index() -> CatalogIndex:
    return build_index(
        [
            ("cursor/refactor.md", _doc("Refactorer", extra="tags: [python, refactoring]\n")),
            (
                "cursor/tests.md",
                _doc("Tester", type="skill", extra="recommendedLLMs: [gpt-4o]\ntags: [python]\n"),
            ),
            ("aider/docs.md", _doc("Doc Writer", platform="aider", extra="category: Docs\n")),
            ("broken.md", INVALID_DOC),
        ]
    )


class TestQueries:
    def test_filter_by_platform(self):
        index = _sample_index()
        names = [e.name for e in index.filter_by("platform", "cursor")]
        assert names == ["Refactorer", "Tester"]

    def test_filter_by_enum_member(self):
        index = _sample_index()
        assert [e.name for e in index.filter_by("platform", Platform.AIDER)] == ["Doc Writer"]

    def test_filter_by_type(self):
        index = _sample_index()
        assert [e.name for e in index.filter_by("type", "skill")] == ["Tester"]

    def test_filter_by_tag_membership(self):
        index = _sample_index()
        assert [e.name for e in index.filter_by("tags", "python")] == ["Refactorer", "Tester"]
        assert [e.name for e in index.filter_by("tags", "refactoring")] == ["Refactorer"]

    def test_filter_by_header_key(self):
        index = _sample_index()
        assert [e.name for e in index.filter_by("recommendedLLMs", "gpt-4o")] == ["Tester"]
        assert [e.name for e in index.filter_by("recommended_llms", "gpt-4o")] == ["Tester"]

    def test_filter_by_category(self):
        index = _sample_index()
        assert [e.name for e in index.filter_by("category", "Docs")] == ["Doc Writer"]

    def test_filter_by_no_match(self):
        assert _sample_index().filter_by("platform", "windsurf") == []

    def test_filter_by_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown entry field"):
            _sample_index().filter_by("colour", "blue")

    def test_filter_by_collection_requires_single_value(self):
        with pytest.raises(ValueError, match="single text value"):
            _sample_index().filter_by("tags", ["python"])

    def test_count_by_platform(self):
        counts = _sample_index().count_by_platform()
        assert list(counts) == [p.value for p in Platform]
        assert counts["cursor"] == 2
        assert counts["aider"] == 1
        assert counts["windsurf"] == 0
        assert sum(counts.values()) == 3

    def test_count_by_type(self):
        assert _sample_index().count_by_type() == {"subagent": 2, "skill": 1}

    def test_count_by_tag(self):
        assert _sample_index().count_by_tag() == {"python": 2, "refactoring": 1}

    def test_counts_exclude_failures(self):
        index = build_index([("x.md", INVALID_DOC)])
        assert sum(index.count_by_platform().values()) == 0


class TestCatalogIndex:
    def test_get_entry(self):
        index = _sample_index()
        assert index.get_entry("aider/docs.md").name == "Doc Writer"

    def test_get_missing_entry_raises(self):
        with pytest.raises(EntryNotFoundError, match="broken.md"):
            _sample_index().get_entry("broken.md")

    def test_list_entries_sorted(self):
        paths = [e.source_path for e in _sample_index().list_entries()]
        assert paths == ["aider/docs.md", "cursor/refactor.md", "cursor/tests.md"]

    def test_iteration_in_input_order(self):
        assert [e.name for e in _sample_index()] == ["Refactorer", "Tester", "Doc Writer"]

    def test_contains(self):
        index = _sample_index()
        assert "cursor/refactor.md" in index
        assert "broken.md" not in index

    def test_ok(self):
        assert not _sample_index().ok
        assert build_index([("a.md", _doc())]).ok

    def test_entries_read_only(self):
        index = _sample_index()
        with pytest.raises(TypeError):
            index.entries["new.md"] = index.get_entry("aider/docs.md")  # type: ignore[index]

    def test_snapshot_independent_of_source_mapping(self):
        entries = {}
        index = CatalogIndex(entries, [])
        entries["late.md"] = None
        assert "late.md" not in index

    def test_repr(self):
        assert repr(_sample_index()) == "CatalogIndex(3 entries, 1 failures)"
