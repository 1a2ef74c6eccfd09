import os
import stat

import pytest

from mentionvault.engine import rewrite, scan
from mentionvault.errors import DocumentNotFound, WriteDenied
from mentionvault.models import RewriteOutcome, RewriteTransition
from mentionvault.stores import InMemoryDocumentStore, MarkdownVaultStore


@pytest.fixture
def vault(tmp_path):
    root = tmp_path / "vault"
    (root / "journals").mkdir(parents=True)
    (root / ".obsidian").mkdir()
    (root / "journals" / "2024_05_22.md").write_text("Met @[[john|John Doe]] today.\n", encoding="utf-8")
    (root / "pages.md").write_text("See @[Jane](mention://jane)\r\nand @[[john|John]]\r\n", encoding="utf-8", newline="")
    (root / "notes.txt").write_text("@[[john|John]]", encoding="utf-8")
    (root / ".obsidian" / "workspace.md").write_text("@[[john|John]]", encoding="utf-8")
    return root


def test_lists_markdown_documents_only(vault):
    store = MarkdownVaultStore(str(vault))
    assert store.list_documents() == ["journals/2024_05_22.md", "pages.md"]


def test_custom_extension_and_excludes(vault):
    store = MarkdownVaultStore(str(vault), extension=".txt", exclude_dirs=[])
    assert store.list_documents() == ["notes.txt"]


def test_missing_vault_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        MarkdownVaultStore(str(tmp_path / "nope"))


def test_read_missing_document(vault):
    store = MarkdownVaultStore(str(vault))
    with pytest.raises(DocumentNotFound):
        store.read_document("gone.md")


def test_path_outside_vault_rejected(vault):
    store = MarkdownVaultStore(str(vault))
    with pytest.raises(DocumentNotFound):
        store.read_document("../outside.md")


def test_rewrite_preserves_line_endings(vault):
    store = MarkdownVaultStore(str(vault))
    report = rewrite(store, RewriteTransition(old_id="john", new_name="Johnny", new_id="johnny"))

    assert report.total_count == 2
    assert sorted(report.rewritten_documents) == ["journals/2024_05_22.md", "pages.md"]
    assert (vault / "pages.md").read_bytes() == b"See @[Jane](mention://jane)\r\nand @[[johnny|Johnny]]\r\n"
    assert (vault / ".obsidian" / "workspace.md").read_text(encoding="utf-8") == "@[[john|John]]"
    assert not list(vault.rglob("*.tmp"))


def test_untouched_file_keeps_mtime(vault):
    store = MarkdownVaultStore(str(vault))
    path = vault / "journals" / "2024_05_22.md"
    os.utime(path, (1_000_000, 1_000_000))

    rewrite(store, RewriteTransition(old_id="jane", new_name="Jane D.", new_id="jane"))

    assert path.stat().st_mtime == 1_000_000
    assert store.modified_time("journals/2024_05_22.md") == 1_000_000


@pytest.mark.skipif(os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
                    reason="permission bits are not enforced")
def test_write_denied_is_reported(vault):
    store = MarkdownVaultStore(str(vault))
    journals = vault / "journals"
    journals.chmod(stat.S_IRUSR | stat.S_IXUSR)
    try:
        with pytest.raises(WriteDenied):
            store.write_document("journals/2024_05_22.md", "x")

        report = rewrite(store, RewriteTransition(old_id="john", new_name="J", new_id="j"))
        outcomes = {entry.document_id: entry.outcome for entry in report.documents}
        assert outcomes["journals/2024_05_22.md"] == RewriteOutcome.WRITE_FAILED
        assert outcomes["pages.md"] == RewriteOutcome.REWRITTEN
    finally:
        journals.chmod(stat.S_IRWXU)


def test_scan_markdown_vault(vault):
    result = scan(MarkdownVaultStore(str(vault)))
    assert [o.participant_id for o in result.occurrences["pages.md"]] == ["jane", "john"]


def test_memory_store_records_writes():
    store = InMemoryDocumentStore({"a": "x"})
    store.write_document("a", "y")

    assert store.documents["a"] == "y"
    assert store.written_documents == ["a"]
    with pytest.raises(DocumentNotFound):
        store.write_document("missing", "z")


def test_memory_store_injected_failures():
    store = InMemoryDocumentStore({"a": "x"}, fail_reads=["a"], fail_writes=["a"])
    with pytest.raises(DocumentNotFound):
        store.read_document("a")
    with pytest.raises(WriteDenied):
        store.write_document("a", "y")
