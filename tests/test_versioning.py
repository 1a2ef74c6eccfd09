import shutil

import pytest

git = pytest.importorskip("git")

from mentionvault.engine import rewrite
from mentionvault.models import RewriteTransition
from mentionvault.stores import MarkdownVaultStore
from mentionvault.versioning import VersionManager

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


@pytest.fixture
def vault(tmp_path):
    root = tmp_path / "vault"
    (root / "journals").mkdir(parents=True)
    (root / "journals" / "monday.md").write_text("Call @[[john|John]]\n", encoding="utf-8")
    (root / "ideas.md").write_text("Ask @[Jane](mention://jane)\n", encoding="utf-8")
    return root


@pytest.fixture
def version_manager(vault):
    manager = VersionManager(str(vault), author_name="Tester", author_email="tester@example.com")
    assert manager.initialize_repository()
    assert manager.stage_and_commit(["journals/monday.md", "ideas.md"], "Initial vault")
    return manager


def test_initialize_creates_repository(tmp_path):
    manager = VersionManager(str(tmp_path / "new"))
    assert manager.initialize_repository()
    assert (tmp_path / "new" / ".git").is_dir()


def commits(vault):
    return list(git.Repo(vault).iter_commits())


def test_reopens_existing_repository(vault, version_manager):
    again = VersionManager(str(vault))
    assert again.initialize_repository()
    assert commits(vault)[0].message.strip() == "Initial vault"


def test_rewrite_commit_stages_only_rewritten_documents(vault, version_manager):
    store = MarkdownVaultStore(str(vault))
    report = rewrite(store, RewriteTransition(old_id="john", new_name="Johnny", new_id="johnny"))

    assert version_manager.create_rewrite_commit(report)

    history = commits(vault)
    assert len(history) == 2
    assert history[0].message.startswith("Mentions: john -> johnny (Johnny)")
    assert history[0].author.name == "Tester"
    assert list(history[0].stats.files) == ["journals/monday.md"]


def test_rewrite_commit_without_changes(vault, version_manager):
    store = MarkdownVaultStore(str(vault))
    report = rewrite(store, RewriteTransition(old_id="nobody", new_name="Nobody", new_id="nobody"))

    assert version_manager.create_rewrite_commit(report)
    assert len(commits(vault)) == 1


def test_operations_require_repository(vault):
    manager = VersionManager(str(vault))
    assert not manager.stage_files(["ideas.md"])
    assert not manager.commit_changes("nothing")
    assert not (vault / ".git").exists()
