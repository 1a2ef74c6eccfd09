"""
Git version management for mentionvault.

This module records mention rewrites in the vault's Git repository so every
rename pass can be reviewed and reverted as a single commit.
"""

import logging
from pathlib import Path
from typing import List, Optional, Any
from datetime import datetime

import git
from git import Repo, InvalidGitRepositoryError, NoSuchPathError

from ..models import RewriteReport


class VersionManager:
    """
    Manages Git operations for a vault directory.
    """

    def __init__(self, repo_path: str = ".", author_name: str = "mentionvault",
                 author_email: str = "mentionvault@localhost"):
        """
        Initialize the version manager.

        Args:
            repo_path: Path to the vault's Git repository
            author_name: Name recorded on commits
            author_email: Email recorded on commits
        """
        self.repo_path = Path(repo_path)
        self.author_name = author_name
        self.author_email = author_email
        self.repo: Optional[Any] = None

        logging.info(f"Initialized VersionManager for: {self.repo_path}")

    def initialize_repository(self) -> bool:
        """
        Open the vault repository, creating it if it doesn't exist.

        Returns:
            True if repository was opened or created, False on error
        """
        try:
            if self._is_git_repository():
                logging.info("Git repository already exists")
                self.repo = Repo(self.repo_path)
                return True

            self.repo_path.mkdir(parents=True, exist_ok=True)
            self.repo = Repo.init(self.repo_path)
            logging.info("Git repository initialized successfully")
            return True

        except (git.GitError, OSError) as e:
            logging.error(f"Failed to initialize Git repository: {e}")
            return False

    def _is_git_repository(self) -> bool:
        """Check if the path is already a Git repository."""
        try:
            if not self.repo_path.exists():
                return False
            Repo(self.repo_path)
            return True
        except (InvalidGitRepositoryError, NoSuchPathError):
            return False

    def stage_files(self, file_paths: List[str]) -> bool:
        """
        Stage multiple files for commit.

        Args:
            file_paths: File paths, absolute or relative to the repository root

        Returns:
            True if all files were staged successfully, False otherwise
        """
        if not self.repo:
            logging.error("Repository not initialized")
            return False

        try:
            rel_paths = []
            for file_path in file_paths:
                rel_path = Path(file_path)
                if rel_path.is_absolute():
                    rel_path = rel_path.relative_to(self.repo_path.resolve())
                rel_paths.append(rel_path.as_posix())

            self.repo.index.add(rel_paths)
            logging.info(f"Staged {len(rel_paths)} files")
            return True

        except (git.GitError, OSError, ValueError) as e:
            logging.error(f"Failed to stage files: {e}")
            return False

    def commit_changes(self, message: str) -> bool:
        """
        Commit staged changes with a descriptive message.

        Returns:
            True if commit was successful (or there was nothing to commit),
            False otherwise
        """
        if not self.repo:
            logging.error("Repository not initialized")
            return False

        try:
            # A fresh repository has no HEAD to diff against
            if self.repo.head.is_valid() and not self.repo.index.diff("HEAD"):
                logging.info("No changes to commit")
                return True

            actor = git.Actor(self.author_name, self.author_email)
            commit = self.repo.index.commit(message, author=actor, committer=actor)

            logging.info(f"Created commit: {commit.hexsha[:8]} - {message.splitlines()[0]}")
            return True

        except (git.GitError, OSError, ValueError) as e:
            logging.error(f"Failed to commit changes: {e}")
            return False

    def stage_and_commit(self, file_paths: List[str], message: str) -> bool:
        """
        Stage files and commit them in one operation.
        """
        if self.stage_files(file_paths):
            return self.commit_changes(message)
        return False

    def create_rewrite_commit(self, report: RewriteReport) -> bool:
        """
        Commit the documents a rewrite pass changed.

        Args:
            report: The rewrite report; only REWRITTEN documents are staged

        Returns:
            True if commit was successful or nothing was rewritten
        """
        documents = report.rewritten_documents
        if not documents:
            logging.info("No rewritten documents to commit")
            return True

        transition = report.transition
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        rewritten_count = sum(
            entry.occurrences for entry in report.documents
            if entry.document_id in documents
        )

        message = f"""Mentions: {transition.old_id} -> {transition.new_id} ({transition.new_name})

Rewritten by mentionvault on {timestamp}

- {rewritten_count} mention(s) updated in {len(documents)} document(s)
- {len(report.failed_documents)} document(s) could not be updated"""

        return self.stage_and_commit(documents, message)
