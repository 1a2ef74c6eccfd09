"""
Markdown vault store for mentionvault.

This module exposes a directory tree of Markdown files as a document store.
Document identifiers are POSIX paths relative to the vault root.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from ..errors import DocumentNotFound, DocumentStoreError, WriteDenied
from .base import BaseDocumentStore


DEFAULT_EXCLUDE_DIRS = (".git", ".obsidian", ".trash")


class MarkdownVaultStore(BaseDocumentStore):
    """
    Document store backed by the Markdown files under a directory.
    """

    def __init__(self, root: str, extension: str = ".md",
                 exclude_dirs: Optional[Iterable[str]] = None):
        """
        Initialize the vault store.

        Args:
            root: Vault root directory
            extension: File extension of documents (e.g. ".md")
            exclude_dirs: Directory names never descended into
        """
        self.root = Path(root)
        self.extension = extension
        self.exclude_dirs = set(exclude_dirs if exclude_dirs is not None else DEFAULT_EXCLUDE_DIRS)

        if not self.root.is_dir():
            raise FileNotFoundError(f"Vault directory not found: {self.root}")

        logging.info(f"Initialized Markdown vault store for: {self.root}")

    def _path_for(self, document_id: str) -> Path:
        path = (self.root / document_id).resolve()
        if self.root.resolve() not in path.parents:
            raise DocumentNotFound(document_id, "path escapes the vault root")
        return path

    def list_documents(self) -> List[str]:
        documents = []
        for path in self.root.rglob(f"*{self.extension}"):
            relative = path.relative_to(self.root)
            if any(part in self.exclude_dirs for part in relative.parts[:-1]):
                continue
            if path.is_file():
                documents.append(relative.as_posix())
        return sorted(documents)

    def read_document(self, document_id: str) -> str:
        path = self._path_for(document_id)
        try:
            # newline="" keeps CRLF line endings intact across a rewrite
            with open(path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except FileNotFoundError:
            raise DocumentNotFound(document_id, "document no longer exists")
        except OSError as e:
            raise DocumentStoreError(document_id, f"read failed: {e}") from e

    def write_document(self, document_id: str, text: str) -> None:
        path = self._path_for(document_id)
        if not path.is_file():
            raise DocumentNotFound(document_id, "document no longer exists")

        # Sibling temp file + rename: a failed write leaves the original intact
        temp_name = None
        try:
            fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=".mentionvault-", suffix=".tmp")
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
            shutil.copymode(path, temp_name)
            os.replace(temp_name, path)
            temp_name = None
        except PermissionError as e:
            raise WriteDenied(document_id, f"write denied: {e}") from e
        except OSError as e:
            raise DocumentStoreError(document_id, f"write failed: {e}") from e
        finally:
            if temp_name and os.path.exists(temp_name):
                os.unlink(temp_name)

    def modified_time(self, document_id: str) -> Optional[float]:
        try:
            return self._path_for(document_id).stat().st_mtime
        except (OSError, DocumentNotFound):
            return None
