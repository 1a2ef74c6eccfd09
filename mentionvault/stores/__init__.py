"""Document stores mentionvault can scan and rewrite."""

from .base import BaseDocumentStore
from .memory import InMemoryDocumentStore
from .markdown import MarkdownVaultStore

__all__ = ["BaseDocumentStore", "InMemoryDocumentStore", "MarkdownVaultStore"]
