"""
mentionvault: participant mentions across a vault of text documents.

Finds, renames and queries @-mentions written as wikilinks
(``@[[id|name]]``) or explicit links (``@[name](mention://id)``).
"""

__version__ = "0.1.0"

# Import main components
from .codec import decode_all, encode
from .config import ConfigManager
from .database import DatabaseManager
from .engine import build_identity_table, find_documents, rewrite, scan
from .errors import (
    DocumentNotFound,
    DocumentStoreError,
    InvalidCharacters,
    MentionVaultError,
    ParticipantError,
    WriteDenied,
)
from .models import MentionForm, MentionOccurrence, Participant, RewriteTransition
from .participants import ParticipantManager
from .stores import BaseDocumentStore, InMemoryDocumentStore, MarkdownVaultStore
from .versioning import VersionManager

__all__ = [
    "decode_all",
    "encode",
    "ConfigManager",
    "DatabaseManager",
    "build_identity_table",
    "find_documents",
    "rewrite",
    "scan",
    "DocumentNotFound",
    "DocumentStoreError",
    "InvalidCharacters",
    "MentionVaultError",
    "ParticipantError",
    "WriteDenied",
    "MentionForm",
    "MentionOccurrence",
    "Participant",
    "RewriteTransition",
    "ParticipantManager",
    "BaseDocumentStore",
    "InMemoryDocumentStore",
    "MarkdownVaultStore",
    "VersionManager",
]
