"""Corpus-wide mention operations: scan, identity table, rewrite, query."""

from .scanner import scan
from .identity import IdentityTable, build_identity_table
from .rewrite import rewrite, rewrite_text
from .query import find_documents, sort_by_recency

__all__ = [
    "scan",
    "IdentityTable",
    "build_identity_table",
    "rewrite",
    "rewrite_text",
    "find_documents",
    "sort_by_recency",
]
