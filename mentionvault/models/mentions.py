"""
Mention models for mentionvault.

This module defines the ephemeral structures produced by scanning, querying
and rewriting a vault. None of them are persisted.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class MentionForm(str, Enum):
    """The two surface encodings of a mention."""

    WIKILINK = "wikilink"   # @[[<id>|<name>]]
    EXPLICIT = "explicit"   # @[<name>](mention://<id>)


class MentionOccurrence(BaseModel):
    """
    One concrete mention found at a specific location in a document.
    """

    document_id: str = Field(
        default="",
        description="Identifier of the document the mention was read from"
    )

    participant_id: str = Field(
        ...,
        description="The id field of the mention markup"
    )

    display_name: str = Field(
        ...,
        description="The cached name carried by the markup (may be stale)"
    )

    encoding: MentionForm = Field(
        ...,
        description="Which surface form the mention uses"
    )

    start_offset: int = Field(
        ...,
        description="Character offset of the leading '@' in the text as read"
    )

    end_offset: int = Field(
        ...,
        description="Character offset just past the closing delimiter"
    )


class RewriteTransition(BaseModel):
    """
    A requested identity change to propagate to every mention of old_id.
    """

    old_id: str = Field(..., description="Participant id currently used in mentions")
    new_name: str = Field(..., description="Display name to write into each mention")
    new_id: str = Field(..., description="Participant id to write into each mention")


class RewriteOutcome(str, Enum):
    """What happened to a single document during a rewrite pass."""

    NO_OCCURRENCES = "no_occurrences"
    REWRITTEN = "rewritten"
    UNCHANGED = "unchanged"
    READ_FAILED = "read_failed"
    WRITE_FAILED = "write_failed"


class DocumentRewrite(BaseModel):
    """
    Per-document entry of a rewrite report.
    """

    document_id: str = Field(..., description="The document processed")
    outcome: RewriteOutcome = Field(..., description="Result of processing the document")
    occurrences: int = Field(
        default=0,
        description="Mentions of the old id found in the document before rewriting"
    )
    error: Optional[str] = Field(
        default=None,
        description="Store error message for READ_FAILED and WRITE_FAILED"
    )


class RewriteReport(BaseModel):
    """
    Complete result of applying a transition to a vault.
    """

    transition: RewriteTransition
    documents: List[DocumentRewrite] = Field(default_factory=list)
    cancelled: bool = Field(
        default=False,
        description="True if the pass was stopped before every document was visited"
    )

    @property
    def per_document_count(self) -> Dict[str, int]:
        return {entry.document_id: entry.occurrences for entry in self.documents}

    @property
    def total_count(self) -> int:
        return sum(entry.occurrences for entry in self.documents)

    @property
    def rewritten_documents(self) -> List[str]:
        return [
            entry.document_id for entry in self.documents
            if entry.outcome == RewriteOutcome.REWRITTEN
        ]

    @property
    def failed_documents(self) -> List[str]:
        return [
            entry.document_id for entry in self.documents
            if entry.outcome in (RewriteOutcome.READ_FAILED, RewriteOutcome.WRITE_FAILED)
        ]


class ScanResult(BaseModel):
    """
    All mention occurrences in a vault, grouped by document.
    """

    occurrences: Dict[str, List[MentionOccurrence]] = Field(
        default_factory=dict,
        description="Document id to occurrences in text order, in listing order"
    )

    errors: Dict[str, str] = Field(
        default_factory=dict,
        description="Documents that could not be read, with the store error"
    )

    cancelled: bool = Field(default=False)

    @property
    def total_count(self) -> int:
        return sum(len(found) for found in self.occurrences.values())
