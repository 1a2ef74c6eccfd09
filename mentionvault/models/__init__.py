"""Data models for mentionvault."""

from .participant import Participant, MentionSuggestion
from .mentions import (
    MentionForm,
    MentionOccurrence,
    RewriteTransition,
    RewriteOutcome,
    DocumentRewrite,
    RewriteReport,
    ScanResult,
)

__all__ = [
    "Participant",
    "MentionSuggestion",
    "MentionForm",
    "MentionOccurrence",
    "RewriteTransition",
    "RewriteOutcome",
    "DocumentRewrite",
    "RewriteReport",
    "ScanResult",
]
