"""
Participant models for mentionvault.

This module defines the curated identities that mentions refer to.
"""

from pydantic import BaseModel, Field


class Participant(BaseModel):
    """
    A named identity shared across the whole vault.
    """

    id: str = Field(
        ...,
        description="Stable identity key used inside mention markup"
    )

    name: str = Field(
        ...,
        description="Display name shown to readers"
    )


class MentionSuggestion(BaseModel):
    """
    A candidate offered while typing an @ mention.
    """

    id: str = Field(
        ...,
        description="Participant id the mention would refer to"
    )

    name: str = Field(
        ...,
        description="Display name the mention would carry"
    )

    is_new: bool = Field(
        default=False,
        description="True when no participant matched and accepting creates one"
    )
