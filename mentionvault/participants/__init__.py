"""Curated participant list and the rewrites its edits trigger."""

from .manager import ACTIVE_PARTICIPANT_TOKEN, ParticipantManager, detect_transitions

__all__ = ["ACTIVE_PARTICIPANT_TOKEN", "ParticipantManager", "detect_transitions"]
