"""
Participant management for mentionvault.

This module owns the curated participant list: adding, editing and deleting
participants, seeding the list from the vault, choosing the active
participant, and turning participant edits into rewrite transitions.
"""

import logging
import threading
from typing import Iterable, List, Optional

from ..codec import encode, validate
from ..config import ConfigManager
from ..database import DatabaseManager
from ..engine import IdentityTable, build_identity_table, rewrite, scan
from ..errors import ParticipantError
from ..models import (
    MentionForm,
    MentionSuggestion,
    Participant,
    RewriteReport,
    RewriteTransition,
)
from ..stores import BaseDocumentStore


# Query token that stands for the active participant
ACTIVE_PARTICIPANT_TOKEN = "me"


def detect_transitions(old_participants: Iterable[Participant],
                       new_participants: Iterable[Participant]) -> List[RewriteTransition]:
    """
    Work out which rewrites a change of the participant list calls for.

    Two kinds of change are recognised: a participant whose id stayed the same
    but whose name changed, and a participant whose name stayed the same but
    whose id changed. A participant whose id and name both changed looks like
    a deletion plus an addition and yields nothing; callers that know which
    participant was edited should build the transition themselves.

    Returns:
        Transitions in detection order, without duplicates
    """
    old_participants = list(old_participants)
    new_participants = list(new_participants)
    transitions: List[RewriteTransition] = []

    def add(transition: RewriteTransition):
        if transition not in transitions:
            transitions.append(transition)

    # Same id, different name
    for old in old_participants:
        new = next((p for p in new_participants if p.id == old.id), None)
        if new and new.name != old.name:
            add(RewriteTransition(old_id=old.id, new_name=new.name, new_id=new.id))

    # Same name, different id
    for old in old_participants:
        new = next((p for p in new_participants if p.name == old.name and p.id != old.id), None)
        if new:
            add(RewriteTransition(old_id=old.id, new_name=new.name, new_id=new.id))

    return transitions


class ParticipantManager:
    """
    Edits the curated participant list and keeps vault mentions in step.
    """

    def __init__(self, database: DatabaseManager, store: BaseDocumentStore,
                 config: ConfigManager, username: Optional[str] = None):
        """
        Initialize the participant manager.

        Args:
            database: Connected, initialized database manager
            store: Document store holding the vault
            config: Configuration (controls auto-update and the default form)
            username: Local user whose active participant is managed;
                defaults to the current OS user
        """
        self.database = database
        self.store = store
        self.config = config
        self.username = username

    # Participant list

    def list_participants(self) -> List[Participant]:
        return self.database.load_participants()

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        return next((p for p in self.list_participants() if p.id == participant_id), None)

    @staticmethod
    def _clean(participant_id: str, name: str) -> Participant:
        participant_id = (participant_id or "").strip()
        name = (name or "").strip()
        if not participant_id or not name:
            raise ParticipantError("Both id and name are required")
        for form in MentionForm:
            validate(form, participant_id, name)
        return Participant(id=participant_id, name=name)

    def add_participant(self, participant_id: str, name: str) -> Participant:
        """
        Add a participant to the curated list.

        Raises:
            ParticipantError: if the id or name is empty or already taken
            InvalidCharacters: if the id or name cannot appear in a mention
        """
        participant = self._clean(participant_id, name)
        participants = self.list_participants()

        if any(p.id == participant.id or p.name == participant.name for p in participants):
            raise ParticipantError("A participant with this id or name already exists")

        participants.append(participant)
        self.database.save_participants(participants)
        logging.info(f"Added participant {participant.name} ({participant.id})")
        return participant

    def update_participant(self, participant_id: str, new_id: Optional[str] = None,
                           new_name: Optional[str] = None,
                           cancel_event: Optional[threading.Event] = None) -> List[RewriteReport]:
        """
        Change a participant's id and/or name.

        The new participant list is saved first, then (if auto-update is
        enabled) every mention of the old id is rewritten.

        Returns:
            Rewrite reports, empty if nothing changed or auto-update is off

        Raises:
            ParticipantError: if the participant is unknown, or the new id or
                name is empty or taken by another participant
            InvalidCharacters: if the new id or name cannot appear in a mention
        """
        participants = self.list_participants()
        index = next((i for i, p in enumerate(participants) if p.id == participant_id), None)
        if index is None:
            raise ParticipantError(f"Unknown participant: {participant_id}")

        old = participants[index]
        updated = self._clean(
            old.id if new_id is None else new_id,
            old.name if new_name is None else new_name,
        )
        if updated == old:
            return []

        for i, other in enumerate(participants):
            if i == index:
                continue
            if other.id == updated.id:
                raise ParticipantError("A participant with this ID already exists")
            if other.name == updated.name:
                raise ParticipantError("A participant with this name already exists")

        participants[index] = updated
        self.database.save_participants(participants)

        if self.active_identifier() == old.id and updated.id != old.id:
            self.database.save_active_identifier(updated.id, self.username)

        transition = RewriteTransition(old_id=old.id, new_name=updated.name, new_id=updated.id)
        return self.apply_transitions([transition], cancel_event)

    def replace_participants(self, new_participants: Iterable[Participant],
                             cancel_event: Optional[threading.Event] = None) -> List[RewriteReport]:
        """
        Replace the whole participant list, rewriting mentions for detected renames.

        Raises:
            ParticipantError: if two participants share an id
        """
        new_participants = [self._clean(p.id, p.name) for p in new_participants]
        ids = [p.id for p in new_participants]
        if len(ids) != len(set(ids)):
            raise ParticipantError("Participant ids must be unique")

        old_participants = self.list_participants()
        self.database.save_participants(new_participants)
        return self.apply_transitions(detect_transitions(old_participants, new_participants), cancel_event)

    def delete_participant(self, participant_id: str) -> Participant:
        """
        Remove a participant. Mentions of it in the vault are left as they are.

        Raises:
            ParticipantError: if the participant is unknown
        """
        participants = self.list_participants()
        removed = next((p for p in participants if p.id == participant_id), None)
        if removed is None:
            raise ParticipantError(f"Unknown participant: {participant_id}")

        self.database.save_participants([p for p in participants if p.id != participant_id])
        logging.info(f"Deleted participant {removed.name} ({removed.id})")
        return removed

    def generate_from_vault(self, cancel_event: Optional[threading.Event] = None) -> IdentityTable:
        """
        Seed the participant list from the mentions found in the vault.

        Curated participants are kept as they are; ids only found in the vault
        are appended with the first name they were seen with. Ids that cannot
        be written in every mention form are left out and listed in the
        table's ``skipped`` mapping.
        """
        existing = self.list_participants()
        table = build_identity_table(scan(self.store, cancel_event), existing, required_forms=MentionForm)
        self.database.save_participants(table.to_participants())
        logging.info(f"Generated {len(table) - len(existing)} participants from vault")
        return table

    # Rewrites

    def apply_transitions(self, transitions: Iterable[RewriteTransition],
                          cancel_event: Optional[threading.Event] = None) -> List[RewriteReport]:
        """Run the rewrite engine for each transition if auto-update is enabled."""
        transitions = list(transitions)
        if not transitions:
            return []
        if not self.config.auto_update_mentions:
            logging.info(f"Auto-update disabled; skipping {len(transitions)} mention rewrite(s)")
            return []

        reports = []
        for transition in transitions:
            if cancel_event is not None and cancel_event.is_set():
                break
            reports.append(rewrite(self.store, transition, cancel_event))

        total = sum(report.total_count for report in reports)
        if total:
            logging.info(f"Updated {total} mention{'s' if total != 1 else ''} in vault")
        return reports

    # Active participant

    def active_identifier(self) -> Optional[str]:
        return self.database.load_active_identifier(self.username)

    def active_participant(self) -> Optional[Participant]:
        active_id = self.active_identifier()
        if not active_id:
            return None
        return self.get_participant(active_id)

    def set_active(self, participant_id: str) -> Participant:
        participant = self.get_participant(participant_id)
        if participant is None:
            raise ParticipantError(f"Unknown participant: {participant_id}")
        self.database.save_active_identifier(participant.id, self.username)
        logging.info(f"Active user set to: {participant.name}")
        return participant

    def clear_active(self) -> None:
        self.database.clear_active_identifier(self.username)
        logging.info("Active user cleared")

    def resolve_identifiers(self, identifiers: Iterable[str]) -> List[str]:
        """
        Replace the "me" token with the active participant id.

        Raises:
            ParticipantError: if "me" is used but no active participant is set
        """
        resolved = []
        for identifier in identifiers:
            if identifier.lower() == ACTIVE_PARTICIPANT_TOKEN:
                active_id = self.active_identifier()
                if not active_id:
                    raise ParticipantError("No active participant set")
                identifier = active_id
            if identifier not in resolved:
                resolved.append(identifier)
        return resolved

    # Mention insertion

    def suggest(self, query: str) -> List[MentionSuggestion]:
        """
        Autocomplete participants for a partially typed mention.

        Matches the query case-insensitively against ids and names. When a
        non-empty query matches nobody, a single suggestion to create a new
        participant named after the query is returned.
        """
        needle = query.lower()
        suggestions = [
            MentionSuggestion(id=p.id, name=p.name)
            for p in self.list_participants()
            if needle in p.id.lower() or needle in p.name.lower()
        ]
        if query and not suggestions:
            suggestions.append(MentionSuggestion(id=query, name=query, is_new=True))
        return suggestions

    def mention_text(self, participant_id: str, form: Optional[MentionForm] = None) -> str:
        """
        Build the markup that mentions a participant.

        Args:
            participant_id: A curated participant's id
            form: Mention form; defaults to the configured one
        """
        participant = self.get_participant(participant_id)
        if participant is None:
            raise ParticipantError(f"Unknown participant: {participant_id}")
        return encode(MentionForm(form or self.config.default_mention_form), participant.id, participant.name)

    def accept_suggestion(self, suggestion: MentionSuggestion,
                          form: Optional[MentionForm] = None) -> str:
        """
        Turn a chosen suggestion into mention markup, creating the participant if new.
        """
        participant = Participant(id=suggestion.id, name=suggestion.name)
        if suggestion.is_new:
            participant = self._clean(suggestion.id, suggestion.name)
            existing = next((p for p in self.list_participants()
                             if p.id == participant.id or p.name == participant.name), None)
            participant = existing if existing is not None else self.add_participant(participant.id, participant.name)
        return encode(MentionForm(form or self.config.default_mention_form), participant.id, participant.name)
