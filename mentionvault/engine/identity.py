"""
Identity table builder for mentionvault.

Folds scanned mentions into a deduplicated participant id to name mapping.
"""

import collections.abc
import logging
from collections import OrderedDict
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from ..codec import validate
from ..errors import InvalidCharacters
from ..models import MentionForm, MentionOccurrence, Participant, ScanResult


class IdentityTable(collections.abc.Mapping):
    """
    Ordered, read-only mapping of participant id to display name.

    Insertion order is preserved: seeded participants first, then ids in the
    order they were first seen in the vault.
    """

    def __init__(self):
        self._names: "OrderedDict[str, str]" = OrderedDict()
        # id -> reason, for vault ids left out of the table
        self.skipped: "OrderedDict[str, str]" = OrderedDict()

    def _add(self, participant_id: str, name: str) -> bool:
        if participant_id in self._names:
            return False
        self._names[participant_id] = name
        return True

    def __getitem__(self, participant_id: str) -> str:
        return self._names[participant_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"IdentityTable({dict(self._names)!r})"

    def to_participants(self) -> List[Participant]:
        return [Participant(id=participant_id, name=name) for participant_id, name in self._names.items()]


ScanInput = Union[ScanResult, Mapping[str, Sequence[MentionOccurrence]], Sequence[MentionOccurrence], None]


def build_identity_table(scan_results: ScanInput,
                         existing_participants: Optional[Iterable[Participant]] = None,
                         required_forms: Iterable[MentionForm] = ()) -> IdentityTable:
    """
    Build the identity table for a vault.

    Existing participants are added first so curated entries survive even
    when no document mentions them. Occurrences are then folded in corpus
    order, then in-document order. The first name recorded for an id wins;
    later, differing names for the same id are discarded.

    Args:
        scan_results: A ScanResult, a mapping of document id to occurrences,
            or a flat sequence of occurrences
        existing_participants: Curated participants to seed the table with
        required_forms: Forms every added id and name must be encodable in.
            Occurrences that fail are left out and listed in ``skipped``.

    Returns:
        The identity table
    """
    table = IdentityTable()
    required_forms = list(required_forms)

    for participant in existing_participants or []:
        table._add(participant.id, participant.name)

    if isinstance(scan_results, ScanResult):
        groups = scan_results.occurrences.values()
    elif isinstance(scan_results, collections.abc.Mapping):
        groups = scan_results.values()
    else:
        # a flat sequence of occurrences, already in corpus order
        groups = [scan_results or []]

    for occurrences in groups:
        for occurrence in occurrences:
            if occurrence.participant_id in table:
                continue
            try:
                for form in required_forms:
                    validate(form, occurrence.participant_id, occurrence.display_name)
            except InvalidCharacters as e:
                if occurrence.participant_id not in table.skipped:
                    logging.warning(f"Not adding participant {occurrence.participant_id!r}: {e.reason} in {e.form} form")
                    table.skipped[occurrence.participant_id] = str(e)
                continue
            table._add(occurrence.participant_id, occurrence.display_name)
            table.skipped.pop(occurrence.participant_id, None)

    return table
