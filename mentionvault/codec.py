"""
Mention codec for mentionvault.

Encodes a participant reference into one of the two mention forms and decodes
mention markup back out of document text:

    wikilink:  @[[<id>|<name>]]
    explicit:  @[<name>](mention://<id>)

Scanning, querying and rewriting all go through decode_all so that every
corpus operation agrees on what counts as a mention.
"""

import re
from typing import Iterable, Iterator, Optional, Tuple

from .errors import InvalidCharacters
from .models import MentionForm, MentionOccurrence


# Characters that would terminate a field early, per form and field.
FORBIDDEN_CHARACTERS = {
    MentionForm.WIKILINK: {"id": "]|", "name": "]"},
    MentionForm.EXPLICIT: {"id": ")", "name": "]"},
}

# Each field stops at its first terminating delimiter.
WIKILINK_PATTERN = re.compile(r"@\[\[(?P<id>[^\]|]+)\|(?P<name>[^\]]+)\]\]")
EXPLICIT_PATTERN = re.compile(r"@\[(?P<name>[^\]]+)\]\(mention://(?P<id>[^)]+)\)")

_GRAMMARS = (
    (MentionForm.WIKILINK, WIKILINK_PATTERN),
    (MentionForm.EXPLICIT, EXPLICIT_PATTERN),
)

# Both forms open with this prefix.
_MENTION_PREFIX = "@["


def validate(form: MentionForm, participant_id: str, name: str) -> None:
    """
    Check that an id and name can be encoded in the given form.

    Raises:
        InvalidCharacters: if either value is empty or contains a delimiter
            of the form.
    """
    form = MentionForm(form)
    for field, value in (("id", participant_id), ("name", name)):
        if not value:
            raise InvalidCharacters(form.value, field, value, "must not be empty")
        forbidden = FORBIDDEN_CHARACTERS[form][field]
        found = sorted({c for c in value if c in forbidden})
        if found:
            raise InvalidCharacters(
                form.value, field, value,
                f"contains forbidden character(s) {' '.join(found)}"
            )


def encode(form: MentionForm, participant_id: str, name: str) -> str:
    """
    Encode a participant reference as mention markup.

    Args:
        form: The surface form to produce
        participant_id: Participant id to reference
        name: Display name to carry in the markup

    Returns:
        The mention text

    Raises:
        InvalidCharacters: if the id or name cannot be represented in the form
    """
    form = MentionForm(form)
    validate(form, participant_id, name)
    if form == MentionForm.WIKILINK:
        return f"@[[{participant_id}|{name}]]"
    return f"@[{name}](mention://{participant_id})"


def _iter_matches(text: str) -> Iterator[Tuple[MentionForm, "re.Match[str]"]]:
    """Yield (form, match) pairs left to right, longest match at each start."""
    position = 0
    while True:
        start = text.find(_MENTION_PREFIX, position)
        if start < 0:
            return

        best: Optional[Tuple[MentionForm, "re.Match[str]"]] = None
        for form, pattern in _GRAMMARS:
            match = pattern.match(text, start)
            if match and (best is None or match.end() > best[1].end()):
                best = (form, match)

        if best is None:
            position = start + 1
            continue

        yield best
        position = best[1].end()


class DecodedMentions:
    """
    Lazy, restartable sequence of the mentions in a text.

    Every iteration re-scans the text, so the sequence can be consumed any
    number of times and stopped early without cost for the remainder.
    """

    def __init__(self, text: str, document_id: str = ""):
        self.text = text
        self.document_id = document_id

    def __iter__(self) -> Iterator[MentionOccurrence]:
        for form, match in _iter_matches(self.text):
            yield MentionOccurrence(
                document_id=self.document_id,
                participant_id=match.group("id"),
                display_name=match.group("name"),
                encoding=form,
                start_offset=match.start(),
                end_offset=match.end(),
            )

    def __len__(self) -> int:
        return sum(1 for _ in _iter_matches(self.text))

    def __repr__(self) -> str:
        return f"DecodedMentions(document_id={self.document_id!r}, length={len(self.text)})"


def decode_all(text: str, document_id: str = "") -> DecodedMentions:
    """
    Decode every mention in a text, in the order they appear.

    Args:
        text: Document text
        document_id: Identifier stamped on each occurrence

    Returns:
        A lazy sequence of MentionOccurrence objects
    """
    return DecodedMentions(text, document_id)


def has_mention_of(text: str, participant_ids: Iterable[str]) -> bool:
    """Return True if the text mentions any of the ids, ignoring case."""
    wanted = {participant_id.lower() for participant_id in participant_ids}
    if not wanted:
        return False
    return any(
        occurrence.participant_id.lower() in wanted
        for occurrence in decode_all(text)
    )
