"""
Mention query engine for mentionvault.

Answers "which documents mention any of these participants".
"""

import logging
import threading
from typing import Iterable, List, Optional, Set

from ..codec import has_mention_of
from ..errors import DocumentStoreError
from ..stores import BaseDocumentStore


def find_documents(store: BaseDocumentStore, participant_ids: Iterable[str],
                   cancel_event: Optional[threading.Event] = None) -> Set[str]:
    """
    Find the documents that mention any of the given participants.

    Ids are compared case-insensitively and both mention forms count. Ids are
    taken literally: resolving aliases such as "me" is up to the caller.
    Unreadable documents are logged and skipped.

    Args:
        store: Document store to search
        participant_ids: Concrete participant ids
        cancel_event: If set between documents, the search stops early

    Returns:
        Set of matching document ids
    """
    wanted = [participant_id for participant_id in participant_ids if participant_id]
    matches: Set[str] = set()
    if not wanted:
        return matches

    for document_id in store.list_documents():
        if cancel_event is not None and cancel_event.is_set():
            logging.info("Mention query cancelled")
            break

        try:
            text = store.read_document(document_id)
        except DocumentStoreError as e:
            logging.warning(f"Skipping unreadable document {document_id}: {e}")
            continue

        if has_mention_of(text, wanted):
            matches.add(document_id)

    logging.info(f"Found {len(matches)} document(s) mentioning {', '.join(wanted)}")
    return matches


def sort_by_recency(store: BaseDocumentStore, document_ids: Iterable[str]) -> List[str]:
    """
    Order documents most recently modified first.

    Documents without a modification time keep the store's listing order
    after those that have one.
    """
    wanted = set(document_ids)
    listed = [document_id for document_id in store.list_documents() if document_id in wanted]
    # Ids the store no longer lists go last, in a stable order
    listed.extend(sorted(wanted.difference(listed)))

    def sort_key(item):
        position, document_id = item
        mtime = store.modified_time(document_id)
        if mtime is None:
            return (1, 0.0, position)
        return (0, -mtime, position)

    return [document_id for _, document_id in sorted(enumerate(listed), key=sort_key)]
