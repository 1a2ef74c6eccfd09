"""
Rewrite engine for mentionvault.

Propagates a participant id/name change to every mention of the old id across
a vault, keeping each mention in the form it was written in.
"""

import logging
import threading
from typing import Optional, Tuple

from ..codec import decode_all, encode, validate
from ..errors import DocumentStoreError
from ..models import (
    DocumentRewrite,
    MentionForm,
    RewriteOutcome,
    RewriteReport,
    RewriteTransition,
)
from ..stores import BaseDocumentStore


def rewrite_text(text: str, transition: RewriteTransition) -> Tuple[str, int]:
    """
    Apply a transition to a single text.

    Only mentions whose id field equals ``old_id`` exactly are replaced; an id
    that merely starts with ``old_id`` is left alone.

    Returns:
        Tuple of (new text, number of mentions of old_id found)
    """
    pieces = []
    last_end = 0
    count = 0

    for occurrence in decode_all(text):
        if occurrence.participant_id != transition.old_id:
            continue
        pieces.append(text[last_end:occurrence.start_offset])
        pieces.append(encode(occurrence.encoding, transition.new_id, transition.new_name))
        last_end = occurrence.end_offset
        count += 1

    if not count:
        return text, 0

    pieces.append(text[last_end:])
    return "".join(pieces), count


def _rewrite_document(store: BaseDocumentStore, document_id: str,
                      transition: RewriteTransition) -> DocumentRewrite:
    """Read, rewrite and (if changed) write back one document."""
    try:
        text = store.read_document(document_id)
    except DocumentStoreError as e:
        logging.warning(f"Skipping unreadable document {document_id}: {e}")
        return DocumentRewrite(document_id=document_id, outcome=RewriteOutcome.READ_FAILED, error=str(e))

    new_text, count = rewrite_text(text, transition)

    if count == 0:
        return DocumentRewrite(document_id=document_id, outcome=RewriteOutcome.NO_OCCURRENCES)

    if new_text == text:
        return DocumentRewrite(document_id=document_id, outcome=RewriteOutcome.UNCHANGED, occurrences=count)

    try:
        store.write_document(document_id, new_text)
    except DocumentStoreError as e:
        logging.error(f"Failed to write {document_id}: {e}")
        return DocumentRewrite(
            document_id=document_id,
            outcome=RewriteOutcome.WRITE_FAILED,
            occurrences=count,
            error=str(e),
        )

    logging.info(f"Updated {count} mention(s) in {document_id}")
    return DocumentRewrite(document_id=document_id, outcome=RewriteOutcome.REWRITTEN, occurrences=count)


def rewrite(store: BaseDocumentStore, transition: RewriteTransition,
            cancel_event: Optional[threading.Event] = None) -> RewriteReport:
    """
    Rewrite every mention of ``transition.old_id`` in the store.

    Wikilink mentions stay wikilinks and explicit mentions stay explicit; only
    the id and name inside each mention change. A document is written only
    when its text actually changed. Read and write failures are recorded per
    document and never stop the pass.

    Args:
        store: Document store to rewrite
        transition: The id/name change to apply
        cancel_event: If set between documents, the pass stops early

    Returns:
        RewriteReport with one entry per visited document

    Raises:
        InvalidCharacters: if the new id or name cannot be encoded in both
            forms; no document is touched in that case
    """
    for form in MentionForm:
        validate(form, transition.new_id, transition.new_name)

    report = RewriteReport(transition=transition)
    logging.info(
        f"Rewriting mentions of {transition.old_id!r} to "
        f"{transition.new_id!r} ({transition.new_name!r})"
    )

    for document_id in store.list_documents():
        if cancel_event is not None and cancel_event.is_set():
            logging.info("Rewrite cancelled; already written documents are kept")
            report.cancelled = True
            break
        report.documents.append(_rewrite_document(store, document_id, transition))

    logging.info(
        f"Rewrite complete: {report.total_count} mention(s) found, "
        f"{len(report.rewritten_documents)} document(s) updated, "
        f"{len(report.failed_documents)} failed"
    )
    return report
