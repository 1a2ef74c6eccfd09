"""
Corpus scanner for mentionvault.

Reads every document in a store and decodes its mentions.
"""

import logging
import threading
from typing import Optional

from ..codec import decode_all
from ..errors import DocumentStoreError
from ..models import ScanResult
from ..stores import BaseDocumentStore


def scan(store: BaseDocumentStore, cancel_event: Optional[threading.Event] = None) -> ScanResult:
    """
    Collect every mention occurrence in the store.

    Documents appear in the store's listing order and occurrences in text
    order, so scanning an unchanged store twice gives identical results.
    Unreadable documents are recorded in ``errors`` and skipped.

    Args:
        store: Document store to scan
        cancel_event: If set between documents, the scan stops early

    Returns:
        ScanResult with occurrences per document
    """
    result = ScanResult()
    document_ids = store.list_documents()
    logging.info(f"Scanning {len(document_ids)} documents for mentions")

    for document_id in document_ids:
        if cancel_event is not None and cancel_event.is_set():
            logging.info("Scan cancelled")
            result.cancelled = True
            break

        try:
            text = store.read_document(document_id)
        except DocumentStoreError as e:
            logging.warning(f"Skipping unreadable document {document_id}: {e}")
            result.errors[document_id] = str(e)
            continue

        result.occurrences[document_id] = list(decode_all(text, document_id))

    logging.info(
        f"Scan found {result.total_count} mentions in {len(result.occurrences)} documents"
        f" ({len(result.errors)} skipped)"
    )
    return result
