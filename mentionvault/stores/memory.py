"""
In-memory document store for mentionvault.

Used by tests and by the CLI's mock mode to exercise the engines without a
vault on disk.
"""

import time
from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import DocumentNotFound, WriteDenied
from .base import BaseDocumentStore


class InMemoryDocumentStore(BaseDocumentStore):
    """
    Dict-backed document store that records every write.

    Read and write failures can be injected per document to simulate a vault
    where files vanish or are read-only.
    """

    def __init__(self, documents: Optional[Dict[str, str]] = None,
                 fail_reads: Iterable[str] = (), fail_writes: Iterable[str] = ()):
        self.documents: Dict[str, str] = dict(documents or {})
        self.fail_reads = set(fail_reads)
        self.fail_writes = set(fail_writes)
        self.writes: List[Tuple[str, str]] = []
        self.reads: List[str] = []
        self._mtimes: Dict[str, float] = {document_id: 0.0 for document_id in self.documents}

    def list_documents(self) -> List[str]:
        return list(self.documents)

    def read_document(self, document_id: str) -> str:
        self.reads.append(document_id)
        if document_id in self.fail_reads or document_id not in self.documents:
            raise DocumentNotFound(document_id, "document no longer exists")
        return self.documents[document_id]

    def write_document(self, document_id: str, text: str) -> None:
        if document_id in self.fail_writes:
            raise WriteDenied(document_id, "document is read-only")
        if document_id not in self.documents:
            raise DocumentNotFound(document_id, "document no longer exists")
        self.documents[document_id] = text
        self.writes.append((document_id, text))
        self._mtimes[document_id] = time.time()

    def modified_time(self, document_id: str) -> Optional[float]:
        return self._mtimes.get(document_id)

    def set_modified_time(self, document_id: str, mtime: float) -> None:
        self._mtimes[document_id] = mtime

    @property
    def written_documents(self) -> List[str]:
        return [document_id for document_id, _ in self.writes]

    @classmethod
    def with_sample_documents(cls) -> "InMemoryDocumentStore":
        """
        Create a store holding a small demo vault.

        Covers both mention forms, a stale cached name and a document with no
        mentions at all.
        """
        return cls({
            "journals/2024_05_22.md": (
                "Met with @[[jane.doe|Jane Doe]] about the roadmap.\n"
                "- Follow-up owner: @[John Smith](mention://john.smith)\n"
            ),
            "journals/2024_05_23.md": (
                "Planning trip with @[[john.smith|Johnny]] and @[[sarah|Sarah Johnson]].\n"
            ),
            "pages/team.md": (
                "# Team\n"
                "- @[Jane Doe](mention://jane.doe)\n"
                "- @[Sarah Johnson](mention://sarah)\n"
            ),
            "pages/reading_list.md": "Finished reading The Pragmatic Programmer.\n",
        })
