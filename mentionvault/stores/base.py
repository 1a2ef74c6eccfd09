"""
Base document store interface for mentionvault.

This module defines the abstract interface every document store must implement.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class BaseDocumentStore(ABC):
    """
    Abstract base class for all document stores.

    A store exposes a flat namespace of text documents addressed by string
    identifiers. Reads may come from a cache or snapshot; writes overwrite the
    whole document.
    """

    @abstractmethod
    def list_documents(self) -> List[str]:
        """
        List every document in the store.

        Returns:
            Document identifiers in a stable order
        """
        pass

    @abstractmethod
    def read_document(self, document_id: str) -> str:
        """
        Read the full text of a document.

        Raises:
            DocumentNotFound: if the document no longer exists
        """
        pass

    @abstractmethod
    def write_document(self, document_id: str, text: str) -> None:
        """
        Overwrite the full text of a document.

        Raises:
            WriteDenied: if the store refuses the write
            DocumentStoreError: on any other store-level failure
        """
        pass

    def modified_time(self, document_id: str) -> Optional[float]:
        """Last modification time (seconds since epoch), if the store tracks it."""
        return None
