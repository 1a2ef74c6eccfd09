"""
Exception types for mentionvault.

Codec errors are raised to the caller. Document store errors are raised by
store implementations and captured per document by the corpus engines.
"""


class MentionVaultError(Exception):
    """Base class for all mentionvault errors."""


class InvalidCharacters(MentionVaultError, ValueError):
    """
    An id or name cannot be encoded in a mention form.

    Raised instead of silently mangling the value when it contains one of the
    delimiters of the chosen form (or is empty).
    """

    def __init__(self, form: str, field: str, value: str, reason: str):
        self.form = form
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r} for {form} mention: {reason}")


class DocumentStoreError(MentionVaultError, IOError):
    """A document store operation failed."""

    def __init__(self, document_id: str, message: str):
        self.document_id = document_id
        super().__init__(f"{document_id}: {message}")


class DocumentNotFound(DocumentStoreError):
    """The document vanished between listing and reading."""


class WriteDenied(DocumentStoreError):
    """The store refused to overwrite the document."""


class ParticipantError(MentionVaultError):
    """A participant edit was rejected (empty, duplicate or unknown)."""
