class ResumeBuilderError(Exception):
    """Base class for errors raised below the HTTP layer."""


class StoreError(ResumeBuilderError):
    """The key-value store failed to read or write a key."""


class DocumentNotFoundError(ResumeBuilderError):
    def __init__(self, document_id: str):
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id


class DocumentAccessError(ResumeBuilderError):
    def __init__(self, document_id: str, owner_id: str):
        super().__init__(f"User {owner_id} does not own document {document_id}")
        self.document_id = document_id
        self.owner_id = owner_id


class AuthProviderError(ResumeBuilderError):
    """Raised by the auth provider for rejected sign-ups (duplicate email, weak password)."""
