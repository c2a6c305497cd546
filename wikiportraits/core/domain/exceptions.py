# wikiportraits/core/domain/exceptions.py
from typing import Dict, Optional


class DomainError(Exception):
    """Base class for all domain-level exceptions."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Authentication ---


class NotAuthenticatedError(DomainError):
    """Raised when a write operation is attempted without a Wikimedia session."""
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)

# --- Remote API Errors ---


class MediaWikiAPIError(DomainError):
    """Raised when a MediaWiki endpoint answers with an `{error: {code, info}}` body."""
    def __init__(self, code: str, info: str, status_code: Optional[int] = None):
        self.code = code
        self.info = info
        self.status_code = status_code
        super().__init__(info or code)


class UploadWarningError(DomainError):
    """Raised when Commons accepts the upload request but stops on warnings (duplicate, exists...)."""
    def __init__(self, warnings: Dict[str, object]):
        self.warnings = warnings
        super().__init__(f"Upload warning: {', '.join(warnings.keys())}")


class UnexpectedResponseError(DomainError):
    """Raised when a remote response lacks the fields the operation needs."""
    def __init__(self, detail: str):
        super().__init__(detail)

# --- Lookup / Validation Errors ---


class EntityNotFoundError(DomainError):
    """Raised when a Wikidata entity or Commons page does not exist."""
    def __init__(self, identifier: str, kind: str = "Entity"):
        self.identifier = identifier
        super().__init__(f"{kind} not found")


class InvalidRequestError(DomainError):
    """Raised when a request is missing required fields or carries unusable values."""
    def __init__(self, reason: str):
        super().__init__(reason)


class UnknownWorkflowError(DomainError):
    """Raised when a workflow transition names a step the state machine does not know."""
    def __init__(self, step: str):
        super().__init__(f"Unknown workflow step '{step}'.")


class TemplateExistsError(DomainError):
    """Raised when a createonly edit hits a page that is already there."""
    def __init__(self, title: str):
        self.title = title
        super().__init__(f"{title} already exists")
