"""
Domain exceptions.

Raised by services and the orchestrator adapter; translated to HTTP
responses by the API error-handling decorator.

System role: Error taxonomy shared by all layers
"""


class AskDocError(Exception):
    """Base class for AskDoc errors."""

    def __init__(self, message: str, resource_id: str | None = None) -> None:
        self.message = message
        self.resource_id = resource_id
        super().__init__(message)


class NotFoundError(AskDocError):
    """Raised when a collection, site, session or document does not exist."""


class InvalidRequestError(AskDocError):
    """Raised when caller input is malformed or incomplete."""


class UnsupportedFileTypeError(InvalidRequestError):
    """Raised when an upload's extension is outside the supported set."""


class UnauthorizedError(AskDocError):
    """Raised when the admin API key is missing or wrong."""


class UpstreamError(AskDocError):
    """Raised when the orchestrator (vector store, loaders, LLM) fails."""
