"""Custom exception hierarchy."""

from __future__ import annotations


class MirrorError(Exception):
    """Base exception for all library errors."""

    pass


class ProtocolError(MirrorError):
    """Mirror node answered 200 but the body breaks the paging contract.

    Raised for a body that is not a JSON object, a missing or non-list items
    field, a non-string ``links.next`` cursor, a repeated cursor or a
    traversal that runs past its page cap. Never retried.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class TraversalAbortedError(MirrorError):
    """A page could not be fetched within the retry budget."""

    def __init__(
        self,
        message: str,
        *,
        url: str,
        attempts: int,
        pages_completed: int = 0,
        last_error: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.attempts = attempts
        self.pages_completed = pages_completed
        self.last_error = last_error


class TraversalCancelledError(MirrorError):
    """Traversal stopped because its cancellation token fired."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class EntityNotFoundError(MirrorError):
    """Mirror node returned an empty result for a single-entity lookup."""

    def __init__(self, message: str, entity_id: str) -> None:
        super().__init__(message)
        self.entity_id = entity_id


class ValidationError(MirrorError):
    """User supplied input (entity id, serial range) is malformed."""

    pass
