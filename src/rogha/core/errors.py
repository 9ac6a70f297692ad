"""Domain errors surfaced to API callers with stable reason codes.

Expected outcomes such as optimistic-concurrency conflicts or publish no-ops
are *not* errors; they are returned as typed results by the services.
The classes below cover requests that are rejected before any write.
"""

from __future__ import annotations

from fastapi import status


class RoghaError(Exception):
    """Base class for rejected requests.

    Attributes:
        code: Machine-readable reason code, e.g. ``friends.SELF_NOT_ALLOWED``.
        message: Human-readable explanation.
        status_code: HTTP status the API layer responds with.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, code: str, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(RoghaError):
    """The request is malformed or violates a domain invariant."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class ForbiddenActionError(RoghaError):
    """The caller is known but may not perform this action."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(RoghaError):
    """The target does not exist or is not visible to the caller."""

    status_code = status.HTTP_404_NOT_FOUND
