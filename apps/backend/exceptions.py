"""
Application errors for the ReWa List backend.

Each error class fixes the HTTP status it maps to. ``main.py`` renders any
``ReWaListError`` as ``{"error": <class name>, "message": ..., "detail": ...}``
with that status, so services raise these instead of ``HTTPException``.

    ReWaListError                   500
    ├── ValidationError             400
    ├── AuthenticationError         401
    ├── ResourceNotFoundError       404
    ├── DatabaseError               500
    │   └── ConstraintViolationError 409
    └── ExternalServiceError        502
        └── SearchProviderError     502
"""

from typing import Any, Dict, Optional


class ReWaListError(Exception):
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": type(self).__name__, "message": self.message}
        if self.detail:
            body["detail"] = self.detail
        return body


class ValidationError(ReWaListError):
    """Input that passed request parsing but is still unusable, e.g. a blank title."""

    status_code = 400


class AuthenticationError(ReWaListError):
    status_code = 401


class ResourceNotFoundError(ReWaListError):
    """A referenced row (e.g. an author id) does not exist."""

    status_code = 404


class DatabaseError(ReWaListError):
    status_code = 500


class ConstraintViolationError(DatabaseError):
    """
    A write that would break a relational constraint, such as putting an item
    on a list when no catalog row with that id and type exists.
    """

    status_code = 409


class ExternalServiceError(ReWaListError):
    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        service_name: Optional[str] = None,
    ):
        if service_name:
            detail = {**(detail or {}), "service": service_name}
        super().__init__(message, detail=detail)


class SearchProviderError(ExternalServiceError):
    """A catalog provider (Google Books, IMDb) failed or answered with an error."""

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        provider: Optional[str] = None,
    ):
        if provider:
            detail = {**(detail or {}), "provider": provider}
        super().__init__(message, detail=detail, service_name="catalog_search")
        self.provider = provider
