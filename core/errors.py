# core/errors.py
"""
Domain error taxonomy shared by every module.

db_manager functions raise these; views translate them with `http_error`.
"""
from fastapi import HTTPException, status


class AssetServiceError(Exception):
    """Base class for all domain errors."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR


class ValidationError(AssetServiceError):
    """Malformed or missing input, unknown status value, forbidden field combination."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AssetServiceError):
    """Target record is missing or no longer in a state the operation applies to."""
    status_code = status.HTTP_404_NOT_FOUND


class AuthorizationError(AssetServiceError):
    """Principal lacks the role, department or edit-window rights for the operation."""
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(AssetServiceError):
    """A concurrent writer changed the row first, or a uniqueness rule was violated."""
    status_code = status.HTTP_409_CONFLICT


class StoreError(AssetServiceError):
    """Underlying persistence failure. The transaction has been rolled back."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InvalidTransitionError(NotFoundError):
    """A workflow event was applied to a state that does not accept it."""


def http_error(exc: AssetServiceError) -> HTTPException:
    """Build the HTTPException a view should raise for a domain error."""
    detail = str(exc) if not isinstance(exc, StoreError) else "Internal storage error"
    return HTTPException(status_code=exc.status_code, detail=detail)
