# core/deps.py
"""
FastAPI dependencies that turn a bearer token into an authenticated principal.

Authorization (role, department, edit window) is not decided here; see core.policy.
"""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from db_models.user import User, UserRole
from core.catalog import StatusCatalog, get_status_catalog
from core.policy import Principal
from core.security import decode_token

# Tokens are minted by the external sign-in service.
bearer_scheme = HTTPBearer(auto_error=False)


class AuthenticationError(HTTPException):
    """Raised when authentication fails."""
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: AsyncSession = Depends(get_session),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Raises:
        AuthenticationError: If token is missing, invalid, or user not found/disabled
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")

    user_id = payload.get("sub")
    if user_id is None:
        raise AuthenticationError("Invalid token payload")

    try:
        user_id = int(user_id)
    except (ValueError, TypeError):
        raise AuthenticationError("Invalid user ID in token")

    stmt = select(User).where(User.id == user_id)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User account is disabled")

    return user


async def get_current_principal(
    user: Annotated[User, Depends(get_current_user)],
) -> Principal:
    """Role and department are taken from the user row, never from the token."""
    try:
        role = UserRole(user.role)
    except ValueError:
        raise AuthenticationError(f"Unknown role '{user.role}'")
    return Principal(id=user.id, role=role, department_id=user.department_id)


# Type aliases for cleaner endpoint signatures
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
Catalog = Annotated[StatusCatalog, Depends(get_status_catalog)]
