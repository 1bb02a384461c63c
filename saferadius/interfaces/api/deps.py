"""FastAPI dependency — JWT auth and role-gated access."""

from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from saferadius.application.services.auth_service import decode_access_token
from saferadius.core.exceptions import ForbiddenException
from saferadius.domain.models.user import User
from saferadius.domain.policy import Operation, is_allowed
from saferadius.domain.repositories.user_repository import UserRepository
from saferadius.interfaces.deps import get_user_repository

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    repo: UserRepository = Depends(get_user_repository),
) -> User:
    """Extract and validate the current user from JWT token."""
    if credentials is None:
        raise _unauthorized("Authorization token required")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token") from None

    user = repo.get_by_id(user_id)
    if user is None or not user.is_active:
        raise _unauthorized("User not found or inactive")

    return user


def require_permission(operation: Operation) -> Callable[..., User]:
    """Dependency factory: the caller's role must be allowed ``operation``."""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if not is_allowed(user.role, operation):
            raise ForbiddenException(
                "Insufficient permissions",
                details={"operation": operation.value, "role": user.role},
            )
        return user

    return dependency
