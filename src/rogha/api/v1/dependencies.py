"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from rogha.core.security import decode_subject
from rogha.core.settings import settings
from rogha.db.session import get_db
from rogha.models import User
from rogha.services.notifications import SubmissionNotifier, get_notifier

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_notifier_dep() -> SubmissionNotifier:
    """Return the submission notifier; tests override this."""
    return get_notifier()


NotifierDep = Annotated[SubmissionNotifier, Depends(get_notifier_dep)]


def resolve_caller_id(token: str, db: Session) -> User | None:
    """Resolve a bearer token to a stored user, or None."""
    subject = decode_subject(token)
    if subject is None:
        return None
    return db.get(User, subject)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Raises:
        HTTPException: If token is invalid or user not found
    """
    user = resolve_caller_id(credentials.credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_admin(current_user: CurrentUserDep) -> User:
    """Allow only operators listed in ``ADMIN_EMAILS``."""
    if not settings.is_admin_email(current_user.email):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return current_user


AdminUserDep = Annotated[User, Depends(require_admin)]
