"""Shared API dependencies for sessions and database access."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from viet_kconnect.core.errors import UnauthorizedError
from viet_kconnect.core.security import decode_subject
from viet_kconnect.db.session import get_db
from viet_kconnect.models import User

# Bearer tokens are optional: read endpoints serve guests too.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Return the signed-in member, or None for guests and unusable tokens.

    Args:
        credentials: HTTP Bearer token credentials, if any were sent
        db: Database session

    Returns:
        User object for the session, or None
    """
    if credentials is None:
        return None
    user_id = decode_subject(credentials.credentials)
    if user_id is None:
        return None
    return db.get(User, user_id)


OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def get_current_user(user: OptionalUserDep) -> User:
    """Require a signed-in member.

    Raises:
        UnauthorizedError: If the request carries no usable session
    """
    if user is None:
        raise UnauthorizedError()
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
