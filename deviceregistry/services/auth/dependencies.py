"""FastAPI dependencies for authentication."""
from datetime import timedelta

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from deviceregistry.config import settings
from deviceregistry.database import get_db
from deviceregistry.models.user import User
from deviceregistry.services.auth.base import AuthProvider
from deviceregistry.services.auth.local_provider import LocalAuthProvider
from deviceregistry.services.auth.session_directory import SessionDirectory
from deviceregistry.services.exceptions import SessionNotFoundOrExpiredError


def get_session_directory(request: Request) -> SessionDirectory:
    """The SessionDirectory installed on the application at startup."""
    return request.app.state.session_directory


def get_auth_provider(
    sessions: SessionDirectory = Depends(get_session_directory),
) -> AuthProvider:
    """
    Build the configured auth provider.

    Only local password auth exists today; this is the single place to
    switch providers.
    """
    return LocalAuthProvider(sessions, timedelta(seconds=settings.session_max_age))


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    auth_provider: AuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get the currently authenticated user.

    Raises 401 if there is no session cookie, if the session is unknown or
    expired, or if the session's user no longer exists.
    """
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    try:
        session = await auth_provider.get_session(token)
    except SessionNotFoundOrExpiredError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    user = await auth_provider.get_user(db, session.subject_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user
