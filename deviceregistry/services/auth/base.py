"""Abstract base class for authentication providers."""
from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session as DBSession

from deviceregistry.models.user import User
from deviceregistry.services.auth.session_directory import Session


class AuthProvider(ABC):
    """
    Abstract authentication provider interface.

    Route code depends on this interface only. It does not care how
    credentials are checked or where sessions are kept.
    """

    @abstractmethod
    async def authenticate(self, db: DBSession, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns User if credentials are valid, None otherwise.
        """
        pass

    @abstractmethod
    async def create_user(self, db: DBSession, email: str, password: str) -> User:
        """
        Create a new user with the given credentials.

        Raises UserAlreadyExistsError if the email is taken.
        """
        pass

    @abstractmethod
    async def get_user(self, db: DBSession, user_id: UUID) -> Optional[User]:
        """Return the user with ``user_id`` or None."""
        pass

    @abstractmethod
    async def create_session(self, user: User) -> str:
        """
        Create a new session for the user.

        Returns the session token to be stored in cookie.
        """
        pass

    @abstractmethod
    async def get_session(self, token: str) -> Session:
        """
        Resolve a session token.

        Raises SessionNotFoundOrExpiredError if the token is unknown or expired.
        """
        pass

    @abstractmethod
    async def revoke_session(self, token: str) -> None:
        """Revoke a session by its token. Unknown tokens are ignored."""
        pass
