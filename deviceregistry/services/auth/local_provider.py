"""Local password-based authentication provider."""
import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DBSession

from deviceregistry.models.user import User
from deviceregistry.services.auth.base import AuthProvider
from deviceregistry.services.auth.session_directory import Session, SessionDirectory
from deviceregistry.services.exceptions import UserAlreadyExistsError

logger = logging.getLogger(__name__)

MAX_SECRET_BYTES = 72  # bcrypt input limit


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


class LocalAuthProvider(AuthProvider):
    """
    Local authentication provider using bcrypt password hashes.

    Users live in the database. Sessions live in the SessionDirectory
    handed to the provider. They are lost on restart.
    """

    def __init__(self, sessions: SessionDirectory, session_duration: timedelta):
        self.sessions = sessions
        self.session_duration = session_duration

    async def authenticate(self, db: DBSession, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password."""
        user = db.query(User).filter(User.email == email.lower()).first()
        if not user or not user.password_hash:
            return None
        if len(password.encode("utf-8")) > MAX_SECRET_BYTES:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    async def create_user(self, db: DBSession, email: str, password: str) -> User:
        """Create a new user with hashed password."""
        email = email.lower()
        if db.query(User).filter(User.email == email).first():
            raise UserAlreadyExistsError(email)

        user = User(email=email, password_hash=hash_password(password))
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            db.rollback()
            raise UserAlreadyExistsError(email) from None
        db.refresh(user)
        logger.info("User registered: %s", email)
        return user

    async def get_user(self, db: DBSession, user_id: UUID) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    async def create_session(self, user: User) -> str:
        return self.sessions.create(user.id, user.email, self.session_duration)

    async def get_session(self, token: str) -> Session:
        return self.sessions.require(token)

    async def revoke_session(self, token: str) -> None:
        self.sessions.delete(token)
