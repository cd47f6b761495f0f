from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.sql import func
import uuid

from deviceregistry.database import Base


class User(Base):
    """User model for authentication."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
