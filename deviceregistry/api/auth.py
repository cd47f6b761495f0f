"""Authentication routes for registration, login and logout."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from deviceregistry.config import settings
from deviceregistry.database import get_db
from deviceregistry.models.user import User
from deviceregistry.services.auth.base import AuthProvider
from deviceregistry.services.auth.dependencies import get_auth_provider, get_current_user
from deviceregistry.services.exceptions import UserAlreadyExistsError


router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt rejects longer secrets


# =============================================================================
# Request/Response Models
# =============================================================================


class Credentials(BaseModel):
    email: str = ""
    password: str = ""


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    user: UserRead
    message: Optional[str] = None


# =============================================================================
# Registration
# =============================================================================


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: Credentials,
    db: Session = Depends(get_db),
    auth_provider: AuthProvider = Depends(get_auth_provider),
):
    """Create a new user account with email and password."""
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )
    if len(payload.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
        )

    try:
        user = await auth_provider.create_user(db, payload.email, payload.password)
    except UserAlreadyExistsError:
        raise HTTPException(status_code=409, detail="User already exists")

    return AuthResponse(user=UserRead.model_validate(user), message="User created successfully")


# =============================================================================
# Login / Logout
# =============================================================================


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: Credentials,
    response: Response,
    db: Session = Depends(get_db),
    auth_provider: AuthProvider = Depends(get_auth_provider),
):
    """Authenticate and start a session stored in an HttpOnly cookie."""
    user = await auth_provider.authenticate(db, payload.email, payload.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )

    token = await auth_provider.create_session(user)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return AuthResponse(user=UserRead.model_validate(user), message="Login successful")


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    auth_provider: AuthProvider = Depends(get_auth_provider),
):
    """Revoke the current session, if any, and clear the cookie."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        await auth_provider.revoke_session(token)

    response.delete_cookie(settings.session_cookie_name, path="/")
    return {"message": "Logged out"}


@router.get("/me", response_model=UserRead)
async def me(user: User = Depends(get_current_user)):
    return user
