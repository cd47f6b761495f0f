"""
Authentication service package.

Usage:
    from deviceregistry.services.auth.dependencies import get_current_user

    # In routes:
    @router.get("/protected")
    async def protected_route(user: User = Depends(get_current_user)):
        ...
"""
from deviceregistry.services.auth.base import AuthProvider
from deviceregistry.services.auth.local_provider import (
    LocalAuthProvider,
    hash_password,
    verify_password,
)
from deviceregistry.services.auth.session_directory import Session, SessionDirectory


__all__ = [
    "AuthProvider",
    "LocalAuthProvider",
    "Session",
    "SessionDirectory",
    "hash_password",
    "verify_password",
]
