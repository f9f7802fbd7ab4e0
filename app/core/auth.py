"""Supabase bearer-token authentication and record ownership."""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from app.core.config import settings


# HTTP Bearer token extractor
security = HTTPBearer(auto_error=False)


class AuthUser:
    """Represents an authenticated user from Supabase."""
    def __init__(self, user_id: str, email: Optional[str] = None):
        self.id = user_id
        self.email = email


def owner_id(user: Optional[AuthUser]) -> Optional[str]:
    """
    Owner key for dogs, foods, plans and preferences.

    Anonymous callers share the unowned (NULL) records.
    """
    return user.id if user is not None else None


def verify_supabase_token(token: str) -> dict:
    """
    Verify a Supabase JWT signed with the project's JWT secret.

    Raises:
        HTTPException: 500 if no secret is configured, 401 if the token is invalid
    """
    if not settings.SUPABASE_JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Supabase JWT secret not configured"
        )

    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience="authenticated"
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )


def optional_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[AuthUser]:
    """
    The authenticated user, or None when no bearer token is sent.

    A token that is sent but invalid is still rejected with 401.
    """
    if credentials is None:
        return None

    payload = verify_supabase_token(credentials.credentials)
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: no user ID",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthUser(user_id=user_id, email=payload.get("email"))
