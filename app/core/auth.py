# app/core/auth.py
import logging
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from app.core.config import get_settings
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

# Missing header means guest, so the scheme must not raise on its own.
bearer_scheme = HTTPBearer(auto_error=False)

user_repo = UserRepository()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a Supabase-issued JWT and return its claims.

    Signature and `exp` are checked against SUPABASE_JWT_SECRET.
    The `aud` claim is ignored since Supabase sets it per project.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError as exc:
        logger.info("Rejected access token: %s", exc)
        raise _unauthorized("Invalid or expired token")


def _identity_from_claims(claims: dict[str, Any]) -> tuple[uuid.UUID, str]:
    """Pull (user id, email) out of verified claims."""
    sub = claims.get("sub")
    email = claims.get("email")
    if not sub or not email:
        raise _unauthorized("Token missing sub/email")
    try:
        return uuid.UUID(sub), email
    except ValueError:
        raise _unauthorized("Invalid sub in token")


def _provision_profile(session: Session, user_id: uuid.UUID, email: str) -> User:
    """
    First request from a fresh Supabase account: create its shop profile.

    New profiles are always customers; admins are promoted afterwards.
    """
    local_part = email.split("@", 1)[0]
    profile = User(id=user_id, email=email, first_name=local_part or email)
    logger.info("Provisioning profile for %s", email)
    return user_repo.save(session, profile)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    The signed-in shopper, or None for a guest.

    A valid token without a stored profile gets one on the fly.
    Deactivated accounts are refused with 403 even with a valid token.
    """
    if credentials is None:
        return None

    claims = decode_access_token(credentials.credentials)
    user_id, email = _identity_from_claims(claims)

    user = user_repo.get_by_id(session, user_id)
    if user is None:
        user = _provision_profile(session, user_id, email)

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )
    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """Reject guests with 401."""
    if user is None:
        raise _unauthorized("Authentication required")
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """Back-office routes: role must be "admin"."""
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


def require_user(user: User = Depends(require_auth)) -> User:
    # cart and checkout belong to customers; staff accounts get 403
    if user.role != "user":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Customer access required",
        )
    return user
