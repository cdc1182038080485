"""FastAPI authentication dependencies for route protection."""

import uuid

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.auth.jwt import decode_token
from zamora.auth.policy import Caller, load_caller
from zamora.config import settings
from zamora.database import get_db
from zamora.errors import AuthenticationError, AuthorizationError
from zamora.models.user import User

# Never auto-errors: the session cookie is the fallback credential
_bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.auth_cookie_name)


async def _user_from_token(token: str, db: AsyncSession) -> User | None:
    try:
        payload = decode_token(token)
    except JWTError:
        return None

    # Only accept access tokens, not refresh tokens
    if payload.get("type") != "access":
        return None

    sub: str | None = payload.get("sub")
    if sub is None:
        return None
    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token (or session cookie) to a user.

    Raises:
        AuthenticationError: If no token is sent, it does not verify, it is
            not an access token, or its user no longer exists.
    """
    token = _extract_token(request, credentials)
    if token is None:
        raise AuthenticationError("Unauthorized: no session")

    user = await _user_from_token(token, db)
    if user is None:
        raise AuthenticationError("Unauthorized: invalid or expired token")
    return user


async def get_current_active_user(
    user: User = Depends(get_current_user),
) -> User:
    """Return the current user only if their account is active."""
    if not user.is_active:
        raise AuthorizationError("Account is inactive")
    return user


async def get_optional_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Optionally authenticate a user.

    Returns ``None`` instead of raising. Used by the guest ordering endpoints,
    which waiters also call while signed in.
    """
    token = _extract_token(request, credentials)
    if token is None:
        return None
    user = await _user_from_token(token, db)
    if user is None or not user.is_active:
        return None
    return user


async def get_caller(
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
) -> Caller:
    """Authenticated user plus property memberships, ready for ``authorize``."""
    return await load_caller(db, user)


async def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    """Gate for ``/api/admin/*``: only ``admin`` and ``super_admin`` pass."""
    if not caller.is_admin:
        raise AuthorizationError("Forbidden: admin access required")
    return caller
