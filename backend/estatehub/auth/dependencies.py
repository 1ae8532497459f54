"""FastAPI authentication dependencies for route protection."""

import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.auth.jwt import ROLE_ADMIN, ROLE_USER, decode_token
from estatehub.database import get_db
from estatehub.models.user import AdminUser, PlatformUser

# Yields None when no token is sent; each dependency decides whether that is an error
_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller: an admin or a platform user."""

    role: str
    account: AdminUser | PlatformUser

    @property
    def id(self) -> uuid.UUID:
        return self.account.id

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def _unauthenticated(message: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": message, "code": "UNAUTHENTICATED"},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _forbidden(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={"message": message, "code": "FORBIDDEN"},
    )


def _read_access_token(token: str) -> tuple[str, uuid.UUID]:
    """Validate an access token and return ``(role, account_id)``."""
    try:
        payload = decode_token(token)
    except JWTError:
        raise _unauthenticated() from None

    # Only accept access tokens, not refresh tokens
    if payload.get("type") != "access":
        raise _unauthenticated("Invalid token type")

    role = payload.get("role")
    sub = payload.get("sub")
    if role not in (ROLE_ADMIN, ROLE_USER) or sub is None:
        raise _unauthenticated()

    try:
        return role, uuid.UUID(sub)
    except ValueError:
        raise _unauthenticated() from None


async def _load_account(db: AsyncSession, role: str, account_id: uuid.UUID) -> AdminUser | PlatformUser | None:
    model = AdminUser if role == ROLE_ADMIN else PlatformUser
    result = await db.execute(select(model).where(model.id == account_id))
    return result.scalar_one_or_none()


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """Authenticate any caller, admin or platform user.

    Raises:
        HTTPException 401: Missing, invalid or expired token, or unknown account.
        HTTPException 403: The account is inactive.
    """
    if credentials is None:
        raise _unauthenticated("Authentication required")

    role, account_id = _read_access_token(credentials.credentials)
    account = await _load_account(db, role, account_id)
    if account is None:
        raise _unauthenticated()
    if not account.is_active:
        raise _forbidden("Account is inactive")
    return Principal(role=role, account=account)


async def get_current_admin(principal: Principal = Depends(get_current_principal)) -> AdminUser:
    """Require an admin token.

    Raises:
        HTTPException 403: The caller is a platform user.
    """
    if not principal.is_admin:
        raise _forbidden("Admin access required")
    return principal.account


async def get_current_user(principal: Principal = Depends(get_current_principal)) -> PlatformUser:
    """Require a platform-user token."""
    if principal.is_admin:
        raise _forbidden("Platform user access required")
    return principal.account


async def get_optional_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Principal | None:
    """Optionally authenticate a caller from a Bearer token.

    Returns ``None`` instead of raising when no usable token is provided.
    Useful for public endpoints that show extra information to signed-in callers.
    """
    if credentials is None:
        return None

    try:
        role, account_id = _read_access_token(credentials.credentials)
    except HTTPException:
        return None

    account = await _load_account(db, role, account_id)
    if account is None or not account.is_active:
        return None
    return Principal(role=role, account=account)


async def get_optional_user(principal: Principal | None = Depends(get_optional_principal)) -> PlatformUser | None:
    """The signed-in platform user, or ``None`` for anonymous callers and admins."""
    if principal is None or principal.is_admin:
        return None
    return principal.account
