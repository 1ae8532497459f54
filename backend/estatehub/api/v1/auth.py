"""Auth API router: admin login, platform-user login, refresh, me."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.api.deps import Principal, get_current_principal, get_db
from estatehub.auth.credentials import authenticate_admin, authenticate_user
from estatehub.auth.jwt import ROLE_ADMIN, ROLE_USER, create_token_pair, decode_token
from estatehub.models.user import AdminUser, PlatformUser
from estatehub.schemas.auth import AccountResponse, AuthResponse, LoginRequest, RefreshRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": "Invalid email or password", "code": "UNAUTHENTICATED"},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _auth_response(account: AdminUser | PlatformUser, role: str) -> AuthResponse:
    if not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": "Account is inactive", "code": "FORBIDDEN"},
        )
    tokens = create_token_pair(str(account.id), role)
    return AuthResponse(account=AccountResponse.model_validate(account), tokens=TokenResponse(**tokens))


# ---------------------------------------------------------------------------
# POST /admin/login
# ---------------------------------------------------------------------------


@router.post("/admin/login", response_model=AuthResponse)
async def admin_login(body: LoginRequest, db: AsyncSession = Depends(get_db)) -> AuthResponse:
    """Authenticate a back-office admin with email and password."""
    admin = await authenticate_admin(db, body.email, body.password)
    if admin is None:
        logger.info("Failed admin login for %s", body.email)
        raise _invalid_credentials()
    return _auth_response(admin, ROLE_ADMIN)


# ---------------------------------------------------------------------------
# POST /login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)) -> AuthResponse:
    """Authenticate a platform user (owner, agent or buyer) with email and password."""
    user = await authenticate_user(db, body.email, body.password)
    if user is None:
        raise _invalid_credentials()
    return _auth_response(user, ROLE_USER)


# ---------------------------------------------------------------------------
# POST /refresh
# ---------------------------------------------------------------------------


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)) -> TokenResponse:
    """Exchange a valid refresh token for a new token pair."""
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": "Invalid or expired refresh token", "code": "UNAUTHENTICATED"},
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(body.refresh_token)
    except JWTError:
        raise invalid from None

    role = payload.get("role")
    if payload.get("type") != "refresh" or role not in (ROLE_ADMIN, ROLE_USER):
        raise invalid

    try:
        account_id = uuid.UUID(payload.get("sub") or "")
    except ValueError:
        raise invalid from None

    model = AdminUser if role == ROLE_ADMIN else PlatformUser
    account = await db.get(model, account_id)
    if account is None or not account.is_active:
        raise invalid

    return TokenResponse(**create_token_pair(str(account.id), role))


# ---------------------------------------------------------------------------
# GET /me
# ---------------------------------------------------------------------------


@router.get("/me", response_model=AccountResponse)
async def me(principal: Principal = Depends(get_current_principal)) -> AccountResponse:
    """Return the authenticated admin's or user's profile."""
    return AccountResponse.model_validate(principal.account)
