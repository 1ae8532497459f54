"""Password hashing and email/password authentication for both account kinds.

Uses bcrypt directly rather than passlib.
"""

import bcrypt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.models.user import AdminUser, PlatformUser


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Check a password; accounts without a stored hash never match."""
    if not hashed_password:
        return False
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


async def authenticate_admin(db: AsyncSession, email: str, password: str) -> AdminUser | None:
    result = await db.execute(select(AdminUser).where(AdminUser.email == email.lower()))
    admin = result.scalar_one_or_none()
    if admin is None or not verify_password(password, admin.hashed_password):
        return None
    return admin


async def authenticate_user(db: AsyncSession, email: str, password: str) -> PlatformUser | None:
    result = await db.execute(select(PlatformUser).where(PlatformUser.email == email.lower()))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user
