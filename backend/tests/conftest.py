"""Shared test configuration and fixtures.

Every test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
with the full schema created from the models. Fixtures that seed data use
their own short-lived sessions so the code under test always reads rows
through its own session.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "estatehub-test-secret")

import uuid  # noqa: E402
from collections.abc import AsyncGenerator  # noqa: E402
from datetime import datetime  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from estatehub.api.deps import get_notification_dispatcher  # noqa: E402
from estatehub.auth.credentials import hash_password  # noqa: E402
from estatehub.auth.jwt import ROLE_ADMIN, ROLE_USER, create_token_pair  # noqa: E402
from estatehub.config import settings  # noqa: E402
from estatehub.database import Base, get_db  # noqa: E402
from estatehub.main import app  # noqa: E402
from estatehub.models.property import Property, PropertyImage, PropertySeo, PropertyVerification  # noqa: E402
from estatehub.models.user import AdminUser, PlatformUser  # noqa: E402
from estatehub.services.email_client import EmailMessage, EmailSender, EmailSendResult  # noqa: E402
from estatehub.services.notifications import NotificationDispatcher  # noqa: E402
from estatehub.services.seo import slugify  # noqa: E402
from estatehub.services.sms_client import SmsSender  # noqa: E402

ADMIN_PASSWORD = "adminpass123"
OWNER_PASSWORD = "ownerpass123"


# ---------------------------------------------------------------------------
# Recording senders: stand in for Azure / Twilio
# ---------------------------------------------------------------------------


class RecordingEmailSender(EmailSender):
    """Keeps every accepted message. Set ``succeed`` or ``error`` to simulate failures."""

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []
        self.succeed = True
        self.error: Exception | None = None

    async def send_email(self, message: EmailMessage) -> EmailSendResult:
        if self.error is not None:
            raise self.error
        self.sent.append(message)
        if not self.succeed:
            return EmailSendResult(success=False, error="HTTP 400")
        return EmailSendResult(success=True, message_id=f"msg-{len(self.sent)}")


class RecordingSmsSender(SmsSender):
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.succeed = True
        self.error: Exception | None = None

    async def send_sms(self, to: str, body: str) -> bool:
        if self.error is not None:
            raise self.error
        if not to:
            return False
        self.sent.append((to, body))
        return self.succeed


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def sms_sender() -> RecordingSmsSender:
    return RecordingSmsSender()


@pytest.fixture
def dispatcher(email_sender: RecordingEmailSender, sms_sender: RecordingSmsSender) -> NotificationDispatcher:
    return NotificationDispatcher(email_sender, sms_sender, settings)


# ---------------------------------------------------------------------------
# Per-test database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    """A private in-memory database with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory, dispatcher: NotificationDispatcher) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the test database and recording senders."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


async def _persist(session_factory, instance):
    async with session_factory() as session:
        session.add(instance)
        await session.commit()
    return instance


@pytest_asyncio.fixture
async def test_admin(session_factory) -> AdminUser:
    unique = uuid.uuid4().hex[:8]
    admin = AdminUser(
        email=f"admin-{unique}@estatehub.in",
        hashed_password=hash_password(ADMIN_PASSWORD),
        first_name="Meera",
        last_name="Rao",
        is_active=True,
    )
    return await _persist(session_factory, admin)


@pytest_asyncio.fixture
async def test_owner(session_factory) -> PlatformUser:
    """A platform user who lists properties; has a phone so SMS goes out."""
    unique = uuid.uuid4().hex[:8]
    owner = PlatformUser(
        email=f"owner-{unique}@estatehub.in",
        hashed_password=hash_password(OWNER_PASSWORD),
        first_name="Ravi",
        last_name="Kumar",
        phone="+919800000001",
        role="OWNER",
        is_active=True,
    )
    return await _persist(session_factory, owner)


@pytest_asyncio.fixture
async def test_buyer(session_factory) -> PlatformUser:
    unique = uuid.uuid4().hex[:8]
    buyer = PlatformUser(
        email=f"buyer-{unique}@estatehub.in",
        hashed_password=hash_password("buyerpass123"),
        first_name="Anita",
        role="USER",
        is_active=True,
    )
    return await _persist(session_factory, buyer)


@pytest.fixture
def admin_headers(test_admin: AdminUser) -> dict[str, str]:
    tokens = create_token_pair(str(test_admin.id), ROLE_ADMIN)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def owner_headers(test_owner: PlatformUser) -> dict[str, str]:
    tokens = create_token_pair(str(test_owner.id), ROLE_USER)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def buyer_headers(test_buyer: PlatformUser) -> dict[str, str]:
    tokens = create_token_pair(str(test_buyer.id), ROLE_USER)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


@pytest.fixture
def make_property(session_factory):
    """Factory that inserts a listing (plus SEO and verification rows) directly."""

    async def _make(
        *,
        title: str = "Green Acres Farm",
        creator: AdminUser | PlatformUser | None = None,
        approval_status: str = "PENDING",
        city: str | None = "Gurugram",
        district: str | None = "Gurugram",
        state: str | None = "Haryana",
        price: Decimal = Decimal("2500000"),
        latitude: float | None = None,
        longitude: float | None = None,
        owner_name: str | None = None,
        admin_notes: str | None = None,
        created_at: datetime | None = None,
        slug: str | None = None,
        with_seo: bool = True,
        with_verification: bool = True,
        image_urls: tuple[str, ...] = (),
    ) -> Property:
        fields = {}
        if created_at is not None:
            fields["created_at"] = created_at
        prop = Property(
            title=title,
            property_type="AGRICULTURAL",
            price=price,
            area=Decimal("2.5"),
            area_unit="ACRE",
            city=city,
            district=district,
            state=state,
            latitude=latitude,
            longitude=longitude,
            owner_name=owner_name,
            admin_notes=admin_notes,
            approval_status=approval_status,
            created_by_type="USER" if isinstance(creator, PlatformUser) else "ADMIN",
            created_by_user_id=creator.id if isinstance(creator, PlatformUser) else None,
            created_by_admin_id=creator.id if isinstance(creator, AdminUser) else None,
            **fields,
        )
        async with session_factory() as session:
            session.add(prop)
            await session.flush()
            if with_seo:
                session.add(
                    PropertySeo(property_id=prop.id, slug=slug or f"{slugify(title)}-{uuid.uuid4().hex[:6]}")
                )
            if with_verification:
                session.add(PropertyVerification(property_id=prop.id, is_verified=False))
            for position, url in enumerate(image_urls):
                session.add(PropertyImage(property_id=prop.id, image_url=url, sort_order=position))
            await session.commit()
        return prop

    return _make
