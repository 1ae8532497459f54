"""Tests for the property approval workflow service."""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.errors import NotFoundError, NotificationError, ValidationError
from estatehub.models.approval import PropertyApprovalHistory, PropertyApprovalNotification
from estatehub.models.user import AdminUser, PlatformUser
from estatehub.services.approval_service import (
    AUTO_APPROVE_REASON,
    ApprovalAction,
    PropertyApprovalService,
)
from estatehub.services.gateway import PersistenceGateway

pytestmark = pytest.mark.asyncio


def _service(session: AsyncSession, dispatcher=None) -> PropertyApprovalService:
    return PropertyApprovalService(PersistenceGateway(session), dispatcher)


async def _history_count(session_factory, property_id: uuid.UUID) -> int:
    async with session_factory() as session:
        result = await session.execute(
            select(func.count())
            .select_from(PropertyApprovalHistory)
            .where(PropertyApprovalHistory.property_id == property_id)
        )
        return result.scalar_one()


# ---------------------------------------------------------------------------
# approve / reject
# ---------------------------------------------------------------------------


class TestApprove:
    """Approving a pending listing."""

    async def test_sets_status_and_reviewer(
        self, db_session, dispatcher, make_property, test_admin: AdminUser, test_owner: PlatformUser
    ) -> None:
        prop = await make_property(creator=test_owner)

        result = await _service(db_session, dispatcher).approve(
            ApprovalAction(property_id=prop.id, admin_id=test_admin.id, message="Looks good")
        )

        assert result.approval_status == "APPROVED"
        assert result.approved_by == test_admin.id
        assert result.approved_at is not None
        assert result.rejected_by is None
        assert result.last_reviewed_by == test_admin.id
        assert result.approval_message == "Looks good"

    async def test_appends_one_history_row(
        self, db_session, session_factory, make_property, test_admin: AdminUser
    ) -> None:
        prop = await make_property(creator=test_admin)

        await _service(db_session).approve(
            ApprovalAction(property_id=prop.id, admin_id=test_admin.id, ip_address="10.0.0.7", user_agent="pytest")
        )

        async with session_factory() as session:
            entries = await _service(session).get_approval_history(prop.id)
        assert len(entries) == 1
        entry = entries[0]
        assert entry.action == "approve"
        assert entry.previous_status == "PENDING"
        assert entry.new_status == "APPROVED"
        assert entry.ip_address == "10.0.0.7"
        assert entry.user_agent == "pytest"
        assert entry.is_system_action is False
        assert entry.admin.email == test_admin.email

    async def test_notifies_user_owner_by_email_and_sms(
        self, db_session, dispatcher, email_sender, sms_sender, make_property, test_admin, test_owner
    ) -> None:
        prop = await make_property(title="Riverside Plot", creator=test_owner)

        await _service(db_session, dispatcher).approve(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        assert len(email_sender.sent) == 1
        assert email_sender.sent[0].to == test_owner.email
        assert email_sender.sent[0].subject == "✅ Property Approved: Riverside Plot"
        assert len(sms_sender.sent) == 1
        assert sms_sender.sent[0][0] == test_owner.phone

    async def test_writes_in_app_notification_for_user_owner(
        self, db_session, session_factory, make_property, test_admin, test_owner
    ) -> None:
        prop = await make_property(title="Riverside Plot", creator=test_owner)

        await _service(db_session).approve(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        async with session_factory() as session:
            notifications, unread = await _service(session).get_approval_notifications(test_owner.id)
        assert unread == 1
        assert notifications[0].type == "approved"
        assert notifications[0].title == "Property approved: Riverside Plot"
        assert notifications[0].message == "Your property has been approved and is now live on our platform."
        assert notifications[0].priority == "normal"

    async def test_notification_title_fits_column_for_longest_listing_title(
        self, db_session, session_factory, make_property, test_admin, test_owner
    ) -> None:
        title = "Riverside Farmland " + "x" * 236
        assert len(title) == 255
        prop = await make_property(title=title, creator=test_owner)

        result = await _service(db_session).approve(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        assert result.approval_status == "APPROVED"
        async with session_factory() as session:
            notifications, _ = await _service(session).get_approval_notifications(test_owner.id)
        column_length = PropertyApprovalNotification.__table__.c.title.type.length
        assert len(notifications[0].title) <= column_length
        assert notifications[0].title == f"Property approved: {title}"

    async def test_admin_listing_gets_no_owner_notification(
        self, db_session, session_factory, dispatcher, email_sender, make_property, test_admin
    ) -> None:
        prop = await make_property(creator=test_admin)

        await _service(db_session, dispatcher).approve(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        assert email_sender.sent == []
        async with session_factory() as session:
            count = await session.execute(select(func.count()).select_from(PropertyApprovalNotification))
        assert count.scalar_one() == 0

    async def test_keeps_existing_admin_notes_when_none_given(
        self, db_session, make_property, test_admin
    ) -> None:
        prop = await make_property(creator=test_admin, admin_notes="Title deed checked")

        result = await _service(db_session).approve(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        assert result.admin_notes == "Title deed checked"


class TestReject:
    async def test_reject_after_approve_clears_approval(
        self, session_factory, make_property, test_admin, test_owner
    ) -> None:
        prop = await make_property(creator=test_owner)

        async with session_factory() as session:
            await _service(session).approve(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))
        async with session_factory() as session:
            result = await _service(session).reject(
                ApprovalAction(property_id=prop.id, admin_id=test_admin.id, reason="Boundary does not match records")
            )

        assert result.approval_status == "REJECTED"
        assert result.rejection_reason == "Boundary does not match records"
        assert result.rejected_by == test_admin.id
        assert result.rejected_at is not None
        assert result.approved_by is None
        assert result.approved_at is None
        assert await _history_count(session_factory, prop.id) == 2

    async def test_history_is_newest_first(self, session_factory, make_property, test_admin) -> None:
        prop = await make_property(creator=test_admin)

        async with session_factory() as session:
            await _service(session).approve(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))
        async with session_factory() as session:
            await _service(session).reject(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        async with session_factory() as session:
            entries = await _service(session).get_approval_history(prop.id)
        assert [entry.action for entry in entries] == ["reject", "approve"]
        assert entries[0].previous_status == "APPROVED"

    async def test_every_call_leaves_one_audit_row(self, session_factory, make_property, test_admin) -> None:
        prop = await make_property(creator=test_admin)
        calls = ("approve", "reject", "verify", "approve")

        for call in calls:
            async with session_factory() as session:
                await getattr(_service(session), call)(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        assert await _history_count(session_factory, prop.id) == len(calls)
        async with session_factory() as session:
            entries = await _service(session).get_approval_history(prop.id)
        transitions = [(entry.action, entry.previous_status, entry.new_status) for entry in reversed(entries)]
        assert transitions == [
            ("approve", "PENDING", "APPROVED"),
            ("reject", "APPROVED", "REJECTED"),
            ("approve", "REJECTED", "APPROVED"),
            ("approve", "APPROVED", "APPROVED"),
        ]

    async def test_rejection_notification_is_high_priority(
        self, db_session, session_factory, make_property, test_admin, test_owner
    ) -> None:
        prop = await make_property(creator=test_owner)

        await _service(db_session).reject(
            ApprovalAction(property_id=prop.id, admin_id=test_admin.id, reason="Duplicate listing")
        )

        async with session_factory() as session:
            notifications, _ = await _service(session).get_approval_notifications(test_owner.id)
        assert notifications[0].type == "rejected"
        assert notifications[0].priority == "high"


# ---------------------------------------------------------------------------
# verify
# ---------------------------------------------------------------------------


class TestVerify:
    async def test_verify_approves_and_marks_verified(
        self, db_session, make_property, test_admin, test_owner
    ) -> None:
        prop = await make_property(creator=test_owner)

        result = await _service(db_session).verify(
            ApprovalAction(property_id=prop.id, admin_id=test_admin.id, message="Site visit done")
        )

        assert result.approval_status == "APPROVED"
        assert result.approved_by == test_admin.id
        assert result.verification.is_verified is True
        assert result.verification.verified_by == test_admin.id
        assert result.verification.verification_message == "Site visit done"
        assert result.verification.verified_at is not None

    async def test_verify_records_auto_approve_reason(
        self, db_session, session_factory, make_property, test_admin
    ) -> None:
        prop = await make_property(creator=test_admin)

        await _service(db_session).verify(
            ApprovalAction(property_id=prop.id, admin_id=test_admin.id, reason="ignored for verification")
        )

        async with session_factory() as session:
            entries = await _service(session).get_approval_history(prop.id)
        assert entries[0].action == "approve"
        assert entries[0].new_status == "APPROVED"
        assert entries[0].reason == AUTO_APPROVE_REASON

    async def test_verify_creates_missing_verification_row(
        self, db_session, make_property, test_admin
    ) -> None:
        prop = await make_property(creator=test_admin, with_verification=False)

        result = await _service(db_session).verify(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        assert result.verification is not None
        assert result.verification.is_verified is True

    async def test_verify_sends_verified_email(
        self, db_session, dispatcher, email_sender, make_property, test_admin, test_owner
    ) -> None:
        prop = await make_property(title="Hilltop Villa", creator=test_owner)

        await _service(db_session, dispatcher).verify(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        assert email_sender.sent[0].subject == "🔐 Property Verified: Hilltop Villa"


# ---------------------------------------------------------------------------
# Failure modes
# ---------------------------------------------------------------------------


class TestApprovalFailures:
    async def test_unknown_property(self, db_session, session_factory, test_admin) -> None:
        missing = uuid.uuid4()
        with pytest.raises(NotFoundError, match="Property not found"):
            await _service(db_session).approve(ApprovalAction(property_id=missing, admin_id=test_admin.id))
        assert await _history_count(session_factory, missing) == 0

    async def test_missing_admin_id(self, db_session, make_property, test_admin) -> None:
        prop = await make_property(creator=test_admin)
        with pytest.raises(ValidationError):
            await _service(db_session).approve(ApprovalAction(property_id=prop.id, admin_id=None))

    async def test_malformed_property_id(self, db_session, test_admin) -> None:
        with pytest.raises(ValidationError, match="not a valid identifier"):
            await _service(db_session).reject(ApprovalAction(property_id="not-a-uuid", admin_id=test_admin.id))

    async def test_email_failure_does_not_block_approval(
        self, db_session, session_factory, dispatcher, email_sender, sms_sender, make_property, test_admin, test_owner
    ) -> None:
        email_sender.error = NotificationError("Email transport failed: timeout")
        prop = await make_property(creator=test_owner)

        result = await _service(db_session, dispatcher).approve(
            ApprovalAction(property_id=prop.id, admin_id=test_admin.id)
        )

        assert result.approval_status == "APPROVED"
        assert len(sms_sender.sent) == 1
        assert await _history_count(session_factory, prop.id) == 1

    async def test_dispatcher_crash_does_not_block_approval(
        self, db_session, make_property, test_admin, test_owner
    ) -> None:
        broken = AsyncMock()
        broken.send_property_status_notification.side_effect = RuntimeError("provider down")
        prop = await make_property(creator=test_owner)

        result = await _service(db_session, broken).approve(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        assert result.approval_status == "APPROVED"
        broken.send_property_status_notification.assert_awaited_once()


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class TestApprovalReads:
    async def test_pending_properties(self, db_session, make_property, test_admin) -> None:
        pending = await make_property(title="Pending One", creator=test_admin)
        await make_property(title="Approved One", creator=test_admin, approval_status="APPROVED")

        result = await _service(db_session).get_pending_properties()

        assert [prop.id for prop in result] == [pending.id]

    async def test_mark_notification_read(
        self, db_session, session_factory, make_property, test_admin, test_owner
    ) -> None:
        prop = await make_property(creator=test_owner)
        await _service(db_session).approve(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        async with session_factory() as session:
            notifications, _ = await _service(session).get_approval_notifications(test_owner.id)
        async with session_factory() as session:
            updated = await _service(session).mark_notification_read(notifications[0].id, test_owner.id)
        assert updated.is_read is True
        assert updated.read_at is not None

        async with session_factory() as session:
            _, unread = await _service(session).get_approval_notifications(test_owner.id)
        assert unread == 0

    async def test_mark_other_users_notification(
        self, db_session, session_factory, make_property, test_admin, test_owner, test_buyer
    ) -> None:
        prop = await make_property(creator=test_owner)
        await _service(db_session).approve(ApprovalAction(property_id=prop.id, admin_id=test_admin.id))

        async with session_factory() as session:
            notifications, _ = await _service(session).get_approval_notifications(test_owner.id)
        async with session_factory() as session:
            with pytest.raises(NotFoundError, match="Notification not found"):
                await _service(session).mark_notification_read(notifications[0].id, test_buyer.id)
