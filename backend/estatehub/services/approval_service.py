"""Property approval workflow: approve, reject and verify listings.

Each transition updates the property row, appends one audit row and (for
user-submitted listings) one in-app notification, all in one transaction.
Email and SMS go out only after the commit and can never fail the action.

There is no optimistic locking: two admins acting on the same listing at once
both succeed, the row keeps whichever write landed last and the history
keeps both.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import func, select

from estatehub.database import utcnow
from estatehub.errors import NotFoundError, ValidationError
from estatehub.models.approval import (
    NOTIFICATION_TITLE_LENGTH,
    PropertyApprovalHistory,
    PropertyApprovalNotification,
)
from estatehub.models.property import Property
from estatehub.services.gateway import PersistenceGateway
from estatehub.services.notifications import NotificationDispatcher, PropertyNotification, PropertySnapshot

logger = logging.getLogger(__name__)

AUTO_APPROVE_REASON = "Auto Approved when admin verified the property"
DEFAULT_OWNER_NAME = "Property Owner"
REVIEWER_DISPLAY_NAME = "Admin Team"


@dataclass(frozen=True)
class Transition:
    """How one admin action changes a listing and what the owner is told."""

    history_action: str
    new_status: str
    notify_action: str
    notification_type: str
    notification_title: str
    default_message: str


TRANSITIONS: dict[str, Transition] = {
    "APPROVE": Transition(
        history_action="approve",
        new_status="APPROVED",
        notify_action="APPROVE",
        notification_type="approved",
        notification_title="Property approved",
        default_message="Your property has been approved and is now live on our platform.",
    ),
    "REJECT": Transition(
        history_action="reject",
        new_status="REJECTED",
        notify_action="REJECT",
        notification_type="rejected",
        notification_title="Property rejected",
        default_message="Your property submission has been rejected.",
    ),
    # Verification implies approval, so the audit row records an approve.
    "VERIFY": Transition(
        history_action="approve",
        new_status="APPROVED",
        notify_action="VERIFY",
        notification_type="verified",
        notification_title="Property verified",
        default_message="Your property has been verified and marked as authentic.",
    ),
}


@dataclass
class ApprovalAction:
    """Input to every approval operation. ``admin_id`` is mandatory."""

    property_id: uuid.UUID | str
    admin_id: uuid.UUID | str | None
    message: str | None = None
    admin_notes: str | None = None
    reason: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


def _coerce_uuid(value: uuid.UUID | str | None, field_name: str) -> uuid.UUID:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid identifier") from None


class PropertyApprovalService:
    def __init__(self, gateway: PersistenceGateway, dispatcher: NotificationDispatcher | None = None) -> None:
        self.gateway = gateway
        self.dispatcher = dispatcher

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def approve(self, request: ApprovalAction) -> Property:
        return await self._apply("APPROVE", request)

    async def reject(self, request: ApprovalAction) -> Property:
        return await self._apply("REJECT", request)

    async def verify(self, request: ApprovalAction) -> Property:
        """Approve the listing and mark it verified in one step."""
        return await self._apply("VERIFY", request)

    async def _apply(self, kind: str, request: ApprovalAction) -> Property:
        transition = TRANSITIONS[kind]
        property_id = _coerce_uuid(request.property_id, "property_id")
        admin_id = _coerce_uuid(request.admin_id, "admin_id")
        reason = AUTO_APPROVE_REASON if kind == "VERIFY" else request.reason
        message = request.message or transition.default_message

        async with self.gateway.transaction(f"property {transition.history_action}"):
            prop = await self.gateway.get_property(property_id)
            if prop is None:
                raise NotFoundError("Property not found")

            previous_status = prop.approval_status
            now = utcnow()

            prop.approval_status = transition.new_status
            prop.approval_message = request.message
            if transition.new_status == "REJECTED":
                prop.rejection_reason = request.reason
                prop.rejected_by = admin_id
                prop.rejected_at = now
                prop.approved_by = None
                prop.approved_at = None
            else:
                prop.approved_by = admin_id
                prop.approved_at = now
                prop.rejected_by = None
                prop.rejected_at = None
            prop.last_reviewed_by = admin_id
            prop.last_reviewed_at = now
            prop.admin_notes = request.admin_notes or prop.admin_notes
            prop.updated_at = now

            await self.gateway.insert_history(
                property_id=property_id,
                admin_id=admin_id,
                action=transition.history_action,
                previous_status=previous_status,
                new_status=transition.new_status,
                message=request.message,
                admin_notes=request.admin_notes,
                reason=reason,
                ip_address=request.ip_address,
                user_agent=request.user_agent,
                created_at=now,
            )

            if kind == "VERIFY":
                await self.gateway.upsert_verification(
                    property_id,
                    admin_id=admin_id,
                    message=request.message,
                    notes=request.admin_notes,
                )

            owner_id = prop.created_by_user_id if prop.created_by_type == "USER" else None
            if owner_id is not None:
                await self.gateway.insert_notification(
                    property_id=property_id,
                    user_id=owner_id,
                    admin_id=admin_id,
                    type=transition.notification_type,
                    title=f"{transition.notification_title}: {prop.title}"[:NOTIFICATION_TITLE_LENGTH],
                    message=message,
                    priority="high" if transition.new_status == "REJECTED" else "normal",
                    created_at=now,
                )

        logger.info(
            "Property %s: %s by admin %s (%s -> %s)",
            property_id,
            kind.lower(),
            admin_id,
            previous_status,
            transition.new_status,
        )

        if owner_id is not None:
            await self._notify_owner(prop, owner_id, transition.notify_action, message, request.reason)

        updated = await self.gateway.get_property(property_id, refresh=True)
        return updated if updated is not None else prop

    async def _notify_owner(
        self,
        prop: Property,
        owner_id: uuid.UUID,
        action: str,
        message: str,
        reason: str | None,
    ) -> None:
        """Email/SMS the listing owner. Failures are logged and dropped."""
        if self.dispatcher is None:
            return
        try:
            owner = await self.gateway.get_platform_user(owner_id)
            if owner is None:
                logger.warning("Owner %s of property %s not found; skipping notification", owner_id, prop.id)
                return
            notification = PropertyNotification(
                property=PropertySnapshot(
                    id=prop.id,
                    title=prop.title,
                    price=prop.price,
                    address=prop.address,
                    city=prop.city,
                    state=prop.state,
                ),
                owner_name=owner.first_name or DEFAULT_OWNER_NAME,
                owner_email=owner.email,
                owner_phone=owner.phone,
                action=action,
                message=message,
                reason=reason,
                admin_name=REVIEWER_DISPLAY_NAME,
                review_date=utcnow().strftime("%d/%m/%Y"),
            )
            result = await self.dispatcher.send_property_status_notification(notification)
            if result.errors:
                logger.warning("Notification for property %s incomplete: %s", prop.id, "; ".join(result.errors))
        except Exception:
            logger.exception("Failed to notify owner of property %s", prop.id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_approval_history(
        self, property_id: uuid.UUID | str, limit: int = 20, offset: int = 0
    ) -> list[PropertyApprovalHistory]:
        """Audit rows for one listing, newest first, with the acting admin loaded."""
        property_id = _coerce_uuid(property_id, "property_id")
        stmt = (
            select(PropertyApprovalHistory)
            .where(PropertyApprovalHistory.property_id == property_id)
            .order_by(PropertyApprovalHistory.created_at.desc(), PropertyApprovalHistory.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.gateway.execute(stmt, "load approval history")
        return list(result.scalars().all())

    async def get_pending_properties(self, limit: int = 20, offset: int = 0) -> list[Property]:
        stmt = (
            select(Property)
            .where(Property.approval_status == "PENDING")
            .order_by(Property.created_at.desc(), Property.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.gateway.execute(stmt, "load pending properties")
        return list(result.scalars().all())

    async def get_approval_notifications(
        self, user_id: uuid.UUID, limit: int = 50, offset: int = 0
    ) -> tuple[list[PropertyApprovalNotification], int]:
        """A user's notifications newest first, plus their unread count."""
        stmt = (
            select(PropertyApprovalNotification)
            .where(PropertyApprovalNotification.user_id == user_id)
            .order_by(PropertyApprovalNotification.created_at.desc(), PropertyApprovalNotification.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.gateway.execute(stmt, "load approval notifications")
        unread_stmt = (
            select(func.count())
            .select_from(PropertyApprovalNotification)
            .where(
                PropertyApprovalNotification.user_id == user_id,
                PropertyApprovalNotification.is_read.is_(False),
            )
        )
        unread = (await self.gateway.execute(unread_stmt, "count unread notifications")).scalar_one()
        return list(result.scalars().all()), unread

    async def mark_notification_read(
        self, notification_id: uuid.UUID | str, user_id: uuid.UUID
    ) -> PropertyApprovalNotification:
        notification_id = _coerce_uuid(notification_id, "notification_id")
        async with self.gateway.transaction("mark notification read") as session:
            result = await session.execute(
                select(PropertyApprovalNotification).where(
                    PropertyApprovalNotification.id == notification_id,
                    PropertyApprovalNotification.user_id == user_id,
                )
            )
            notification = result.scalar_one_or_none()
            if notification is None:
                raise NotFoundError("Notification not found")
            if not notification.is_read:
                notification.is_read = True
                notification.read_at = utcnow()
        return notification
