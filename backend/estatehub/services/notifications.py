"""Property status notifications: email and SMS to a listing's owner.

Every public method here is best-effort. Provider failures are collected into
the returned result and logged; nothing raises to the caller.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from html import escape

from estatehub.config import Settings
from estatehub.services.email_client import EmailMessage, EmailSender
from estatehub.services.sms_client import SmsSender

logger = logging.getLogger(__name__)

SMS_MAX_LENGTH = 160
SMS_INLINE_MESSAGE_LIMIT = 100


@dataclass(frozen=True)
class ActionStyle:
    """Presentation of one notification action across email and SMS."""

    label: str
    subject: str
    color: str
    icon: str


ACTION_STYLES: dict[str, ActionStyle] = {
    "APPROVE": ActionStyle("Approved", "✅ Property Approved", "#4caf50", "✅"),
    "REJECT": ActionStyle("Rejected", "❌ Property Rejected", "#f44336", "❌"),
    "VERIFY": ActionStyle("Verified", "🔐 Property Verified", "#2196f3", "🔐"),
    "UNVERIFY": ActionStyle("Unverified", "⚠️ Property Verification Removed", "#ff9800", "⚠️"),
    "FLAG": ActionStyle("Flagged", "🚩 Property Flagged for Review", "#ff5722", "🚩"),
}
DEFAULT_ACTION_STYLE = ActionStyle("Updated", "Property Status Update", "#6c757d", "📋")


def get_action_style(action: str) -> ActionStyle:
    return ACTION_STYLES.get(action, DEFAULT_ACTION_STYLE)


def format_price(price: Decimal | float | int) -> str:
    """Render a rupee amount in crore/lakh shorthand (1.5Cr, 25.0L) above one lakh."""
    value = float(price)
    if value >= 10_000_000:
        return f"{value / 10_000_000:.1f}Cr"
    if value >= 100_000:
        return f"{value / 100_000:.1f}L"
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


# ---------------------------------------------------------------------------
# Notification descriptors
# ---------------------------------------------------------------------------


@dataclass
class PropertySnapshot:
    """The listing fields a notification needs, detached from the ORM row."""

    id: uuid.UUID
    title: str
    price: Decimal
    address: str | None = None
    city: str | None = None
    state: str | None = None

    @property
    def location(self) -> str:
        return ", ".join(part for part in (self.address, self.city, self.state) if part) or "Location not specified"


@dataclass
class PropertyNotification:
    property: PropertySnapshot
    owner_name: str
    owner_email: str
    owner_phone: str | None
    action: str
    message: str | None = None
    reason: str | None = None
    admin_name: str | None = "Admin Team"
    review_date: str | None = None


@dataclass
class NotificationResult:
    email_sent: bool = False
    sms_sent: bool = False
    errors: list[str] = field(default_factory=list)


@dataclass
class BulkNotificationResult:
    total_sent: int = 0
    emails_sent: int = 0
    sms_sent: int = 0
    errors: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class NotificationDispatcher:
    """Composes status notifications and hands them to the email and SMS senders."""

    def __init__(self, email_sender: EmailSender, sms_sender: SmsSender, settings: Settings) -> None:
        self.email_sender = email_sender
        self.sms_sender = sms_sender
        self.brand = settings.app_name
        self.frontend_url = settings.frontend_url.rstrip("/")
        self.bulk_delay_seconds = settings.notification_bulk_delay_seconds

    async def send_property_status_notification(self, notification: PropertyNotification) -> NotificationResult:
        """Attempt one email and one SMS for a status change."""
        result = NotificationResult()
        property_id = notification.property.id

        try:
            sent = await self._send_email(notification)
            result.email_sent = sent
            if not sent:
                result.errors.append("Failed to send email notification")
        except Exception as exc:
            logger.exception("Email notification failed for property %s", property_id)
            result.errors.append(f"Email error: {exc}")

        try:
            sent = await self.sms_sender.send_sms(notification.owner_phone or "", self.build_sms(notification))
            result.sms_sent = sent
            if not sent:
                result.errors.append("Failed to send SMS notification")
        except Exception as exc:
            logger.exception("SMS notification failed for property %s", property_id)
            result.errors.append(f"SMS error: {exc}")

        logger.info(
            "Property notification for %s (%s): email=%s sms=%s errors=%d",
            property_id,
            notification.action,
            result.email_sent,
            result.sms_sent,
            len(result.errors),
        )
        return result

    async def send_bulk_property_notifications(
        self, notifications: list[PropertyNotification]
    ) -> BulkNotificationResult:
        """Send notifications one after another with a fixed pause between them."""
        totals = BulkNotificationResult()

        for index, notification in enumerate(notifications):
            if index and self.bulk_delay_seconds > 0:
                await asyncio.sleep(self.bulk_delay_seconds)
            try:
                result = await self.send_property_status_notification(notification)
            except Exception as exc:
                logger.exception("Bulk notification failed for property %s", notification.property.id)
                totals.errors.append(f"Failed to send notification for property {notification.property.id}: {exc}")
                continue

            if result.email_sent:
                totals.emails_sent += 1
            if result.sms_sent:
                totals.sms_sent += 1
            if result.email_sent or result.sms_sent:
                totals.total_sent += 1
            totals.errors.extend(result.errors)

        logger.info(
            "Bulk property notifications completed: %d requested, %d sent (%d email, %d sms), %d errors",
            len(notifications),
            totals.total_sent,
            totals.emails_sent,
            totals.sms_sent,
            len(totals.errors),
        )
        return totals

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    async def _send_email(self, notification: PropertyNotification) -> bool:
        message = EmailMessage(
            to=notification.owner_email,
            to_name=notification.owner_name,
            subject=self.build_subject(notification),
            html=self.build_email_html(notification),
            text=self.build_email_text(notification),
        )
        outcome = await self.email_sender.send_email(message)
        return outcome.success

    def build_subject(self, notification: PropertyNotification) -> str:
        return f"{get_action_style(notification.action).subject}: {notification.property.title}"

    def build_email_html(self, notification: PropertyNotification) -> str:
        style = get_action_style(notification.action)
        prop = notification.property
        details = [
            ("Price", f"₹{format_price(prop.price)}"),
            ("Location", prop.location),
            ("Property ID", f"#{prop.id}"),
        ]
        if notification.review_date:
            details.append(("Review Date", notification.review_date))
        detail_rows = "".join(
            f'<div class="detail-item"><span class="detail-label">{label}:</span><span>{escape(value)}</span></div>'
            for label, value in details
        )

        sections = []
        if notification.message:
            sections.append(
                '<div class="message-box"><h4 style="margin: 0 0 10px 0; color: #1976d2;">Message from Admin Team:</h4>'
                f'<p style="margin: 0;">{escape(notification.message)}</p></div>'
            )
        if notification.reason:
            sections.append(
                '<div class="reason-box"><h4 style="margin: 0 0 10px 0; color: #d32f2f;">Reason:</h4>'
                f'<p style="margin: 0;">{escape(notification.reason)}</p></div>'
            )
        if notification.admin_name:
            sections.append(
                '<p style="margin-top: 30px; font-size: 14px; color: #666;">'
                f"Reviewed by: <strong>{escape(notification.admin_name)}</strong></p>"
            )

        return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Property Status Update</title>
<style>
body {{ font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6; color: #333; background-color: #f5f5f5; margin: 0; }}
.container {{ max-width: 600px; margin: 20px auto; background: white; border-radius: 12px; overflow: hidden; }}
.header {{ background: {style.color}; color: white; padding: 30px 20px; text-align: center; }}
.content {{ padding: 40px 30px; }}
.property-card {{ background: #f8f9fa; border-radius: 8px; padding: 20px; margin: 20px 0; border-left: 4px solid {style.color}; }}
.detail-item {{ font-size: 14px; margin: 6px 0; }}
.detail-label {{ font-weight: 600; margin-right: 8px; color: #666; }}
.message-box {{ background: #e3f2fd; border: 1px solid #bbdefb; border-radius: 8px; padding: 20px; margin: 20px 0; }}
.reason-box {{ background: #ffebee; border: 1px solid #ffcdd2; border-radius: 8px; padding: 15px; margin: 15px 0; }}
.button {{ display: inline-block; background: {style.color}; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; }}
.status-badge {{ display: inline-block; background: {style.color}; color: white; padding: 6px 12px; border-radius: 20px; font-size: 12px; text-transform: uppercase; }}
.footer {{ text-align: center; color: #6c757d; font-size: 14px; padding: 20px 30px; background-color: #f8f9fa; }}
</style>
</head>
<body>
<div class="container">
<div class="header"><h1>{style.icon} Property {style.label}</h1></div>
<div class="content">
<p>Dear {escape(notification.owner_name)},</p>
<p>Your property listing has been <strong>{style.label.lower()}</strong> by our admin team.</p>
<div class="property-card">
<h3>{escape(prop.title)}</h3>
<div class="status-badge">{style.label}</div>
{detail_rows}
</div>
{"".join(sections)}
<div style="text-align: center; margin: 30px 0;"><a href="{self.frontend_url}/dashboard" class="button">View Dashboard</a></div>
<p>If you have any questions or concerns, please contact our support team.</p>
<p>Best regards,<br><strong>{escape(self.brand)} Admin Team</strong></p>
</div>
<div class="footer">
<p>This is an automated message from our property management system.</p>
<p>Please do not reply to this email.</p>
</div>
</div>
</body>
</html>
"""

    def build_email_text(self, notification: PropertyNotification) -> str:
        style = get_action_style(notification.action)
        prop = notification.property
        lines = [
            f"Property {style.label}",
            "",
            f"Dear {notification.owner_name},",
            "",
            f"Your property listing has been {style.label.lower()} by our admin team.",
            "",
            "Property Details:",
            f"- Title: {prop.title}",
            f"- Price: ₹{format_price(prop.price)}",
            f"- Location: {prop.location}",
            f"- Property ID: #{prop.id}",
        ]
        if notification.review_date:
            lines.append(f"- Review Date: {notification.review_date}")
        if notification.message:
            lines += ["", "Admin Message:", notification.message]
        if notification.reason:
            lines += ["", "Reason:", notification.reason]
        if notification.admin_name:
            lines += ["", f"Reviewed by: {notification.admin_name}"]
        lines += [
            "",
            f"View your dashboard: {self.frontend_url}/dashboard",
            "",
            "If you have any questions or concerns, please contact our support team.",
            "",
            "Best regards,",
            f"{self.brand} Admin Team",
            "",
            "---",
            "This is an automated message from our property management system.",
        ]
        return "\n".join(lines)

    def build_sms(self, notification: PropertyNotification) -> str:
        """Single-segment SMS text, at most 160 characters."""
        action = get_action_style(notification.action).label.lower()
        title = notification.property.title
        manage_url = f"{self.frontend_url}/manage"

        text = f'🏠 {self.brand}: Your property "{title}" has been {action}.'
        if notification.message and len(notification.message) < SMS_INLINE_MESSAGE_LIMIT:
            text += f" {notification.message}"
        text += f" Check your dashboard: {manage_url}"
        if len(text) <= SMS_MAX_LENGTH:
            return text

        prefix = f'🏠 {self.brand} {action}: "'
        suffix = f'". Check dashboard: {manage_url}'
        text = f"{prefix}{title}{suffix}"
        if len(text) > SMS_MAX_LENGTH:
            room = SMS_MAX_LENGTH - len(prefix) - len(suffix) - 1
            text = f"{prefix}{title[: max(room, 0)]}…{suffix}"
        return text
