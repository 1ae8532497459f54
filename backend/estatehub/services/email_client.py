"""Async Azure Communication Services email client."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from azure.communication.email.aio import EmailClient
from azure.core.exceptions import AzureError

from estatehub.config import Settings
from estatehub.errors import NotificationError

logger = logging.getLogger(__name__)

SEND_SUCCEEDED = "Succeeded"


@dataclass
class EmailMessage:
    to: str
    subject: str
    html: str
    text: str
    to_name: str | None = None


@dataclass
class EmailSendResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


class EmailSender(ABC):
    """Anything that can deliver one email and report whether it was accepted."""

    @abstractmethod
    async def send_email(self, message: EmailMessage) -> EmailSendResult:
        """Send one message. Transport failures raise ``NotificationError``."""


class AzureEmailSender(EmailSender):
    def __init__(self, connection_string: str, sender_address: str) -> None:
        self.connection_string = connection_string
        self.sender_address = sender_address

    @property
    def configured(self) -> bool:
        return bool(self.connection_string and self.sender_address)

    def get_client(self) -> EmailClient:
        return EmailClient.from_connection_string(self.connection_string)

    async def send_email(self, message: EmailMessage) -> EmailSendResult:
        if not self.configured:
            logger.warning("Email provider not configured; dropping email to %s", message.to)
            return EmailSendResult(success=False, error="Email provider not configured")

        recipient = {"address": message.to}
        if message.to_name:
            recipient["displayName"] = message.to_name
        payload = {
            "senderAddress": self.sender_address,
            "content": {"subject": message.subject, "plainText": message.text, "html": message.html},
            "recipients": {"to": [recipient]},
        }

        try:
            async with self.get_client() as client:
                poller = await client.begin_send(payload)
                result = await poller.result()
        except (AzureError, ValueError) as exc:
            raise NotificationError(f"Email transport failed: {exc}") from exc

        status = result.get("status")
        if status != SEND_SUCCEEDED:
            logger.warning("Email to %s finished with status %s: %s", message.to, status, result.get("error"))
            return EmailSendResult(success=False, error=f"Email send failed with status: {status}")

        logger.info("Email sent to %s (id=%s)", message.to, result.get("id"))
        return EmailSendResult(success=True, message_id=result.get("id"))


def build_email_sender(settings: Settings) -> AzureEmailSender:
    return AzureEmailSender(
        connection_string=settings.azure_communication_connection_string,
        sender_address=settings.azure_email_from_address,
    )
