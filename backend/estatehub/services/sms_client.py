"""Async Twilio SMS client."""

import asyncio
import logging
from abc import ABC, abstractmethod

import aiohttp
from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.http.async_http_client import AsyncTwilioHttpClient
from twilio.rest import Client

from estatehub.config import Settings
from estatehub.errors import NotificationError

logger = logging.getLogger(__name__)


class SmsSender(ABC):
    @abstractmethod
    async def send_sms(self, to: str, body: str) -> bool:
        """Send one text message. Transport failures raise ``NotificationError``."""


class TwilioSmsSender(SmsSender):
    def __init__(self, account_sid: str, auth_token: str, from_number: str, timeout: float = 10.0) -> None:
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def send_sms(self, to: str, body: str) -> bool:
        if not self.configured:
            logger.warning("SMS provider not configured; dropping SMS to %s", to)
            return False
        if not to:
            logger.warning("No phone number supplied; SMS not sent")
            return False

        http_client = AsyncTwilioHttpClient(timeout=self.timeout)
        try:
            client = Client(self.account_sid, self.auth_token, http_client=http_client)
            message = await client.messages.create_async(to=to, from_=self.from_number, body=body)
        except TwilioRestException as exc:
            logger.warning("SMS to %s rejected by Twilio (HTTP %s, code %s): %s", to, exc.status, exc.code, exc.msg)
            return False
        except (TwilioException, aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise NotificationError(f"SMS transport failed: {exc}") from exc
        finally:
            await http_client.close()

        if not message.sid:
            logger.error("Twilio accepted SMS to %s but returned no message SID", to)
            return False
        logger.info("SMS sent to %s (sid=%s, status=%s)", to, message.sid, message.status)
        return True


def build_sms_sender(settings: Settings) -> TwilioSmsSender:
    return TwilioSmsSender(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        from_number=settings.twilio_from_number,
        timeout=settings.notification_timeout_seconds,
    )
