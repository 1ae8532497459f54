"""Shared API dependencies, the single import point for all routers.

Re-exports database session and authentication dependencies and builds the
domain services, so router modules can import everything from one place::

    from estatehub.api.deps import get_current_admin, get_approval_service

Tests swap services or senders through ``app.dependency_overrides``.
"""

import ipaddress

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.auth.dependencies import (
    Principal,
    get_current_admin,
    get_current_principal,
    get_current_user,
    get_optional_principal,
    get_optional_user,
)
from estatehub.config import settings
from estatehub.database import get_db
from estatehub.services.approval_service import PropertyApprovalService
from estatehub.services.dashboard_service import ApprovalStatsService
from estatehub.services.email_client import build_email_sender
from estatehub.services.gateway import PersistenceGateway
from estatehub.services.notifications import NotificationDispatcher
from estatehub.services.property_service import PropertyService
from estatehub.services.query_service import PropertyQueryService
from estatehub.services.saved_service import SavedPropertyService
from estatehub.services.sms_client import build_sms_sender


def get_gateway(db: AsyncSession = Depends(get_db)) -> PersistenceGateway:
    return PersistenceGateway(db)


def get_notification_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(build_email_sender(settings), build_sms_sender(settings), settings)


def get_approval_service(
    gateway: PersistenceGateway = Depends(get_gateway),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> PropertyApprovalService:
    return PropertyApprovalService(gateway, dispatcher)


def get_stats_service(gateway: PersistenceGateway = Depends(get_gateway)) -> ApprovalStatsService:
    return ApprovalStatsService(gateway)


def get_query_service(gateway: PersistenceGateway = Depends(get_gateway)) -> PropertyQueryService:
    return PropertyQueryService(gateway)


def get_property_service(gateway: PersistenceGateway = Depends(get_gateway)) -> PropertyService:
    return PropertyService(gateway)


def get_saved_service(gateway: PersistenceGateway = Depends(get_gateway)) -> SavedPropertyService:
    return SavedPropertyService(gateway)


def _parse_ip(value: str | None) -> str | None:
    if not value:
        return None
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return None


def client_context(request: Request) -> tuple[str | None, str | None]:
    """``(ip_address, user_agent)`` of the caller.

    The first X-Forwarded-For hop is used when it is a valid address; otherwise
    the socket peer.
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    ip_address = _parse_ip(forwarded.split(",")[0])
    if ip_address is None and request.client is not None:
        ip_address = _parse_ip(request.client.host)
    return ip_address, request.headers.get("user-agent")


__all__ = [
    "Principal",
    "client_context",
    "get_approval_service",
    "get_current_admin",
    "get_current_principal",
    "get_current_user",
    "get_db",
    "get_gateway",
    "get_notification_dispatcher",
    "get_optional_principal",
    "get_optional_user",
    "get_property_service",
    "get_query_service",
    "get_saved_service",
    "get_stats_service",
]
