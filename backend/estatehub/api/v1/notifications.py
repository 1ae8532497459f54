"""In-app approval notifications for platform users."""

import uuid

from fastapi import APIRouter, Depends, Query

from estatehub.api.deps import get_approval_service, get_current_user
from estatehub.models.user import PlatformUser
from estatehub.schemas.approval import ApprovalNotificationListResponse, ApprovalNotificationResponse
from estatehub.services.approval_service import PropertyApprovalService

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=ApprovalNotificationListResponse, summary="List my approval notifications")
async def list_notifications(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: PlatformUser = Depends(get_current_user),
    service: PropertyApprovalService = Depends(get_approval_service),
) -> ApprovalNotificationListResponse:
    notifications, unread = await service.get_approval_notifications(user.id, limit=limit, offset=offset)
    return ApprovalNotificationListResponse(
        data=[ApprovalNotificationResponse.model_validate(n) for n in notifications],
        unread_count=unread,
    )


@router.post("/{notification_id}/read", response_model=ApprovalNotificationResponse, summary="Mark as read")
async def mark_notification_read(
    notification_id: uuid.UUID,
    user: PlatformUser = Depends(get_current_user),
    service: PropertyApprovalService = Depends(get_approval_service),
) -> ApprovalNotificationResponse:
    notification = await service.mark_notification_read(notification_id, user.id)
    return ApprovalNotificationResponse.model_validate(notification)
