"""Admin property review API: approve, reject, verify, history and moderation queues."""

import uuid

from fastapi import APIRouter, Depends, Query, Request

from estatehub.api.deps import (
    client_context,
    get_approval_service,
    get_current_admin,
    get_query_service,
    get_stats_service,
)
from estatehub.models.user import AdminUser
from estatehub.schemas.approval import (
    ApprovalHistoryEntry,
    ApprovalHistoryResponse,
    ApprovalStatsResponse,
    PropertyApprovalInput,
)
from estatehub.schemas.property import APPROVAL_STATUS_PATTERN, PaginatedProperties, PropertyResponse
from estatehub.services.approval_service import ApprovalAction, PropertyApprovalService
from estatehub.services.dashboard_service import ApprovalStatsService
from estatehub.services.query_service import PropertyQueryService

router = APIRouter(prefix="/api/v1/admin/properties", tags=["admin-properties"])


def _action(body: PropertyApprovalInput, admin: AdminUser, request: Request) -> ApprovalAction:
    ip_address, user_agent = client_context(request)
    return ApprovalAction(
        property_id=body.property_id,
        admin_id=admin.id,
        message=body.message,
        admin_notes=body.admin_notes,
        reason=body.reason,
        ip_address=ip_address,
        user_agent=user_agent,
    )


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


@router.post("/approve", response_model=PropertyResponse, summary="Approve a property")
async def approve_property(
    body: PropertyApprovalInput,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    service: PropertyApprovalService = Depends(get_approval_service),
) -> PropertyResponse:
    prop = await service.approve(_action(body, admin, request))
    return PropertyResponse.model_validate(prop)


@router.post("/reject", response_model=PropertyResponse, summary="Reject a property")
async def reject_property(
    body: PropertyApprovalInput,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    service: PropertyApprovalService = Depends(get_approval_service),
) -> PropertyResponse:
    prop = await service.reject(_action(body, admin, request))
    return PropertyResponse.model_validate(prop)


@router.post("/verify", response_model=PropertyResponse, summary="Verify (and approve) a property")
async def verify_property(
    body: PropertyApprovalInput,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    service: PropertyApprovalService = Depends(get_approval_service),
) -> PropertyResponse:
    prop = await service.verify(_action(body, admin, request))
    return PropertyResponse.model_validate(prop)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@router.get("", response_model=PaginatedProperties, summary="List properties by approval status")
async def list_properties(
    approval_status: str | None = Query(None, alias="approvalStatus", pattern=APPROVAL_STATUS_PATTERN),
    search_term: str | None = Query(None, alias="searchTerm", max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    _admin: AdminUser = Depends(get_current_admin),
    service: PropertyQueryService = Depends(get_query_service),
) -> PaginatedProperties:
    """All listings (optionally one approval status) for the moderation queue."""
    result = await service.list_by_approval_status(approval_status, page=page, limit=limit, search_term=search_term)
    return PaginatedProperties.model_validate(result)


@router.get("/mine", response_model=PaginatedProperties, summary="List properties posted by the current admin")
async def list_my_properties(
    search_term: str | None = Query(None, alias="searchTerm", max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: AdminUser = Depends(get_current_admin),
    service: PropertyQueryService = Depends(get_query_service),
) -> PaginatedProperties:
    result = await service.list_admin_properties(admin.id, page=page, limit=limit, search_term=search_term)
    return PaginatedProperties.model_validate(result)


@router.get("/{property_id}/history", response_model=ApprovalHistoryResponse, summary="Approval audit trail")
async def approval_history(
    property_id: uuid.UUID,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    _admin: AdminUser = Depends(get_current_admin),
    service: PropertyApprovalService = Depends(get_approval_service),
) -> ApprovalHistoryResponse:
    entries = await service.get_approval_history(property_id, limit=limit, offset=offset)
    return ApprovalHistoryResponse(
        property_id=property_id,
        data=[
            ApprovalHistoryEntry(
                id=entry.id,
                action=entry.action,
                previous_status=entry.previous_status,
                new_status=entry.new_status,
                message=entry.message,
                admin_notes=entry.admin_notes,
                reason=entry.reason,
                ip_address=entry.ip_address,
                user_agent=entry.user_agent,
                is_system_action=entry.is_system_action,
                created_at=entry.created_at,
                admin_id=entry.admin_id,
                admin_name=entry.admin.full_name if entry.admin else None,
                admin_email=entry.admin.email if entry.admin else None,
            )
            for entry in entries
        ],
    )


@router.get("/stats", response_model=ApprovalStatsResponse, summary="Moderation dashboard statistics")
async def approval_stats(
    recent_limit: int = Query(10, ge=1, le=50, alias="recentLimit"),
    months: int = Query(6, ge=1, le=24),
    city_limit: int = Query(5, ge=1, le=20, alias="cityLimit"),
    _admin: AdminUser = Depends(get_current_admin),
    service: ApprovalStatsService = Depends(get_stats_service),
) -> ApprovalStatsResponse:
    stats = await service.get_approval_stats(recent_limit=recent_limit, months=months, city_limit=city_limit)
    return ApprovalStatsResponse.model_validate(stats)
