"""Pydantic v2 request/response schemas for the approval workflow."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import Field

from estatehub.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyApprovalInput(CamelModel):
    """Body of approve / reject / verify. The acting admin comes from the token."""

    property_id: uuid.UUID
    message: str | None = Field(None, max_length=2000)
    admin_notes: str | None = Field(None, max_length=5000)
    reason: str | None = Field(None, max_length=2000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ApprovalHistoryEntry(CamelModel):
    id: uuid.UUID
    action: str
    previous_status: str | None = None
    new_status: str
    message: str | None = None
    admin_notes: str | None = None
    reason: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    is_system_action: bool
    created_at: datetime
    admin_id: uuid.UUID | None = None
    admin_name: str | None = None
    admin_email: str | None = None


class ApprovalHistoryResponse(CamelModel):
    property_id: uuid.UUID
    data: list[ApprovalHistoryEntry]


class ApprovalNotificationResponse(CamelModel):
    id: uuid.UUID
    property_id: uuid.UUID
    type: str
    title: str
    message: str
    is_read: bool
    read_at: datetime | None = None
    priority: str
    category: str
    created_at: datetime


class ApprovalNotificationListResponse(CamelModel):
    data: list[ApprovalNotificationResponse]
    unread_count: int


# ---------------------------------------------------------------------------
# Moderation dashboard
# ---------------------------------------------------------------------------


class TrendMetricResponse(CamelModel):
    value: int
    previous_value: int
    change: Decimal  # percentage, two decimals
    change_type: str  # INCREASE, DECREASE or NEUTRAL


class StatusCountResponse(CamelModel):
    status: str
    count: int
    percentage: Decimal


class DailyActivityResponse(CamelModel):
    new_listings: int
    approvals: int
    rejections: int


class RecentReviewResponse(CamelModel):
    id: uuid.UUID
    property_id: uuid.UUID
    property_title: str
    action: str
    previous_status: str | None = None
    new_status: str
    admin_name: str | None = None
    created_at: datetime


class MonthlyTrendResponse(CamelModel):
    year: int
    month: int
    new_listings: int
    approvals: int
    rejections: int


class CityCountResponse(CamelModel):
    city: str
    state: str | None = None
    count: int


class ApprovalStatsResponse(CamelModel):
    """Moderation dashboard snapshot."""

    total_properties: TrendMetricResponse
    pending_approvals: TrendMetricResponse
    active_listings: TrendMetricResponse
    today: DailyActivityResponse
    status_distribution: list[StatusCountResponse]
    recent_activity: list[RecentReviewResponse]
    monthly_trends: list[MonthlyTrendResponse]
    top_cities: list[CityCountResponse]
