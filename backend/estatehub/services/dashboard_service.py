"""Moderation dashboard: aggregate counts over listings and the approval audit trail."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select

from estatehub.database import utcnow
from estatehub.models.approval import PropertyApprovalHistory
from estatehub.models.property import Property
from estatehub.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

STATS_FAILURE = "load approval stats"
COMPARISON_WINDOW = timedelta(days=30)


@dataclass
class TrendMetric:
    """A current count next to the count for listings created in the last 30 days."""

    value: int
    previous_value: int
    change: Decimal
    change_type: str


@dataclass
class StatusCount:
    status: str
    count: int
    percentage: Decimal


@dataclass
class DailyActivity:
    new_listings: int
    approvals: int
    rejections: int


@dataclass
class RecentReview:
    id: uuid.UUID
    property_id: uuid.UUID
    property_title: str
    action: str
    previous_status: str | None
    new_status: str
    admin_name: str | None
    created_at: datetime


@dataclass
class MonthlyTrend:
    year: int
    month: int
    new_listings: int
    approvals: int
    rejections: int


@dataclass
class CityCount:
    city: str
    state: str | None
    count: int


@dataclass
class ApprovalStats:
    total_properties: TrendMetric
    pending_approvals: TrendMetric
    active_listings: TrendMetric
    today: DailyActivity
    status_distribution: list[StatusCount]
    recent_activity: list[RecentReview]
    monthly_trends: list[MonthlyTrend]
    top_cities: list[CityCount]


def percentage(part: int, whole: int) -> Decimal:
    if whole <= 0:
        return Decimal("0.00")
    return (Decimal(part * 100) / Decimal(whole)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def trend(value: int, previous_value: int) -> TrendMetric:
    """Percentage change from ``previous_value``; zero when there is nothing to compare against."""
    if previous_value > 0:
        change = (Decimal((value - previous_value) * 100) / Decimal(previous_value)).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
    else:
        change = Decimal("0.00")
    change_type = "INCREASE" if change > 0 else "DECREASE" if change < 0 else "NEUTRAL"
    return TrendMetric(value=value, previous_value=previous_value, change=change, change_type=change_type)


def month_starts(now: datetime, months: int) -> list[datetime]:
    """First instant of each of the last ``months`` calendar months, oldest first, plus next month's start."""
    year, month = now.year, now.month
    starts = []
    for _ in range(months):
        starts.append(datetime(year, month, 1))
        year, month = (year - 1, 12) if month == 1 else (year, month - 1)
    starts.reverse()
    last = starts[-1]
    starts.append(datetime(last.year + 1, 1, 1) if last.month == 12 else datetime(last.year, last.month + 1, 1))
    return starts


class ApprovalStatsService:
    def __init__(self, gateway: PersistenceGateway) -> None:
        self.gateway = gateway

    async def _count(self, stmt) -> int:
        return (await self.gateway.execute(stmt, STATS_FAILURE)).scalar_one()

    async def _property_metric(self, since: datetime, *predicates) -> TrendMetric:
        base = select(func.count()).select_from(Property).where(*predicates)
        current = await self._count(base)
        previous = await self._count(base.where(Property.created_at >= since))
        return trend(current, previous)

    async def _reviews_between(self, start: datetime, end: datetime, new_status: str) -> int:
        return await self._count(
            select(func.count())
            .select_from(PropertyApprovalHistory)
            .where(
                PropertyApprovalHistory.new_status == new_status,
                PropertyApprovalHistory.created_at >= start,
                PropertyApprovalHistory.created_at < end,
            )
        )

    async def _listings_between(self, start: datetime, end: datetime) -> int:
        return await self._count(
            select(func.count()).select_from(Property).where(Property.created_at >= start, Property.created_at < end)
        )

    async def get_approval_stats(
        self, recent_limit: int = 10, months: int = 6, city_limit: int = 5
    ) -> ApprovalStats:
        """Everything the moderation dashboard shows, computed at one point in time."""
        now = utcnow()
        since = now - COMPARISON_WINDOW

        total_properties = await self._property_metric(since)
        pending_approvals = await self._property_metric(since, Property.approval_status == "PENDING")
        active_listings = await self._property_metric(
            since, Property.approval_status == "APPROVED", Property.is_active.is_(True)
        )

        day_start = datetime(now.year, now.month, now.day)
        day_end = day_start + timedelta(days=1)
        today = DailyActivity(
            new_listings=await self._listings_between(day_start, day_end),
            approvals=await self._reviews_between(day_start, day_end, "APPROVED"),
            rejections=await self._reviews_between(day_start, day_end, "REJECTED"),
        )

        result = await self.gateway.execute(
            select(Property.approval_status, func.count())
            .group_by(Property.approval_status)
            .order_by(func.count().desc(), Property.approval_status),
            STATS_FAILURE,
        )
        status_rows = result.all()
        status_total = sum(count for _, count in status_rows)
        status_distribution = [
            StatusCount(status=status.upper(), count=count, percentage=percentage(count, status_total))
            for status, count in status_rows
        ]

        result = await self.gateway.execute(
            select(PropertyApprovalHistory, Property.title)
            .join(Property, Property.id == PropertyApprovalHistory.property_id)
            .order_by(PropertyApprovalHistory.created_at.desc(), PropertyApprovalHistory.id.desc())
            .limit(recent_limit),
            STATS_FAILURE,
        )
        recent_activity = [
            RecentReview(
                id=entry.id,
                property_id=entry.property_id,
                property_title=title,
                action=entry.action,
                previous_status=entry.previous_status,
                new_status=entry.new_status,
                admin_name=entry.admin.full_name if entry.admin else None,
                created_at=entry.created_at,
            )
            for entry, title in result.all()
        ]

        bounds = month_starts(now, months)
        monthly_trends = []
        for start, end in zip(bounds, bounds[1:]):
            monthly_trends.append(
                MonthlyTrend(
                    year=start.year,
                    month=start.month,
                    new_listings=await self._listings_between(start, end),
                    approvals=await self._reviews_between(start, end, "APPROVED"),
                    rejections=await self._reviews_between(start, end, "REJECTED"),
                )
            )

        result = await self.gateway.execute(
            select(Property.city, Property.state, func.count().label("listings"))
            .where(Property.approval_status == "APPROVED", Property.city.is_not(None))
            .group_by(Property.city, Property.state)
            .order_by(func.count().desc(), Property.city)
            .limit(city_limit),
            STATS_FAILURE,
        )
        top_cities = [CityCount(city=city, state=state, count=count) for city, state, count in result.all()]

        logger.debug(
            "Approval stats: %d listings, %d pending, %d reviews listed",
            total_properties.value,
            pending_approvals.value,
            len(recent_activity),
        )
        return ApprovalStats(
            total_properties=total_properties,
            pending_approvals=pending_approvals,
            active_listings=active_listings,
            today=today,
            status_distribution=status_distribution,
            recent_activity=recent_activity,
            monthly_trends=monthly_trends,
            top_cities=top_cities,
        )
