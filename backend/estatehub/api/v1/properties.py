"""Property listing API: submission, public listings, map view, detail and SEO edits."""

import uuid

from fastapi import APIRouter, Depends, Query, status

from estatehub.api.deps import (
    Principal,
    get_current_admin,
    get_current_principal,
    get_current_user,
    get_optional_principal,
    get_optional_user,
    get_property_service,
    get_query_service,
)
from estatehub.config import settings
from estatehub.errors import NotFoundError, ValidationError
from estatehub.models.user import AdminUser, PlatformUser
from estatehub.schemas.property import (
    APPROVAL_STATUS_PATTERN,
    MapPropertiesResponse,
    MapPropertyItem,
    PaginatedProperties,
    PropertyCreate,
    PropertyListItem,
    PropertySeoResponse,
    PropertySeoUpdate,
)
from estatehub.services.property_service import Creator, PropertyService
from estatehub.services.query_service import Bounds, PropertyQueryService

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


@router.post(
    "",
    response_model=PropertyListItem,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a new property",
)
async def create_property(
    body: PropertyCreate,
    principal: Principal = Depends(get_current_principal),
    service: PropertyService = Depends(get_property_service),
    queries: PropertyQueryService = Depends(get_query_service),
) -> PropertyListItem:
    """Create a listing owned by the caller. It starts PENDING review."""
    creator = Creator(kind="ADMIN" if principal.is_admin else "USER", id=principal.id)
    prop = await service.create_property(body, creator)
    return PropertyListItem.model_validate(await queries.get_property(prop.id))


@router.get("", response_model=PaginatedProperties, summary="List approved properties")
async def list_properties(
    search_term: str | None = Query(None, alias="searchTerm", max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=100),
    service: PropertyQueryService = Depends(get_query_service),
) -> PaginatedProperties:
    result = await service.list_approved(page=page, limit=limit, search_term=search_term)
    return PaginatedProperties.model_validate(result)


@router.get("/top", response_model=list[PropertyListItem], summary="Most recent approved properties")
async def top_properties(
    limit: int = Query(6, ge=1, le=50),
    service: PropertyQueryService = Depends(get_query_service),
) -> list[PropertyListItem]:
    rows = await service.top_properties(limit)
    return [PropertyListItem.model_validate(row) for row in rows]


@router.get("/map", response_model=MapPropertiesResponse, summary="Approved properties for the map view")
async def map_properties(
    north: float | None = Query(None, ge=-90, le=90),
    south: float | None = Query(None, ge=-90, le=90),
    east: float | None = Query(None, ge=-180, le=180),
    west: float | None = Query(None, ge=-180, le=180),
    user: PlatformUser | None = Depends(get_optional_user),
    service: PropertyQueryService = Depends(get_query_service),
) -> MapPropertiesResponse:
    """Signed-in users additionally get a ``saved`` flag per listing."""
    sides = (north, south, east, west)
    bounds = None
    if any(side is not None for side in sides):
        if any(side is None for side in sides):
            raise ValidationError("north, south, east and west must be given together")
        if south > north:
            raise ValidationError("south must not exceed north")
        bounds = Bounds(north=north, south=south, east=east, west=west)

    rows = await service.map_properties(
        user_id=user.id if user else None,
        bounds=bounds,
        limit=settings.map_properties_limit,
    )
    return MapPropertiesResponse(data=[MapPropertyItem.model_validate(row) for row in rows], total=len(rows))


@router.get("/mine", response_model=PaginatedProperties, summary="The current user's submissions")
async def my_properties(
    approval_status: str | None = Query(None, alias="approvalStatus", pattern=APPROVAL_STATUS_PATTERN),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: PlatformUser = Depends(get_current_user),
    service: PropertyQueryService = Depends(get_query_service),
) -> PaginatedProperties:
    result = await service.list_user_properties(user.id, page=page, limit=limit, approval_status=approval_status)
    return PaginatedProperties.model_validate(result)


@router.get("/{property_id}", response_model=PropertyListItem, summary="Get a property by ID")
async def get_property(
    property_id: uuid.UUID,
    principal: Principal | None = Depends(get_optional_principal),
    service: PropertyQueryService = Depends(get_query_service),
) -> PropertyListItem:
    """Approved listings are public; others are visible to admins and their submitter only."""
    row = await service.get_property(property_id)
    prop = row.property
    if prop.approval_status != "APPROVED":
        is_submitter = principal is not None and not principal.is_admin and prop.created_by_user_id == principal.id
        if principal is None or not (principal.is_admin or is_submitter):
            raise NotFoundError("Property not found")
    return PropertyListItem.model_validate(row)


@router.patch("/{property_id}/seo", response_model=PropertySeoResponse, summary="Update a property's SEO metadata")
async def update_property_seo(
    property_id: uuid.UUID,
    body: PropertySeoUpdate,
    _admin: AdminUser = Depends(get_current_admin),
    service: PropertyService = Depends(get_property_service),
) -> PropertySeoResponse:
    seo = await service.update_seo(property_id, body)
    return PropertySeoResponse.model_validate(seo)
