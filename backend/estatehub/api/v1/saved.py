"""Saved-property bookmarks API."""

import uuid

from fastapi import APIRouter, Depends, Query, status

from estatehub.api.deps import get_current_user, get_saved_service
from estatehub.errors import NotFoundError
from estatehub.models.user import PlatformUser
from estatehub.schemas.common import MessageResponse
from estatehub.schemas.saved import SavedPropertyListResponse, SavedPropertyResponse, SavePropertyRequest
from estatehub.services.saved_service import SavedPropertyService

router = APIRouter(prefix="/api/v1/saved-properties", tags=["saved-properties"])


@router.get("", response_model=SavedPropertyListResponse, summary="List my saved properties")
async def list_saved_properties(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: PlatformUser = Depends(get_current_user),
    service: SavedPropertyService = Depends(get_saved_service),
) -> SavedPropertyListResponse:
    items, total = await service.list_saved(user.id, limit=limit, offset=offset)
    return SavedPropertyListResponse(data=[SavedPropertyResponse.model_validate(i) for i in items], total=total)


@router.post(
    "/{property_id}",
    response_model=SavedPropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a property",
)
async def save_property(
    property_id: uuid.UUID,
    body: SavePropertyRequest | None = None,
    user: PlatformUser = Depends(get_current_user),
    service: SavedPropertyService = Depends(get_saved_service),
) -> SavedPropertyResponse:
    body = body or SavePropertyRequest()
    saved = await service.save_property(user.id, property_id, category=body.category, notes=body.notes)
    return SavedPropertyResponse.model_validate(saved)


@router.delete("/{property_id}", response_model=MessageResponse, summary="Remove a saved property")
async def unsave_property(
    property_id: uuid.UUID,
    user: PlatformUser = Depends(get_current_user),
    service: SavedPropertyService = Depends(get_saved_service),
) -> MessageResponse:
    if not await service.unsave_property(user.id, property_id):
        raise NotFoundError("Saved property not found")
    return MessageResponse(message="Property removed from saved list")
