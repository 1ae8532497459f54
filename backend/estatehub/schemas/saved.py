"""Pydantic v2 schemas for saved-property bookmarks."""

import uuid
from datetime import datetime

from pydantic import Field

from estatehub.schemas.common import CamelModel


class SavePropertyRequest(CamelModel):
    category: str = Field("general", min_length=1, max_length=50)
    notes: str | None = None


class SavedPropertyResponse(CamelModel):
    id: uuid.UUID
    property_id: uuid.UUID
    category: str
    notes: str | None = None
    is_active: bool
    saved_at: datetime


class SavedPropertyListResponse(CamelModel):
    data: list[SavedPropertyResponse]
    total: int
