"""SQLAlchemy models for EstateHub.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from estatehub.models.approval import PropertyApprovalHistory, PropertyApprovalNotification
from estatehub.models.property import Property, PropertyImage, PropertySeo, PropertyVerification
from estatehub.models.saved_property import SavedProperty
from estatehub.models.user import AdminUser, PlatformUser

__all__ = [
    "AdminUser",
    "PlatformUser",
    "Property",
    "PropertyApprovalHistory",
    "PropertyApprovalNotification",
    "PropertyImage",
    "PropertySeo",
    "PropertyVerification",
    "SavedProperty",
]
