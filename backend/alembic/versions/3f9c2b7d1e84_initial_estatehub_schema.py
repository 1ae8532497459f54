"""initial_estatehub_schema

Revision ID: 3f9c2b7d1e84
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2b7d1e84'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Accounts
    op.create_table(
        "admin_users",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_admin_users_email", "admin_users", ["email"], unique=True)

    op.create_table(
        "platform_users",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("role", sa.String(10), nullable=False, server_default="USER"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_platform_users_email", "platform_users", ["email"], unique=True)

    # Listings
    op.create_table(
        "properties",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("property_type", sa.String(30), nullable=False),
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("price_per_unit", sa.Numeric(14, 2), nullable=True),
        sa.Column("area", sa.Numeric(12, 2), nullable=False),
        sa.Column("area_unit", sa.String(20), nullable=False),
        sa.Column("khasra_number", sa.String(100), nullable=True),
        sa.Column("murabba_number", sa.String(100), nullable=True),
        sa.Column("khewat_number", sa.String(100), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("district", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("country", sa.String(100), nullable=True, server_default="India"),
        sa.Column("pin_code", sa.String(10), nullable=True),
        sa.Column("location", sa.JSON(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("boundary", sa.JSON(), nullable=True),
        sa.Column("geo_json", sa.JSON(), nullable=True),
        sa.Column("calculated_area", sa.Numeric(14, 2), nullable=True),
        sa.Column("listing_as", sa.String(10), nullable=True, server_default="OWNER"),
        sa.Column("owner_name", sa.String(255), nullable=True),
        sa.Column("owner_phone", sa.String(20), nullable=True),
        sa.Column("owner_whatsapp", sa.String(20), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_by_type", sa.String(10), nullable=False),
        sa.Column("created_by_admin_id", sa.UUID(), sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True),
        sa.Column(
            "created_by_user_id", sa.UUID(), sa.ForeignKey("platform_users.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("approval_status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("approval_message", sa.Text(), nullable=True),
        sa.Column("approved_by", sa.UUID(), sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("rejected_by", sa.UUID(), sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("rejected_at", sa.DateTime(), nullable=True),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("last_reviewed_by", sa.UUID(), sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("last_reviewed_at", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_properties_city", "properties", ["city"])
    op.create_index("ix_properties_state", "properties", ["state"])
    op.create_index("ix_properties_approval_status", "properties", ["approval_status"])
    op.create_index("ix_properties_created_by_admin_id", "properties", ["created_by_admin_id"])
    op.create_index("ix_properties_created_by_user_id", "properties", ["created_by_user_id"])

    op.create_table(
        "property_seo",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("property_id", sa.UUID(), sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        sa.Column("seo_title", sa.String(255), nullable=True),
        sa.Column("seo_description", sa.Text(), nullable=True),
        sa.Column("seo_keywords", sa.Text(), nullable=True),
        sa.Column("schema", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_property_seo_property_id", "property_seo", ["property_id"], unique=True)

    op.create_table(
        "property_verification",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("property_id", sa.UUID(), sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verification_message", sa.Text(), nullable=True),
        sa.Column("verification_notes", sa.Text(), nullable=True),
        sa.Column("verified_by", sa.UUID(), sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("verified_at", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_property_verification_property_id", "property_verification", ["property_id"], unique=True)

    op.create_table(
        "property_images",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("property_id", sa.UUID(), sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("image_type", sa.String(50), nullable=True, server_default="general"),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("alt_text", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_main", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("variants", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_property_images_property_id", "property_images", ["property_id"])

    # Approval audit trail and owner notifications
    op.create_table(
        "property_approval_history",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("property_id", sa.UUID(), sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("admin_id", sa.UUID(), sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("previous_status", sa.String(20), nullable=True),
        sa.Column("new_status", sa.String(20), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("is_system_action", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_property_approval_history_property_id", "property_approval_history", ["property_id"])
    op.create_index("ix_property_approval_history_admin_id", "property_approval_history", ["admin_id"])
    op.create_index("ix_property_approval_history_created_at", "property_approval_history", ["created_at"])

    op.create_table(
        "property_approval_notifications",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("property_id", sa.UUID(), sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("platform_users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("admin_id", sa.UUID(), sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(), nullable=True),
        sa.Column("priority", sa.String(20), nullable=False, server_default="normal"),
        sa.Column("category", sa.String(50), nullable=False, server_default="property_approval"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(
        "ix_property_approval_notifications_property_id", "property_approval_notifications", ["property_id"]
    )
    op.create_index("ix_property_approval_notifications_user_id", "property_approval_notifications", ["user_id"])
    op.create_index(
        "ix_property_approval_notifications_created_at", "property_approval_notifications", ["created_at"]
    )

    # Bookmarks
    op.create_table(
        "saved_properties",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("platform_users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("property_id", sa.UUID(), sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("category", sa.String(50), nullable=False, server_default="general"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("saved_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "property_id", name="uq_saved_properties_user_property"),
    )
    op.create_index("ix_saved_properties_user_id", "saved_properties", ["user_id"])
    op.create_index("ix_saved_properties_property_id", "saved_properties", ["property_id"])


def downgrade() -> None:
    op.drop_table("saved_properties")
    op.drop_table("property_approval_notifications")
    op.drop_table("property_approval_history")
    op.drop_table("property_images")
    op.drop_table("property_verification")
    op.drop_table("property_seo")
    op.drop_table("properties")
    op.drop_table("platform_users")
    op.drop_table("admin_users")
