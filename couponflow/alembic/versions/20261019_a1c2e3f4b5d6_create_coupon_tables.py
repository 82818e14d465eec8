"""create coupons, coupon_events, sms_templates and profiles tables

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "a1c2e3f4b5d6"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "coupons",
        sa.Column("code", sa.String(length=8), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("customer_phone", sa.String(length=32), nullable=False),
        sa.Column("discount_type", sa.String(length=20), nullable=False),
        sa.Column("discount_custom_text", sa.Text(), nullable=True),
        sa.Column("headcount_type", sa.String(length=20), nullable=False),
        sa.Column("headcount_custom_text", sa.Text(), nullable=True),
        sa.Column("issued_branch_code", sa.String(length=10), nullable=False),
        sa.Column(
            "issued_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.Column("verified_branch_code", sa.String(length=10), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verify_attempt_count", sa.Integer(), nullable=False),
        sa.Column("last_verify_attempt_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('ISSUED', 'VERIFIED', 'VOID')", name="ck_coupons_status"
        ),
        sa.CheckConstraint("verify_attempt_count >= 0", name="ck_coupons_attempt_count"),
        sa.PrimaryKeyConstraint("code"),
    )
    op.create_index("ix_coupons_issued_at", "coupons", ["issued_at"])
    op.create_index("ix_coupons_customer_phone", "coupons", ["customer_phone"])
    op.create_index("ix_coupons_issued_branch_code", "coupons", ["issued_branch_code"])

    op.create_table(
        "coupon_events",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("coupon_code", sa.String(length=64), nullable=False),
        sa.Column("event_type", sa.String(length=20), nullable=False),
        sa.Column("branch_code", sa.String(length=10), nullable=True),
        sa.Column("meta", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_coupon_events_coupon_code", "coupon_events", ["coupon_code"])
    op.create_index("ix_coupon_events_event_type", "coupon_events", ["event_type"])

    op.create_table(
        "sms_templates",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sms_templates_type", "sms_templates", ["type"])
    op.create_index(
        "uq_sms_templates_default_per_type",
        "sms_templates",
        ["type"],
        unique=True,
        sqlite_where=sa.text("is_default = 1"),
        postgresql_where=sa.text("is_default"),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("branch_code", sa.String(length=10), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_table("profiles")
    op.drop_index("uq_sms_templates_default_per_type", table_name="sms_templates")
    op.drop_index("ix_sms_templates_type", table_name="sms_templates")
    op.drop_table("sms_templates")
    op.drop_index("ix_coupon_events_event_type", table_name="coupon_events")
    op.drop_index("ix_coupon_events_coupon_code", table_name="coupon_events")
    op.drop_table("coupon_events")
    op.drop_index("ix_coupons_issued_branch_code", table_name="coupons")
    op.drop_index("ix_coupons_customer_phone", table_name="coupons")
    op.drop_index("ix_coupons_issued_at", table_name="coupons")
    op.drop_table("coupons")
