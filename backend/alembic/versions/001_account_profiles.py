"""
============================================================
CRC CARD: 001_account_profiles (Alembic migration)
============================================================
Responsibilities:
  - Create the profile table (base_user_info).
  - Create the identity projection tables (member_*).
  - Enforce non-empty nickname uniqueness with a partial unique index.

Policy:
  - Baseline migration. Downgrade drops everything it created.
  - Naming convention:
      pk_<table>, uq_<table>_<col>, ix_<table>_<col>, fk_<table>_<col>__<ref>
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_account_profiles"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # =========================================================
    # 1) PROFILE
    # =========================================================
    op.create_table(
        "base_user_info",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("account_id", sa.Integer, nullable=False),
        sa.Column("nickname", sa.String(50), nullable=False, server_default=""),
        sa.Column("gender", sa.String(10), nullable=False, server_default="SECRET"),
        sa.Column("birth_date", sa.Date, nullable=True),
        sa.Column("avatar_url", sa.String(255), nullable=True),
        sa.Column("email", sa.String(50), nullable=True),
        sa.Column("signature", sa.String(100), nullable=True),
        sa.Column(
            "access_group",
            postgresql.ARRAY(sa.String(20)),
            nullable=False,
            server_default=sa.text("ARRAY['REGISTRANT']::varchar[]"),
        ),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("tags", postgresql.JSONB, nullable=True),
        sa.Column("geographic", postgresql.JSONB, nullable=True),
        sa.Column("notify_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("unread_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("user_state", sa.String(16), nullable=False, server_default="PENDING"),
        *_timestamps(),
        sa.UniqueConstraint("account_id", name="uq_base_user_info_account_id"),
        sa.CheckConstraint("notify_count >= 0", name="ck_base_user_info_notify_count"),
        sa.CheckConstraint("unread_count >= 0", name="ck_base_user_info_unread_count"),
    )
    # Empty nicknames never collide
    op.create_index(
        "uq_base_user_info_nickname",
        "base_user_info",
        ["nickname"],
        unique=True,
        postgresql_where=sa.text("nickname <> ''"),
    )

    # =========================================================
    # 2) IDENTITY PROJECTIONS
    # =========================================================
    op.create_table(
        "member_managers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("account_id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("job_title", sa.String(64), nullable=True),
        sa.Column("department_id", sa.Integer, nullable=True),
        sa.Column("deactivated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("account_id", name="uq_member_managers_account_id"),
    )

    op.create_table(
        "member_coaches",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("account_id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("level", sa.Integer, nullable=False, server_default="1"),
        sa.Column("specialty", sa.String(100), nullable=True),
        sa.Column("deactivated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("account_id", name="uq_member_coaches_account_id"),
    )

    op.create_table(
        "member_customers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("account_id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("contact_phone", sa.String(20), nullable=True),
        sa.Column("membership_level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("remaining_sessions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("deactivated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("account_id", name="uq_member_customers_account_id"),
    )

    op.create_table(
        "member_learners",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("account_id", sa.Integer, nullable=True),
        sa.Column(
            "customer_id",
            sa.Integer,
            sa.ForeignKey(
                "member_customers.id",
                name="fk_member_learners_customer_id__member_customers",
            ),
            nullable=False,
        ),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("gender", sa.String(10), nullable=False, server_default="SECRET"),
        sa.Column("birth_date", sa.Date, nullable=True),
        sa.Column("deactivated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("account_id", name="uq_member_learners_account_id"),
    )
    op.create_index(
        "ix_member_learners_customer_id", "member_learners", ["customer_id"]
    )

    op.create_table(
        "member_staff",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("account_id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("job_title", sa.String(64), nullable=True),
        sa.Column("department_id", sa.Integer, nullable=True),
        sa.Column("deactivated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("account_id", name="uq_member_staff_account_id"),
    )


def downgrade() -> None:
    op.drop_table("member_staff")
    op.drop_index("ix_member_learners_customer_id", table_name="member_learners")
    op.drop_table("member_learners")
    op.drop_table("member_customers")
    op.drop_table("member_coaches")
    op.drop_table("member_managers")
    op.drop_index("uq_base_user_info_nickname", table_name="base_user_info")
    op.drop_table("base_user_info")
