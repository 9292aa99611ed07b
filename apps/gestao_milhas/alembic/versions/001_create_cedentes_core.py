"""Create users, cedentes, purchases, purchase items and commissions.

Revision ID: 001_create_cedentes_core
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_create_cedentes_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


user_role_enum = sa.Enum("admin", "staff", name="user_role")
purchase_status_enum = sa.Enum("OPEN", "CLOSED", name="purchase_status")
purchase_item_status_enum = sa.Enum(
    "PENDING", "RELEASED", "CANCELED", name="purchase_item_status"
)
commission_status_enum = sa.Enum(
    "PENDING", "PAID", "CANCELED", name="commission_status"
)

POINT_COLUMNS = (
    "points_latam",
    "points_smiles",
    "points_livelo",
    "points_esfera",
    "points_azul",
    "points_iberia",
    "points_aa",
    "points_tap",
    "points_flying_blue",
)
LEGACY_SUFFIXES = ("latam", "smiles", "livelo", "esfera")


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("login", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=True),
        sa.Column("team", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("role", user_role_enum, nullable=False, server_default="staff"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("login", name="uq_users_login"),
    )

    op.create_table(
        "cedentes",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("full_name", sa.String(length=160), nullable=False),
        sa.Column("document_id", sa.String(length=14), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=True),
        *(
            sa.Column(column, sa.Integer(), nullable=False, server_default="0")
            for column in POINT_COLUMNS
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        *(
            sa.CheckConstraint(
                f"{column} >= 0", name=f"ck_cedentes_{column}_non_negative"
            )
            for column in POINT_COLUMNS
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("document_id", name="uq_cedentes_document_id"),
    )

    op.create_table(
        "purchases",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("cedente_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "status", purchase_status_enum, nullable=False, server_default="OPEN"
        ),
        *(
            sa.Column(f"predicted_balance_{suffix}", sa.Integer(), nullable=True)
            for suffix in LEGACY_SUFFIXES
        ),
        *(
            sa.Column(f"applied_balance_{suffix}", sa.Integer(), nullable=True)
            for suffix in LEGACY_SUFFIXES
        ),
        sa.Column(
            "cedente_pay_cents", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column("released_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("released_by_id", postgresql.UUID(as_uuid=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["cedente_id"], ["cedentes.id"]),
        sa.ForeignKeyConstraint(["released_by_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_purchases_cedente_id", "purchases", ["cedente_id"])
    op.create_index("ix_purchases_status", "purchases", ["status"])

    op.create_table(
        "purchase_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("purchase_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=160), nullable=True),
        sa.Column("program_from", sa.String(length=32), nullable=True),
        sa.Column("program_to", sa.String(length=32), nullable=True),
        sa.Column("points_final", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "points_debited_from_origin",
            sa.Integer(),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "status",
            purchase_item_status_enum,
            nullable=False,
            server_default="PENDING",
        ),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(
            ["purchase_id"], ["purchases.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_purchase_items_purchase_status",
        "purchase_items",
        ["purchase_id", "status"],
    )

    op.create_table(
        "cedente_commissions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("cedente_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("purchase_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column(
            "status", commission_status_enum, nullable=False, server_default="PENDING"
        ),
        sa.Column("generated_by_id", postgresql.UUID(as_uuid=True), nullable=True),
        _timestamp("generated_at"),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_by_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.CheckConstraint(
            "amount_cents >= 0", name="ck_cedente_commissions_amount_non_negative"
        ),
        sa.ForeignKeyConstraint(["cedente_id"], ["cedentes.id"]),
        sa.ForeignKeyConstraint(["purchase_id"], ["purchases.id"]),
        sa.ForeignKeyConstraint(["generated_by_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["paid_by_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "purchase_id", name="uq_cedente_commissions_purchase_id"
        ),
    )


def downgrade() -> None:
    op.drop_table("cedente_commissions")
    op.drop_index("ix_purchase_items_purchase_status", table_name="purchase_items")
    op.drop_table("purchase_items")
    op.drop_index("ix_purchases_status", table_name="purchases")
    op.drop_index("ix_purchases_cedente_id", table_name="purchases")
    op.drop_table("purchases")
    op.drop_table("cedentes")
    op.drop_table("users")

    bind = op.get_bind()
    commission_status_enum.drop(bind, checkfirst=True)
    purchase_item_status_enum.drop(bind, checkfirst=True)
    purchase_status_enum.drop(bind, checkfirst=True)
    user_role_enum.drop(bind, checkfirst=True)
