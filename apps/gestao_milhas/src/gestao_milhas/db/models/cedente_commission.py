"""Cedente commission ORM model."""

from __future__ import annotations

import enum
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from gestao_milhas.db.base import Base


class CommissionStatus(enum.StrEnum):
    """Commission payment states."""

    PENDING = "PENDING"
    PAID = "PAID"
    CANCELED = "CANCELED"


class CedenteCommission(Base):
    """Amount owed to a cedente for one released purchase."""

    __tablename__ = "cedente_commissions"
    __table_args__ = (
        UniqueConstraint("purchase_id", name="uq_cedente_commissions_purchase_id"),
        CheckConstraint(
            "amount_cents >= 0",
            name="ck_cedente_commissions_amount_non_negative",
        ),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    cedente_id: Mapped[UUID] = mapped_column(
        ForeignKey("cedentes.id"),
        nullable=False,
    )
    purchase_id: Mapped[UUID] = mapped_column(
        ForeignKey("purchases.id"),
        nullable=False,
    )
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[CommissionStatus] = mapped_column(
        Enum(
            CommissionStatus,
            name="commission_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=CommissionStatus.PENDING,
    )
    generated_by_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id"),
        nullable=True,
    )
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    paid_by_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id"),
        nullable=True,
    )
