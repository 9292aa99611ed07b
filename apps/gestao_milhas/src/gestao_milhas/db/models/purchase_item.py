"""Purchase line item ORM model."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gestao_milhas.db.base import Base

if TYPE_CHECKING:
    from gestao_milhas.db.models.purchase import Purchase


class PurchaseItemStatus(enum.StrEnum):
    """Line item states."""

    PENDING = "PENDING"
    RELEASED = "RELEASED"
    CANCELED = "CANCELED"


class PurchaseItem(Base):
    """Movement of points between two programs inside a purchase."""

    __tablename__ = "purchase_items"
    __table_args__ = (Index("ix_purchase_items_purchase_status", "purchase_id", "status"),)

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    purchase_id: Mapped[UUID] = mapped_column(
        ForeignKey("purchases.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str | None] = mapped_column(String(160), nullable=True)
    program_from: Mapped[str | None] = mapped_column(String(32), nullable=True)
    program_to: Mapped[str | None] = mapped_column(String(32), nullable=True)
    points_final: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_debited_from_origin: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    status: Mapped[PurchaseItemStatus] = mapped_column(
        Enum(
            PurchaseItemStatus,
            name="purchase_item_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=PurchaseItemStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    purchase: Mapped[Purchase] = relationship("Purchase", back_populates="items")
