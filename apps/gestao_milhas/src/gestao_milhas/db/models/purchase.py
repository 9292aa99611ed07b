"""Purchase ORM model."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gestao_milhas.db.base import Base
from gestao_milhas.domain.programs import LEGACY_PROGRAMS, LoyaltyProgram

if TYPE_CHECKING:
    from gestao_milhas.db.models.cedente import Cedente
    from gestao_milhas.db.models.purchase_item import PurchaseItem
    from gestao_milhas.db.models.user import User


class PurchaseStatus(enum.StrEnum):
    """Purchase lifecycle states."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


def predicted_attribute(program: LoyaltyProgram) -> str:
    return f"predicted_balance_{program.column_suffix}"


def applied_attribute(program: LoyaltyProgram) -> str:
    return f"applied_balance_{program.column_suffix}"


class Purchase(Base):
    """Acquisition or conversion of points on behalf of a cedente."""

    __tablename__ = "purchases"
    __table_args__ = (
        Index("ix_purchases_cedente_id", "cedente_id"),
        Index("ix_purchases_status", "status"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    cedente_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("cedentes.id"),
        nullable=True,
    )
    status: Mapped[PurchaseStatus] = mapped_column(
        Enum(
            PurchaseStatus,
            name="purchase_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=PurchaseStatus.OPEN,
    )

    predicted_balance_latam: Mapped[int | None] = mapped_column(Integer, nullable=True)
    predicted_balance_smiles: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )
    predicted_balance_livelo: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )
    predicted_balance_esfera: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )

    applied_balance_latam: Mapped[int | None] = mapped_column(Integer, nullable=True)
    applied_balance_smiles: Mapped[int | None] = mapped_column(Integer, nullable=True)
    applied_balance_livelo: Mapped[int | None] = mapped_column(Integer, nullable=True)
    applied_balance_esfera: Mapped[int | None] = mapped_column(Integer, nullable=True)

    cedente_pay_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    released_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    released_by_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    cedente: Mapped[Cedente | None] = relationship("Cedente")
    released_by: Mapped[User | None] = relationship("User")
    items: Mapped[list[PurchaseItem]] = relationship(
        "PurchaseItem",
        back_populates="purchase",
        cascade="all, delete-orphan",
        order_by="PurchaseItem.created_at",
    )

    def predicted_balances(self) -> dict[LoyaltyProgram, int | None]:
        """Stored predicted balances of the legacy programs."""

        return {
            program: getattr(self, predicted_attribute(program))
            for program in LEGACY_PROGRAMS
        }

    def applied_balances(self) -> dict[LoyaltyProgram, int | None]:
        """Applied balances recorded when the purchase was released."""

        return {
            program: getattr(self, applied_attribute(program))
            for program in LEGACY_PROGRAMS
        }
