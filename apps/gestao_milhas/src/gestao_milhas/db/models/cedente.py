"""Cedente ORM model with one point counter per loyalty program."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from gestao_milhas.db.base import Base
from gestao_milhas.domain.programs import ALL_PROGRAMS, LoyaltyProgram, clamp_points


def points_attribute(program: LoyaltyProgram) -> str:
    """Name of the cedente attribute holding the balance of a program."""

    return f"points_{program.column_suffix}"


class Cedente(Base):
    """Points-account holder whose program balances are managed."""

    __tablename__ = "cedentes"
    __table_args__ = tuple(
        CheckConstraint(
            f"{points_attribute(program)} >= 0",
            name=f"ck_cedentes_{points_attribute(program)}_non_negative",
        )
        for program in ALL_PROGRAMS
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    full_name: Mapped[str] = mapped_column(String(160), nullable=False)
    document_id: Mapped[str] = mapped_column(String(14), nullable=False, unique=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

    points_latam: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_smiles: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_livelo: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_esfera: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_azul: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_iberia: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_aa: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_tap: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_flying_blue: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
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

    def balances(self) -> dict[LoyaltyProgram, int]:
        """Current balance of every program, clamped to non-negative."""

        return {
            program: clamp_points(getattr(self, points_attribute(program)))
            for program in ALL_PROGRAMS
        }
