"""Cedente persistence operations."""

from __future__ import annotations

from collections.abc import Mapping
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from gestao_milhas.db.models.cedente import Cedente, points_attribute
from gestao_milhas.domain.programs import ALL_PROGRAMS, LoyaltyProgram, clamp_points


class CedenteRepository:
    """Repository for cedentes and their program balances."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, cedente_id: UUID) -> Cedente | None:
        statement = (
            select(Cedente)
            .where(Cedente.id == cedente_id)
            .execution_options(populate_existing=True)
        )
        return self._session.scalar(statement)

    def set_balances(
        self,
        cedente_id: UUID,
        balances: Mapping[LoyaltyProgram, int],
    ) -> None:
        """Write all program balances of one cedente in a single statement."""

        values = {
            points_attribute(program): clamp_points(balances[program])
            for program in ALL_PROGRAMS
        }
        statement = update(Cedente).where(Cedente.id == cedente_id).values(**values)
        self._session.execute(statement)
