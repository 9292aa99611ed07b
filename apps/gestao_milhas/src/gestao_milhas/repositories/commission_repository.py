"""Cedente commission persistence operations."""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from gestao_milhas.db.models.cedente_commission import (
    CedenteCommission,
    CommissionStatus,
)

_INSERT_BY_DIALECT: dict[str, Any] = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class CommissionRepository:
    """Repository for commissions, unique per purchase."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_purchase(self, purchase_id: UUID) -> CedenteCommission | None:
        statement = (
            select(CedenteCommission)
            .where(CedenteCommission.purchase_id == purchase_id)
            .execution_options(populate_existing=True)
        )
        return self._session.scalar(statement)

    def upsert_pending_for_purchase(
        self,
        *,
        cedente_id: UUID,
        purchase_id: UUID,
        amount_cents: int,
        generated_by_id: UUID,
    ) -> CedenteCommission:
        """Create or reset the pending commission of a purchase atomically."""

        dialect_name = self._session.get_bind().dialect.name
        insert_factory = _INSERT_BY_DIALECT.get(dialect_name)
        if insert_factory is None:
            msg = f"Commission upsert is not supported on dialect {dialect_name!r}."
            raise RuntimeError(msg)

        statement = insert_factory(CedenteCommission).values(
            id=uuid4(),
            cedente_id=cedente_id,
            purchase_id=purchase_id,
            amount_cents=amount_cents,
            status=CommissionStatus.PENDING,
            generated_by_id=generated_by_id,
        )
        statement = statement.on_conflict_do_update(
            index_elements=[CedenteCommission.purchase_id],
            set_={
                "amount_cents": statement.excluded.amount_cents,
                "status": CommissionStatus.PENDING,
                "generated_by_id": statement.excluded.generated_by_id,
                "paid_at": None,
                "paid_by_id": None,
            },
        )
        self._session.execute(statement)

        commission = self.get_by_purchase(purchase_id)
        if commission is None:
            msg = "Failed to load commission after upsert."
            raise RuntimeError(msg)
        return commission
