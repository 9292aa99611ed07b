"""Purchase and purchase item persistence operations."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from gestao_milhas.db.models.purchase import (
    Purchase,
    PurchaseStatus,
    applied_attribute,
    predicted_attribute,
)
from gestao_milhas.db.models.purchase_item import PurchaseItem, PurchaseItemStatus
from gestao_milhas.domain.programs import LEGACY_PROGRAMS, LoyaltyProgram


class PurchaseRepository:
    """Repository for purchases, their items and release state changes."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, purchase_id: UUID) -> Purchase | None:
        """Fetch one purchase with its cedente, bypassing stale identity map."""

        statement = (
            select(Purchase)
            .where(Purchase.id == purchase_id)
            .options(selectinload(Purchase.cedente))
            .execution_options(populate_existing=True)
        )
        return self._session.scalar(statement)

    def get_for_update(self, purchase_id: UUID) -> Purchase | None:
        """Fetch and lock one purchase with cedente and items from a fresh read."""

        statement = (
            select(Purchase)
            .where(Purchase.id == purchase_id)
            .options(
                selectinload(Purchase.cedente),
                selectinload(Purchase.items),
            )
            .execution_options(populate_existing=True)
            .with_for_update(of=Purchase)
        )
        return self._session.scalar(statement)

    def get_detail(self, purchase_id: UUID) -> Purchase | None:
        """Fetch one purchase with every relationship used by API responses."""

        statement = (
            select(Purchase)
            .where(Purchase.id == purchase_id)
            .options(
                selectinload(Purchase.cedente),
                selectinload(Purchase.items),
                selectinload(Purchase.released_by),
            )
            .execution_options(populate_existing=True)
        )
        return self._session.scalar(statement)

    def set_predicted_balances(
        self,
        purchase: Purchase,
        predicted: Mapping[LoyaltyProgram, int],
    ) -> Purchase:
        for program in LEGACY_PROGRAMS:
            if program in predicted:
                setattr(purchase, predicted_attribute(program), predicted[program])
        self._session.flush()
        return purchase

    def release_pending_items(self, purchase_id: UUID) -> int:
        """Move every pending item of a purchase to released."""

        statement = (
            update(PurchaseItem)
            .where(
                PurchaseItem.purchase_id == purchase_id,
                PurchaseItem.status == PurchaseItemStatus.PENDING,
            )
            .values(status=PurchaseItemStatus.RELEASED)
        )
        result = self._session.execute(statement)
        return int(result.rowcount or 0)

    def close_if_open(
        self,
        *,
        purchase_id: UUID,
        released_by_id: UUID,
        released_at: datetime,
        applied: Mapping[LoyaltyProgram, int],
    ) -> bool:
        """Close an open purchase; return False when it was no longer open."""

        values: dict[str, object] = {
            "status": PurchaseStatus.CLOSED,
            "released_at": released_at,
            "released_by_id": released_by_id,
        }
        for program in LEGACY_PROGRAMS:
            values[applied_attribute(program)] = applied[program]

        statement = (
            update(Purchase)
            .where(
                Purchase.id == purchase_id,
                Purchase.status == PurchaseStatus.OPEN,
            )
            .values(**values)
        )
        result = self._session.execute(statement)
        return result.rowcount == 1
