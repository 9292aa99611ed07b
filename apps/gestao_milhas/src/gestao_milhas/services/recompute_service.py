"""Reconciliation of predicted balances from the current purchase items."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol
from uuid import UUID

from gestao_milhas.db.models.purchase import Purchase, PurchaseStatus
from gestao_milhas.domain.deltas import compute_program_deltas
from gestao_milhas.domain.programs import LEGACY_PROGRAMS, LoyaltyProgram, clamp_points

logger = logging.getLogger(__name__)


class SessionProtocol(Protocol):
    """Subset of SQLAlchemy session APIs used by this service."""

    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class PurchaseRepositoryProtocol(Protocol):
    """Purchase repository contract consumed by recompute."""

    def get_for_update(self, purchase_id: UUID) -> Purchase | None: ...

    def set_predicted_balances(
        self,
        purchase: Purchase,
        predicted: Mapping[LoyaltyProgram, int],
    ) -> Purchase: ...


class PurchaseRecomputeService:
    """Keeps the predicted legacy balances of open purchases up to date."""

    def __init__(
        self,
        *,
        purchase_repository: PurchaseRepositoryProtocol,
        session: SessionProtocol,
    ) -> None:
        self._purchase_repository = purchase_repository
        self._session = session

    def recompute_purchase(self, purchase_id: UUID) -> Purchase | None:
        """Recalculate predicted balances; closed or orphan purchases are skipped."""

        try:
            purchase = self._purchase_repository.get_for_update(purchase_id)
            if (
                purchase is None
                or purchase.status != PurchaseStatus.OPEN
                or purchase.cedente is None
            ):
                return purchase

            deltas = compute_program_deltas(purchase.items)
            current = purchase.cedente.balances()
            predicted = {
                program: clamp_points(current[program] + deltas[program])
                for program in LEGACY_PROGRAMS
            }
            self._purchase_repository.set_predicted_balances(purchase, predicted)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info(
            "purchase_recomputed",
            extra={
                "purchase_id": str(purchase_id),
                "predicted": {str(program): value for program, value in predicted.items()},
            },
        )
        return purchase
