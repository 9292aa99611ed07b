"""Purchase release: applies point deltas, closes the purchase, pays commission."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from gestao_milhas.db.models.cedente_commission import CedenteCommission
from gestao_milhas.db.models.purchase import Purchase, PurchaseStatus
from gestao_milhas.domain.balance_policy import resolve_applied_balances
from gestao_milhas.domain.deltas import compute_program_deltas
from gestao_milhas.domain.errors import (
    DomainError,
    InvalidPurchaseStateError,
    PurchaseNotFoundError,
    PurchaseReleaseFailedError,
    compose_error_message,
)
from gestao_milhas.domain.programs import LoyaltyProgram, clamp_points

logger = logging.getLogger(__name__)


class SessionProtocol(Protocol):
    """Subset of SQLAlchemy session APIs used by this service."""

    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class PurchaseRepositoryProtocol(Protocol):
    """Purchase repository contract consumed by release."""

    def get(self, purchase_id: UUID) -> Purchase | None: ...

    def get_for_update(self, purchase_id: UUID) -> Purchase | None: ...

    def get_detail(self, purchase_id: UUID) -> Purchase | None: ...

    def release_pending_items(self, purchase_id: UUID) -> int: ...

    def close_if_open(
        self,
        *,
        purchase_id: UUID,
        released_by_id: UUID,
        released_at: datetime,
        applied: Mapping[LoyaltyProgram, int],
    ) -> bool: ...


class CedenteRepositoryProtocol(Protocol):
    """Cedente repository contract consumed by release."""

    def set_balances(
        self,
        cedente_id: UUID,
        balances: Mapping[LoyaltyProgram, int],
    ) -> None: ...


class CommissionRepositoryProtocol(Protocol):
    """Commission repository contract consumed by release."""

    def upsert_pending_for_purchase(
        self,
        *,
        cedente_id: UUID,
        purchase_id: UUID,
        amount_cents: int,
        generated_by_id: UUID,
    ) -> CedenteCommission: ...


class RecomputeProtocol(Protocol):
    """Collaborator that refreshes predicted balances before release."""

    def recompute_purchase(self, purchase_id: UUID) -> object: ...


@dataclass(slots=True, frozen=True)
class ReleaseResult:
    """Closed purchase and the commission generated for it, if any."""

    purchase: Purchase
    commission: CedenteCommission | None


def _not_open_error(purchase: Purchase) -> InvalidPurchaseStateError:
    return InvalidPurchaseStateError(
        message=compose_error_message(
            cause=f"Purchase is {purchase.status}; only OPEN purchases can be released.",
            action="Reload the purchase; it may have been released already.",
        ),
        details={"purchase_id": str(purchase.id), "status": str(purchase.status)},
    )


def _concurrent_release_error(purchase_id: UUID) -> InvalidPurchaseStateError:
    return InvalidPurchaseStateError(
        message=compose_error_message(
            cause="Purchase is no longer OPEN (possible double release).",
            action="Reload the purchase; it may have been released already.",
        ),
        details={"purchase_id": str(purchase_id)},
    )


def _missing_cedente_error(purchase: Purchase) -> InvalidPurchaseStateError:
    return InvalidPurchaseStateError(
        message=compose_error_message(
            cause="Purchase has no cedente.",
            action="Link the purchase to a cedente before releasing it.",
        ),
        details={"purchase_id": str(purchase.id)},
    )


class PurchaseReleaseService:
    """Releases open purchases in a single all-or-nothing transaction."""

    def __init__(
        self,
        *,
        purchase_repository: PurchaseRepositoryProtocol,
        cedente_repository: CedenteRepositoryProtocol,
        commission_repository: CommissionRepositoryProtocol,
        recompute_service: RecomputeProtocol,
        session: SessionProtocol,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._purchase_repository = purchase_repository
        self._cedente_repository = cedente_repository
        self._commission_repository = commission_repository
        self._recompute_service = recompute_service
        self._session = session
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    def release_purchase(
        self,
        purchase_id: UUID,
        released_by_id: UUID,
        overrides: Mapping[LoyaltyProgram, int] | None = None,
    ) -> ReleaseResult:
        """Apply the purchase to the cedente balances and close it.

        Status is validated before the recompute and again inside the
        release transaction, so a concurrent release makes this call fail
        with ``InvalidPurchaseStateError`` without writing anything.
        """

        try:
            self._validate_releasable(
                self._purchase_repository.get(purchase_id), purchase_id
            )
            self._recompute_service.recompute_purchase(purchase_id)
            self._validate_releasable(
                self._purchase_repository.get(purchase_id), purchase_id
            )

            result = self._release_in_transaction(
                purchase_id=purchase_id,
                released_by_id=released_by_id,
                overrides=overrides or {},
            )
            self._session.commit()
        except DomainError as exc:
            self._session.rollback()
            logger.warning(
                "purchase_release_rejected",
                extra={"purchase_id": str(purchase_id), "code": exc.code},
            )
            raise
        except Exception as exc:
            self._session.rollback()
            logger.exception(
                "purchase_release_failed",
                extra={"purchase_id": str(purchase_id)},
            )
            raise PurchaseReleaseFailedError(
                details={"detail": str(exc) or type(exc).__name__}
            ) from exc

        logger.info(
            "purchase_released",
            extra={
                "purchase_id": str(purchase_id),
                "released_by_id": str(released_by_id),
                "commission_id": str(result.commission.id)
                if result.commission
                else None,
            },
        )
        return result

    def _validate_releasable(
        self, purchase: Purchase | None, purchase_id: UUID
    ) -> Purchase:
        if purchase is None:
            raise PurchaseNotFoundError(details={"purchase_id": str(purchase_id)})
        if purchase.status != PurchaseStatus.OPEN:
            raise _not_open_error(purchase)
        if purchase.cedente is None:
            raise _missing_cedente_error(purchase)
        return purchase

    def _release_in_transaction(
        self,
        *,
        purchase_id: UUID,
        released_by_id: UUID,
        overrides: Mapping[LoyaltyProgram, int],
    ) -> ReleaseResult:
        purchase = self._validate_releasable(
            self._purchase_repository.get_for_update(purchase_id), purchase_id
        )
        cedente = purchase.cedente
        if cedente is None:
            raise _missing_cedente_error(purchase)

        deltas = compute_program_deltas(purchase.items)
        applied = resolve_applied_balances(
            current=cedente.balances(),
            deltas=deltas,
            overrides=overrides,
            predicted=purchase.predicted_balances(),
        )
        applied_values = {program: balance.value for program, balance in applied.items()}

        self._cedente_repository.set_balances(cedente.id, applied_values)
        self._purchase_repository.release_pending_items(purchase_id)
        closed = self._purchase_repository.close_if_open(
            purchase_id=purchase_id,
            released_by_id=released_by_id,
            released_at=self._clock(),
            applied=applied_values,
        )
        if not closed:
            raise _concurrent_release_error(purchase_id)

        commission: CedenteCommission | None = None
        amount_cents = clamp_points(purchase.cedente_pay_cents)
        if amount_cents > 0:
            commission = self._commission_repository.upsert_pending_for_purchase(
                cedente_id=cedente.id,
                purchase_id=purchase_id,
                amount_cents=amount_cents,
                generated_by_id=released_by_id,
            )
            logger.info(
                "commission_upserted",
                extra={
                    "purchase_id": str(purchase_id),
                    "commission_id": str(commission.id),
                    "amount_cents": amount_cents,
                },
            )

        closed_purchase = self._purchase_repository.get_detail(purchase_id)
        if closed_purchase is None:
            raise PurchaseNotFoundError(details={"purchase_id": str(purchase_id)})

        logger.debug(
            "applied_balances_resolved",
            extra={
                "purchase_id": str(purchase_id),
                "sources": {
                    str(program): str(balance.source)
                    for program, balance in applied.items()
                },
            },
        )
        return ReleaseResult(purchase=closed_purchase, commission=commission)
