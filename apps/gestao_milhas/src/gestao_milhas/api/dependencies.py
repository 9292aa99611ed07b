"""API dependency providers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from gestao_milhas.db.session import get_db_session
from gestao_milhas.repositories.cedente_repository import CedenteRepository
from gestao_milhas.repositories.commission_repository import CommissionRepository
from gestao_milhas.repositories.purchase_repository import PurchaseRepository
from gestao_milhas.services.recompute_service import PurchaseRecomputeService
from gestao_milhas.services.release_service import PurchaseReleaseService


def get_purchase_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> PurchaseRepository:
    """Build purchase repository with per-request session."""

    return PurchaseRepository(session)


def get_cedente_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> CedenteRepository:
    """Build cedente repository with per-request session."""

    return CedenteRepository(session)


def get_commission_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> CommissionRepository:
    """Build commission repository with per-request session."""

    return CommissionRepository(session)


def get_recompute_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> PurchaseRecomputeService:
    """Build recompute service with per-request session."""

    return PurchaseRecomputeService(
        purchase_repository=PurchaseRepository(session),
        session=session,
    )


def get_release_service(
    session: Annotated[Session, Depends(get_db_session)],
    recompute_service: Annotated[
        PurchaseRecomputeService, Depends(get_recompute_service)
    ],
) -> PurchaseReleaseService:
    """Build release service sharing one session across its repositories."""

    return PurchaseReleaseService(
        purchase_repository=PurchaseRepository(session),
        cedente_repository=CedenteRepository(session),
        commission_repository=CommissionRepository(session),
        recompute_service=recompute_service,
        session=session,
    )
