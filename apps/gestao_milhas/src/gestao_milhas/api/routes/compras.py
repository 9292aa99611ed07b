"""Purchase (compra) routes."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends

from gestao_milhas.api.dependencies import (
    get_purchase_repository,
    get_release_service,
)
from gestao_milhas.api.schemas.compras import (
    CommissionResponse,
    PurchaseEnvelope,
    PurchaseResponse,
    ReleasePurchaseData,
    ReleasePurchaseRequest,
    ReleasePurchaseResponse,
)
from gestao_milhas.api.session import SessionUser, get_session_user
from gestao_milhas.domain.errors import PurchaseNotFoundError
from gestao_milhas.repositories.purchase_repository import PurchaseRepository
from gestao_milhas.services.release_service import PurchaseReleaseService

router = APIRouter(prefix="/compras", tags=["Compras"])


@router.get(
    "/{purchase_id}",
    response_model=PurchaseEnvelope,
    responses={
        400: {"description": "Identificador invalido"},
        404: {"description": "Compra nao encontrada"},
    },
)
def get_purchase(
    purchase_id: UUID,
    purchase_repository: Annotated[
        PurchaseRepository, Depends(get_purchase_repository)
    ],
) -> PurchaseEnvelope:
    """Return one purchase with items, cedente and release audit."""

    purchase = purchase_repository.get_detail(purchase_id)
    if purchase is None:
        raise PurchaseNotFoundError(details={"purchase_id": str(purchase_id)})
    return PurchaseEnvelope(data=PurchaseResponse.from_model(purchase))


@router.post(
    "/{purchase_id}/liberar",
    response_model=ReleasePurchaseResponse,
    responses={
        400: {"description": "Sessao invalida, payload invalido ou compra nao OPEN"},
        404: {"description": "Compra nao encontrada"},
        500: {"description": "Falha ao liberar compra"},
    },
)
def release_purchase(
    purchase_id: UUID,
    session_user: Annotated[SessionUser, Depends(get_session_user)],
    service: Annotated[PurchaseReleaseService, Depends(get_release_service)],
    payload: Annotated[ReleasePurchaseRequest | None, Body()] = None,
) -> ReleasePurchaseResponse:
    """Apply the purchase to the cedente balances, close it and pay commission."""

    result = service.release_purchase(
        purchase_id,
        session_user.id,
        payload.to_overrides() if payload else None,
    )
    return ReleasePurchaseResponse(
        data=ReleasePurchaseData(
            compra=PurchaseResponse.from_model(result.purchase),
            commission=CommissionResponse.from_model(result.commission)
            if result.commission
            else None,
        )
    )
