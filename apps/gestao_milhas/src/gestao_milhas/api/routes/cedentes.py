"""Cedente routes."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from gestao_milhas.api.dependencies import get_cedente_repository
from gestao_milhas.api.schemas.cedentes import CedenteEnvelope, CedenteResponse
from gestao_milhas.domain.errors import CedenteNotFoundError
from gestao_milhas.repositories.cedente_repository import CedenteRepository

router = APIRouter(prefix="/cedentes", tags=["Cedentes"])


@router.get(
    "/{cedente_id}",
    response_model=CedenteEnvelope,
    responses={
        400: {"description": "Identificador invalido"},
        404: {"description": "Cedente nao encontrado"},
    },
)
def get_cedente(
    cedente_id: UUID,
    cedente_repository: Annotated[CedenteRepository, Depends(get_cedente_repository)],
) -> CedenteEnvelope:
    """Return one cedente with the balance of every program."""

    cedente = cedente_repository.get(cedente_id)
    if cedente is None:
        raise CedenteNotFoundError(details={"cedente_id": str(cedente_id)})
    return CedenteEnvelope(data=CedenteResponse.from_model(cedente))
