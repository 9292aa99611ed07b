"""Schemas for cedente endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

from gestao_milhas.db.models.cedente import Cedente


class CedenteResponse(BaseModel):
    """Serialized cedente with every program balance."""

    id: UUID
    full_name: str
    document_id: str
    phone: str | None
    points: dict[str, int]
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, cedente: Cedente) -> CedenteResponse:
        return cls(
            id=cedente.id,
            full_name=cedente.full_name,
            document_id=cedente.document_id,
            phone=cedente.phone,
            points={
                str(program): value for program, value in cedente.balances().items()
            },
            created_at=cedente.created_at,
        )


class CedenteEnvelope(BaseModel):
    ok: Literal[True] = True
    data: CedenteResponse
