"""API request and response schemas."""

from gestao_milhas.api.schemas.cedentes import CedenteEnvelope, CedenteResponse
from gestao_milhas.api.schemas.compras import (
    CommissionResponse,
    PurchaseEnvelope,
    PurchaseResponse,
    ReleasePurchaseRequest,
    ReleasePurchaseResponse,
)

__all__ = [
    "CedenteEnvelope",
    "CedenteResponse",
    "CommissionResponse",
    "PurchaseEnvelope",
    "PurchaseResponse",
    "ReleasePurchaseRequest",
    "ReleasePurchaseResponse",
]
