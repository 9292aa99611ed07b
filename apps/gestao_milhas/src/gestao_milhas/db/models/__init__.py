"""ORM models for the gestao_milhas domain."""

from gestao_milhas.db.models.cedente import Cedente
from gestao_milhas.db.models.cedente_commission import (
    CedenteCommission,
    CommissionStatus,
)
from gestao_milhas.db.models.purchase import Purchase, PurchaseStatus
from gestao_milhas.db.models.purchase_item import PurchaseItem, PurchaseItemStatus
from gestao_milhas.db.models.user import User, UserRole

__all__ = [
    "Cedente",
    "CedenteCommission",
    "CommissionStatus",
    "Purchase",
    "PurchaseItem",
    "PurchaseItemStatus",
    "PurchaseStatus",
    "User",
    "UserRole",
]
