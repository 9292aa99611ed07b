from __future__ import annotations

from collections.abc import Mapping
from types import SimpleNamespace
from typing import Any, cast
from uuid import UUID, uuid4

from gestao_milhas.db.models.purchase import Purchase, PurchaseStatus
from gestao_milhas.domain.programs import ALL_PROGRAMS, LoyaltyProgram
from gestao_milhas.services.recompute_service import PurchaseRecomputeService


class FakeSession:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


class FakePurchaseRepository:
    def __init__(self, purchase: Any) -> None:
        self.purchase = purchase
        self.predicted: dict[LoyaltyProgram, int] | None = None

    def get_for_update(self, purchase_id: UUID) -> Purchase | None:
        return cast(Purchase | None, self.purchase)

    def set_predicted_balances(
        self, purchase: Purchase, predicted: Mapping[LoyaltyProgram, int]
    ) -> Purchase:
        self.predicted = dict(predicted)
        return purchase


def _cedente(**points: int) -> SimpleNamespace:
    balances = {
        program: points.get(program.column_suffix, 0) for program in ALL_PROGRAMS
    }
    return SimpleNamespace(balances=lambda: dict(balances))


def test_recompute_stores_clamped_legacy_predictions() -> None:
    purchase = SimpleNamespace(
        status=PurchaseStatus.OPEN,
        cedente=_cedente(latam=100, smiles=10, azul=5),
        items=[
            SimpleNamespace(
                status="PENDING",
                program_from="SMILES",
                program_to="AZUL",
                points_final=30,
                points_debited_from_origin=50,
            )
        ],
    )
    repository = FakePurchaseRepository(purchase)
    session = FakeSession()

    PurchaseRecomputeService(
        purchase_repository=repository, session=session
    ).recompute_purchase(uuid4())

    assert repository.predicted == {
        LoyaltyProgram.LATAM: 100,
        LoyaltyProgram.SMILES: 0,
        LoyaltyProgram.LIVELO: 0,
        LoyaltyProgram.ESFERA: 0,
    }
    assert session.commits == 1


def test_skipped_purchases_leave_the_caller_transaction_alone() -> None:
    closed = SimpleNamespace(
        status=PurchaseStatus.CLOSED, cedente=_cedente(), items=[]
    )
    orphan = SimpleNamespace(status=PurchaseStatus.OPEN, cedente=None, items=[])

    for purchase in (None, closed, orphan):
        repository = FakePurchaseRepository(purchase)
        session = FakeSession()

        result = PurchaseRecomputeService(
            purchase_repository=repository, session=session
        ).recompute_purchase(uuid4())

        assert result is purchase
        assert repository.predicted is None
        assert session.commits == 0
        assert session.rollbacks == 0
