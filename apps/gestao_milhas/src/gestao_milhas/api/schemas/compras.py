"""Schemas for purchase (compra) endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gestao_milhas.api.schemas.cedentes import CedenteResponse
from gestao_milhas.db.models.cedente_commission import CedenteCommission
from gestao_milhas.db.models.purchase import Purchase
from gestao_milhas.db.models.purchase_item import PurchaseItem
from gestao_milhas.db.models.user import User
from gestao_milhas.domain.money import format_cents
from gestao_milhas.domain.programs import (
    ALL_PROGRAMS,
    MAX_POINTS,
    LoyaltyProgram,
    clamp_points,
)

LooseNumber = int | float | None


class AppliedBalancesOverride(BaseModel):
    """Explicit balances typed by the operator, keyed by program."""

    model_config = ConfigDict(populate_by_name=True)

    latam: LooseNumber = None
    smiles: LooseNumber = None
    livelo: LooseNumber = None
    esfera: LooseNumber = None
    azul: LooseNumber = None
    iberia: LooseNumber = None
    aa: LooseNumber = None
    tap: LooseNumber = None
    flying_blue: LooseNumber = Field(default=None, alias="flyingBlue")

    @field_validator("*")
    @classmethod
    def within_balance_range(cls, value: LooseNumber) -> LooseNumber:
        if value is not None and clamp_points(value) > MAX_POINTS:
            msg = f"Balance must not exceed {MAX_POINTS} points."
            raise ValueError(msg)
        return value

    def to_overrides(self) -> dict[LoyaltyProgram, int]:
        """Normalize present values into non-negative integer overrides."""

        values = self.model_dump(by_alias=True)
        return {
            program: clamp_points(values[program.body_key])
            for program in ALL_PROGRAMS
            if values[program.body_key] is not None
        }


class ReleasePurchaseRequest(BaseModel):
    """Optional body of the release endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    applied_balances: AppliedBalancesOverride | None = Field(
        default=None, alias="saldosAplicados"
    )

    def to_overrides(self) -> dict[LoyaltyProgram, int]:
        if self.applied_balances is None:
            return {}
        return self.applied_balances.to_overrides()


class UserSummaryResponse(BaseModel):
    id: UUID
    login: str
    name: str

    @classmethod
    def from_model(cls, user: User) -> UserSummaryResponse:
        return cls(id=user.id, login=user.login, name=user.name)


class PurchaseItemResponse(BaseModel):
    """Serialized purchase line item."""

    id: UUID
    title: str | None
    program_from: str | None
    program_to: str | None
    points_final: int
    points_debited_from_origin: int
    status: str

    @classmethod
    def from_model(cls, item: PurchaseItem) -> PurchaseItemResponse:
        return cls(
            id=item.id,
            title=item.title,
            program_from=item.program_from,
            program_to=item.program_to,
            points_final=item.points_final,
            points_debited_from_origin=item.points_debited_from_origin,
            status=str(item.status),
        )


class PurchaseResponse(BaseModel):
    """Serialized purchase with items, cedente and release audit."""

    id: UUID
    status: str
    cedente_id: UUID | None
    cedente: CedenteResponse | None
    predicted_balances: dict[str, int | None]
    applied_balances: dict[str, int | None]
    cedente_pay_cents: int
    cedente_pay: str = Field(pattern=r"^-?[0-9]+\.[0-9]{2}$")
    released_at: datetime | None
    released_by: UserSummaryResponse | None
    items: list[PurchaseItemResponse]

    @classmethod
    def from_model(cls, purchase: Purchase) -> PurchaseResponse:
        return cls(
            id=purchase.id,
            status=str(purchase.status),
            cedente_id=purchase.cedente_id,
            cedente=CedenteResponse.from_model(purchase.cedente)
            if purchase.cedente
            else None,
            predicted_balances={
                str(program): value
                for program, value in purchase.predicted_balances().items()
            },
            applied_balances={
                str(program): value
                for program, value in purchase.applied_balances().items()
            },
            cedente_pay_cents=purchase.cedente_pay_cents,
            cedente_pay=format_cents(purchase.cedente_pay_cents),
            released_at=purchase.released_at,
            released_by=UserSummaryResponse.from_model(purchase.released_by)
            if purchase.released_by
            else None,
            items=[PurchaseItemResponse.from_model(item) for item in purchase.items],
        )


class CommissionResponse(BaseModel):
    """Serialized cedente commission."""

    id: UUID
    cedente_id: UUID
    purchase_id: UUID
    amount_cents: int
    amount: str = Field(pattern=r"^-?[0-9]+\.[0-9]{2}$")
    status: str
    generated_by_id: UUID | None
    generated_at: datetime | None
    paid_at: datetime | None
    paid_by_id: UUID | None

    @classmethod
    def from_model(cls, commission: CedenteCommission) -> CommissionResponse:
        return cls(
            id=commission.id,
            cedente_id=commission.cedente_id,
            purchase_id=commission.purchase_id,
            amount_cents=commission.amount_cents,
            amount=format_cents(commission.amount_cents),
            status=str(commission.status),
            generated_by_id=commission.generated_by_id,
            generated_at=commission.generated_at,
            paid_at=commission.paid_at,
            paid_by_id=commission.paid_by_id,
        )


class ReleasePurchaseData(BaseModel):
    compra: PurchaseResponse
    commission: CommissionResponse | None


class ReleasePurchaseResponse(BaseModel):
    ok: Literal[True] = True
    data: ReleasePurchaseData


class PurchaseEnvelope(BaseModel):
    ok: Literal[True] = True
    data: PurchaseResponse
