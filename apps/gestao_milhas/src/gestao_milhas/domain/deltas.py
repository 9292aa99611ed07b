"""Net point deltas produced by purchase line items."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from gestao_milhas.domain.programs import (
    LoyaltyProgram,
    clamp_points,
    empty_program_map,
    resolve_program,
)

CANCELED_STATUS = "CANCELED"


class PointMovement(Protocol):
    """Attributes of a purchase item that affect balances."""

    status: object
    program_from: str | None
    program_to: str | None
    points_final: object
    points_debited_from_origin: object


def compute_program_deltas(
    items: Iterable[PointMovement] | None,
) -> dict[LoyaltyProgram, int]:
    """Sum credits to destination and debits from origin per program.

    Canceled items are skipped. Program names that do not resolve to a
    known program are ignored.
    """

    deltas = empty_program_map()
    for item in items or ():
        if str(item.status or "").strip().upper() == CANCELED_STATUS:
            continue

        program_to = resolve_program(item.program_to)
        if program_to is not None:
            deltas[program_to] += clamp_points(item.points_final)

        program_from = resolve_program(item.program_from)
        if program_from is not None:
            deltas[program_from] -= clamp_points(item.points_debited_from_origin)

    return deltas
