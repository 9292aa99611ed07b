"""Resolution of the balances applied to a cedente when a purchase closes.

Each program walks the same ordered strategy table and takes the first
value that is present:

1. ``override``: explicit value sent by the operator;
2. ``legacy_predicted``: predicted balance stored on the purchase, only
   for the four legacy programs;
3. ``computed``: current balance plus the delta of the purchase items.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from gestao_milhas.domain.programs import (
    ALL_PROGRAMS,
    LEGACY_PROGRAMS,
    LoyaltyProgram,
    clamp_points,
)


class BalanceSource(enum.StrEnum):
    """Strategy that supplied an applied balance."""

    OVERRIDE = "override"
    LEGACY_PREDICTED = "legacy_predicted"
    COMPUTED = "computed"


@dataclass(slots=True, frozen=True)
class BalanceInputs:
    """Everything known about one program when resolving its balance."""

    program: LoyaltyProgram
    current: int
    delta: int
    override: int | None
    predicted: int | None


@dataclass(slots=True, frozen=True)
class AppliedBalance:
    """Final clamped balance and the strategy that produced it."""

    value: int
    source: BalanceSource


BalanceStrategy = Callable[[BalanceInputs], int | None]


def _from_override(inputs: BalanceInputs) -> int | None:
    return inputs.override


def _from_legacy_predicted(inputs: BalanceInputs) -> int | None:
    if inputs.program not in LEGACY_PROGRAMS:
        return None
    return inputs.predicted


def _from_computed(inputs: BalanceInputs) -> int | None:
    return inputs.current + inputs.delta


BALANCE_POLICY: tuple[tuple[BalanceSource, BalanceStrategy], ...] = (
    (BalanceSource.OVERRIDE, _from_override),
    (BalanceSource.LEGACY_PREDICTED, _from_legacy_predicted),
    (BalanceSource.COMPUTED, _from_computed),
)


def resolve_applied_balance(inputs: BalanceInputs) -> AppliedBalance:
    """Apply the policy table to a single program."""

    for source, strategy in BALANCE_POLICY:
        value = strategy(inputs)
        if value is not None:
            return AppliedBalance(value=clamp_points(value), source=source)
    msg = "Balance policy must end with an always-present strategy."
    raise RuntimeError(msg)


def resolve_applied_balances(
    *,
    current: Mapping[LoyaltyProgram, int],
    deltas: Mapping[LoyaltyProgram, int],
    overrides: Mapping[LoyaltyProgram, int] | None = None,
    predicted: Mapping[LoyaltyProgram, int | None] | None = None,
) -> dict[LoyaltyProgram, AppliedBalance]:
    """Resolve the applied balance of every program."""

    overrides = overrides or {}
    predicted = predicted or {}
    return {
        program: resolve_applied_balance(
            BalanceInputs(
                program=program,
                current=clamp_points(current.get(program, 0)),
                delta=int(deltas.get(program, 0)),
                override=overrides.get(program),
                predicted=predicted.get(program),
            )
        )
        for program in ALL_PROGRAMS
    }
