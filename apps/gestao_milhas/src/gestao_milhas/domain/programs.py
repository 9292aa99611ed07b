"""Loyalty programs tracked per cedente and point normalization helpers."""

from __future__ import annotations

import enum
import math
from decimal import Decimal, InvalidOperation


class LoyaltyProgram(enum.StrEnum):
    """Programs with an independent point counter on every cedente."""

    LATAM = "LATAM"
    SMILES = "SMILES"
    LIVELO = "LIVELO"
    ESFERA = "ESFERA"
    AZUL = "AZUL"
    IBERIA = "IBERIA"
    AA = "AA"
    TAP = "TAP"
    FLYING_BLUE = "FLYING_BLUE"

    @property
    def body_key(self) -> str:
        """Key used for this program in request payloads."""

        return _BODY_KEYS[self]

    @property
    def column_suffix(self) -> str:
        """Suffix shared by the ORM attributes that store this program."""

        return self.value.lower()


_BODY_KEYS: dict[LoyaltyProgram, str] = {
    LoyaltyProgram.LATAM: "latam",
    LoyaltyProgram.SMILES: "smiles",
    LoyaltyProgram.LIVELO: "livelo",
    LoyaltyProgram.ESFERA: "esfera",
    LoyaltyProgram.AZUL: "azul",
    LoyaltyProgram.IBERIA: "iberia",
    LoyaltyProgram.AA: "aa",
    LoyaltyProgram.TAP: "tap",
    LoyaltyProgram.FLYING_BLUE: "flyingBlue",
}

ALL_PROGRAMS: tuple[LoyaltyProgram, ...] = tuple(LoyaltyProgram)

# Programs that still carry predicted/applied balance columns on purchases.
LEGACY_PROGRAMS: tuple[LoyaltyProgram, ...] = (
    LoyaltyProgram.LATAM,
    LoyaltyProgram.SMILES,
    LoyaltyProgram.LIVELO,
    LoyaltyProgram.ESFERA,
)

# Balance columns are 32-bit integers.
MAX_POINTS = 2**31 - 1


def clamp_points(value: object) -> int:
    """Normalize any loose numeric input into a non-negative integer.

    Non-numeric or non-finite values become 0, booleans count as 0 or 1,
    fractions are truncated toward zero and negatives are floored at 0.
    """

    if value is None:
        return 0
    if isinstance(value, int):
        return max(0, int(value))
    if isinstance(value, float):
        number = value
    else:
        try:
            number = float(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError):
            return 0
    if not math.isfinite(number):
        return 0
    return max(0, math.trunc(number))


def resolve_program(value: object) -> LoyaltyProgram | None:
    """Map a free-form program name to a known program, or None."""

    normalized = str(value or "").strip().upper()
    try:
        return LoyaltyProgram(normalized)
    except ValueError:
        return None


def empty_program_map() -> dict[LoyaltyProgram, int]:
    """Return a zeroed counter for every program."""

    return dict.fromkeys(ALL_PROGRAMS, 0)
