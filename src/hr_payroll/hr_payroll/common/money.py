from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any, field_name: str = "valor") -> Decimal:
    """Convert int/float/str/Decimal into Decimal.

    Floats go through str() so 0.1 stays 0.1.
    """
    if value is None or value == "":
        raise ValidationError(f"{field_name} es requerido")
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} no es un número válido")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{field_name} no es un número válido")
    # NaN and Infinity parse but cannot be compared or quantized
    if not amount.is_finite():
        raise ValidationError(f"{field_name} no es un número válido")
    return amount


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
