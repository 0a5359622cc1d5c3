from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Convert int/float/str input to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise ValueError(f"Not a numeric value: {value!r}")
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Not a numeric value: {value!r}") from e


def quantize_cents(amount: Decimal) -> Decimal:
    rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    # -0.00 prints badly on documents
    return rounded if rounded else CENT * 0


def format_rate(rate: Decimal) -> str:
    """0.05 -> '5%', 0.075 -> '7.5%'"""
    percent = (to_decimal(rate) * HUNDRED).normalize()
    return f"{percent:f}%"


STORAGE_QUANTUM = Decimal("0.0001")


def quantize_storage(amount: Any) -> Decimal:
    """Round a unit price or tax rate to the four places the database keeps."""
    return to_decimal(amount).quantize(STORAGE_QUANTUM, rounding=ROUND_HALF_UP)
