from decimal import Decimal
from typing import Iterable, List, Sequence

from .discount_base import gross_base
from .item_types import PercentageDiscountItem
from .money import HUNDRED, ZERO


def _contribution(item, base: Decimal) -> Decimal:
    if isinstance(item, PercentageDiscountItem):
        discount = base * item.percentage / HUNDRED
        return -discount if discount else ZERO
    # merchandise and flat discounts alike; a flat discount's unit price is already negative
    return item.quantity * item.unit_price


def line_total(item, all_items: Iterable) -> Decimal:
    """
    Signed amount one line adds to the subtotal.

    A percentage discount depends on the rest of the document, so the full
    item list has to be passed even when only one line is being displayed.
    """
    return _contribution(item, gross_base(all_items))


def line_totals(items: Sequence) -> List[Decimal]:
    """line_total for every item, in list order, sharing one gross base."""
    base = gross_base(items)
    return [_contribution(item, base) for item in items]
