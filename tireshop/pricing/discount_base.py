from decimal import Decimal
from typing import Iterable

from .item_types import is_discount
from .money import ZERO


def gross_base(items: Iterable) -> Decimal:
    """
    Sum of quantity x unit_price over every non-discount item.

    This is the base every percentage discount on the document is measured
    against. Discounts never reduce it, so two 10% discounts on a 100.00
    document take 10.00 each (they do not compound).
    """
    return sum(
        (item.quantity * item.unit_price for item in items if not is_discount(item)),
        ZERO,
    )
