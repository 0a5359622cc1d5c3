import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .item_types import accept_editor_item, parse_line_item
from .line_total import line_totals
from .money import quantize_cents, to_decimal
from .tax_policy import PaymentMethod, TaxRatePolicy, TaxRates, coerce_payment_method
from .totals import Totals, compute_totals

logger = logging.getLogger(__name__)


class PricingSession:
    """
    One open invoice or quotation being edited.

    Owns the item list, the tax rates and the payment method. Every mutator
    re-prices the whole document from scratch; derived figures are read-only
    and never patched incrementally, because a percentage discount moves
    whenever any other line changes.
    """

    def __init__(
        self,
        policy: Optional[TaxRatePolicy] = None,
        items: Sequence = (),
        gst_rate: Any = None,
        pst_rate: Any = None,
        payment_method=None,
    ):
        self._policy = policy or TaxRatePolicy()
        self._items: List[Any] = [parse_line_item(item, index) for index, item in enumerate(items)]
        self._payment_method: Optional[PaymentMethod] = coerce_payment_method(payment_method)
        self._rates: TaxRates = self._policy.initial_rates(self._payment_method, gst_rate, pst_rate)
        self._totals: Totals
        self._line_totals: Tuple[Decimal, ...]
        self._recompute("open")

    # derived state

    @property
    def items(self) -> Tuple[Any, ...]:
        return tuple(self._items)

    @property
    def rates(self) -> TaxRates:
        return self._rates

    @property
    def gst_rate(self) -> Decimal:
        return self._rates.gst_rate

    @property
    def pst_rate(self) -> Decimal:
        return self._rates.pst_rate

    @property
    def payment_method(self) -> Optional[PaymentMethod]:
        return self._payment_method

    @property
    def totals(self) -> Totals:
        return self._totals

    @property
    def line_totals(self) -> Tuple[Decimal, ...]:
        return self._line_totals

    # mutations

    def add_item(self, data: Mapping[str, Any]):
        item = accept_editor_item(data, len(self._items))
        self._items.append(item)
        self._recompute(f"add {item.item_type}")
        return item

    def remove_item(self, index: int):
        item = self._items.pop(index)
        self._recompute(f"remove {item.item_type}")
        return item

    def update_item(self, index: int, **changes):
        current = self._items[index]
        merged = current.to_dict()
        if current.item_type == "DISCOUNT":
            # the editor shows flat discounts as a positive amount
            merged["unit_price"] = current.amount_off
        merged.update(changes)
        item = accept_editor_item(merged, index)
        self._items[index] = item
        self._recompute(f"update item {index}")
        return item

    def set_rates(self, gst_rate: Any = None, pst_rate: Any = None) -> None:
        self._rates = TaxRates(
            self._rates.gst_rate if gst_rate is None else to_decimal(gst_rate),
            self._rates.pst_rate if pst_rate is None else to_decimal(pst_rate),
        )
        self._recompute("rates")

    def set_gst_rate(self, gst_rate: Any) -> None:
        self.set_rates(gst_rate=gst_rate)

    def set_pst_rate(self, pst_rate: Any) -> None:
        self.set_rates(pst_rate=pst_rate)

    def set_payment_method(self, payment_method) -> None:
        new = coerce_payment_method(payment_method)
        self._rates = self._policy.on_payment_method_change(self._payment_method, new, self._rates)
        self._payment_method = new
        self._recompute(f"payment method {new.value if new else None}")

    def _recompute(self, reason: str) -> None:
        self._line_totals = tuple(line_totals(self._items))
        self._totals = compute_totals(self._items, self._rates.gst_rate, self._rates.pst_rate)
        logger.debug(
            f"Recomputed totals after {reason}: items={len(self._items)} "
            f"subtotal={self._totals.subtotal} total={self._totals.total}"
        )

    def snapshot(self, rounded: bool = True) -> Dict[str, Any]:
        totals = self._totals.rounded() if rounded else self._totals
        lines = []
        for item, amount in zip(self._items, self._line_totals):
            row = item.to_dict()
            row["total"] = quantize_cents(amount) if rounded else amount
            lines.append(row)
        return {
            "items": lines,
            "gst_rate": self._rates.gst_rate,
            "pst_rate": self._rates.pst_rate,
            "payment_method": self._payment_method.value if self._payment_method else None,
            **totals.as_dict(),
        }
