from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Sequence

from .line_total import line_totals
from .money import CENT, ZERO, format_rate, quantize_cents, to_decimal


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    gst_amount: Decimal
    pst_amount: Decimal
    total_tax: Decimal
    total: Decimal

    @classmethod
    def from_parts(cls, subtotal: Decimal, gst_amount: Decimal, pst_amount: Decimal) -> "Totals":
        total_tax = gst_amount + pst_amount
        return cls(subtotal, gst_amount, pst_amount, total_tax, subtotal + total_tax)

    def rounded(self) -> "Totals":
        """
        Cent-rounded totals for storage and printing.

        Subtotal, GST and PST are rounded independently and the tax total and
        grand total are summed from the rounded parts, so the printed figures
        always add up.
        """
        return Totals.from_parts(
            quantize_cents(self.subtotal),
            quantize_cents(self.gst_amount),
            quantize_cents(self.pst_amount),
        )

    def as_dict(self) -> Dict[str, Decimal]:
        return {
            "subtotal": self.subtotal,
            "gst_amount": self.gst_amount,
            "pst_amount": self.pst_amount,
            "total_tax": self.total_tax,
            "total": self.total,
        }

    def differences(self, submitted: Mapping[str, Any], tolerance: Decimal = CENT) -> Dict[str, Dict[str, Decimal]]:
        """Fields of ``submitted`` that disagree with these totals by more than ``tolerance``."""
        mismatches = {}
        for field, expected in self.as_dict().items():
            if submitted.get(field) is None:
                continue
            got = to_decimal(submitted[field])
            if abs(got - expected) > tolerance:
                mismatches[field] = {"expected": expected, "submitted": got}
        return mismatches


EMPTY_TOTALS = Totals(ZERO, ZERO, ZERO, ZERO, ZERO)


def compute_totals(items: Sequence, gst_rate: Any, pst_rate: Any) -> Totals:
    """
    Subtotal, GST, PST, tax and grand total for a list of validated items.

    Pure: the result depends only on the arguments, never on item order.
    An empty list prices at zero; an over-discounted list gives a negative
    subtotal and negative taxes.
    """
    gst_rate = to_decimal(gst_rate)
    pst_rate = to_decimal(pst_rate)
    subtotal = sum(line_totals(items), ZERO)
    return Totals.from_parts(subtotal, subtotal * gst_rate, subtotal * pst_rate)


def base_from_total(total: Any, gst_rate: Any, pst_rate: Any) -> Decimal:
    """Pre-tax amount that grosses up to ``total`` at the given rates."""
    combined = to_decimal(gst_rate) + to_decimal(pst_rate)
    return quantize_cents(to_decimal(total) / (1 + combined))


def format_tax_breakdown(totals: Totals, gst_rate: Any, pst_rate: Optional[Any] = None) -> str:
    rounded = totals.rounded()
    lines = [
        f"Subtotal: ${rounded.subtotal:,.2f}",
        f"GST ({format_rate(gst_rate)}): ${rounded.gst_amount:,.2f}",
    ]
    if pst_rate is not None:
        lines.append(f"PST ({format_rate(pst_rate)}): ${rounded.pst_amount:,.2f}")
    lines.append(f"Total: ${rounded.total:,.2f}")
    return "\n".join(lines)
