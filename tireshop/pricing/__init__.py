"""
Line item pricing and tax engine shared by the editors, the persistence
services and the document renderer.
"""

from .item_types import (
    DISCOUNT_TYPES,
    MERCHANDISE_TYPES,
    FlatDiscountItem,
    ItemType,
    ItemValidationError,
    LineItem,
    MerchandiseItem,
    PercentageDiscountItem,
    accept_editor_item,
    levy_defaults,
    parse_line_item,
    parse_line_items,
)
from .discount_base import gross_base
from .line_total import line_total, line_totals
from .tax_policy import (
    DEFAULT_GST_RATE,
    DEFAULT_PST_RATE,
    PaymentMethod,
    TaxRatePolicy,
    TaxRates,
    coerce_payment_method,
)
from .totals import Totals, base_from_total, compute_totals, format_tax_breakdown
from .session import PricingSession

__all__ = [
    "DISCOUNT_TYPES",
    "MERCHANDISE_TYPES",
    "FlatDiscountItem",
    "ItemType",
    "ItemValidationError",
    "LineItem",
    "MerchandiseItem",
    "PercentageDiscountItem",
    "accept_editor_item",
    "levy_defaults",
    "parse_line_item",
    "parse_line_items",
    "gross_base",
    "line_total",
    "line_totals",
    "DEFAULT_GST_RATE",
    "DEFAULT_PST_RATE",
    "PaymentMethod",
    "TaxRatePolicy",
    "TaxRates",
    "coerce_payment_method",
    "Totals",
    "base_from_total",
    "compute_totals",
    "format_tax_breakdown",
    "PricingSession",
]
