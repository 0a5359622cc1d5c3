"""
GST/PST rate policy.

Cash sales are taxed at zero. The zeroing is undone only when the payment
method moves away from CASH; moving between two non-cash methods keeps
whatever rates the operator typed in.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Union

from .money import ZERO, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_GST_RATE = Decimal("0.05")
DEFAULT_PST_RATE = Decimal("0.07")


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    CHECK = "CHECK"
    E_TRANSFER = "E_TRANSFER"
    FINANCING = "FINANCING"


@dataclass(frozen=True)
class TaxRates:
    gst_rate: Decimal
    pst_rate: Decimal

    @classmethod
    def of(cls, gst_rate: Any, pst_rate: Any) -> "TaxRates":
        return cls(to_decimal(gst_rate), to_decimal(pst_rate))

    @property
    def combined(self) -> Decimal:
        return self.gst_rate + self.pst_rate


ZERO_RATES = TaxRates(ZERO, ZERO)


def coerce_payment_method(value: Union[str, PaymentMethod, None]) -> Optional[PaymentMethod]:
    if value is None or isinstance(value, PaymentMethod):
        return value
    value = str(value).strip().upper()
    if not value:
        return None
    return PaymentMethod(value)


class TaxRatePolicy:
    def __init__(self, default_gst_rate: Any = DEFAULT_GST_RATE, default_pst_rate: Any = DEFAULT_PST_RATE):
        self.defaults = TaxRates.of(default_gst_rate, default_pst_rate)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TaxRatePolicy":
        return cls(
            config.get("DEFAULT_GST_RATE", DEFAULT_GST_RATE),
            config.get("DEFAULT_PST_RATE", DEFAULT_PST_RATE),
        )

    def on_payment_method_change(self, previous, new, current: TaxRates) -> TaxRates:
        """
        Rates in effect after the payment method goes from ``previous`` to ``new``.

        Args:
            previous: method before the change (None when nothing was selected)
            new: method being selected (None clears the selection)
            current: rates in effect before the change

        Returns:
            TaxRates to use from now on
        """
        previous = coerce_payment_method(previous)
        new = coerce_payment_method(new)

        if new is PaymentMethod.CASH:
            logger.debug(f"Payment method {previous} -> CASH, zeroing tax rates")
            return ZERO_RATES
        if previous is PaymentMethod.CASH:
            logger.debug(f"Payment method CASH -> {new}, restoring default tax rates")
            return self.defaults
        return current

    def initial_rates(self, payment_method=None, gst_rate: Any = None, pst_rate: Any = None) -> TaxRates:
        """Rates for a new document: explicit rates win over defaults, then CASH applies."""
        rates = TaxRates(
            self.defaults.gst_rate if gst_rate is None else to_decimal(gst_rate),
            self.defaults.pst_rate if pst_rate is None else to_decimal(pst_rate),
        )
        return self.on_payment_method_change(None, payment_method, rates)
