"""
Printable document model
"""

from datetime import date as Date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from tireshop.pricing import Totals, format_tax_breakdown
from .document_kind import DocumentKind
from .printable_line import PrintableLine


class PrintableDocument(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: DocumentKind
    number: str = Field(min_length=1)
    issued_on: Date
    valid_until: Optional[Date] = None
    status: str
    customer_name: str
    business_name: Optional[str] = None
    vehicle_ref: Optional[str] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None

    lines: List[PrintableLine]
    gst_rate: Decimal
    pst_rate: Decimal
    gst_label: str
    pst_label: str
    subtotal: Decimal = Field(decimal_places=2)
    gst_amount: Decimal = Field(decimal_places=2)
    pst_amount: Decimal = Field(decimal_places=2)
    total_tax: Decimal = Field(decimal_places=2)
    total: Decimal = Field(decimal_places=2)

    @model_validator(mode="after")
    def _totals_add_up(self):
        if self.total_tax != self.gst_amount + self.pst_amount:
            raise ValueError("total_tax must equal gst_amount + pst_amount")
        if self.total != self.subtotal + self.total_tax:
            raise ValueError("total must equal subtotal + total_tax")
        return self

    @property
    def tax_breakdown(self) -> str:
        totals = Totals(self.subtotal, self.gst_amount, self.pst_amount, self.total_tax, self.total)
        return format_tax_breakdown(totals, self.gst_rate, self.pst_rate)
