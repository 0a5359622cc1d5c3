"""
Printable line model
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class PrintableLine(BaseModel):
    model_config = ConfigDict(frozen=True)
    item_type: str
    description: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    # None for percentage discounts: the stored price is a percentage, not money
    unit_price: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    amount: Decimal = Field(decimal_places=2)

    @property
    def is_discount(self) -> bool:
        return self.item_type.startswith("DISCOUNT")

    @property
    def label(self) -> str:
        if self.percentage is not None:
            return f"{self.description} ({self.percentage.normalize():f}%)"
        return self.description
