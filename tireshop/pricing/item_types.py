"""
Line item taxonomy

Every line on an invoice or quotation is one of three shapes:

- MerchandiseItem: tires, services, parts, other goods and levies. Positive
  unit price, quantity of at least one.
- FlatDiscountItem: a fixed amount off, stored with a negative unit price.
- PercentageDiscountItem: a percentage (0-100) of the gross merchandise
  total, stored as a positive unit price.

Items are validated once, when they are accepted into a document. The
pricing functions downstream assume validated input.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .money import to_decimal


class ItemType(str, Enum):
    TIRE = "TIRE"
    SERVICE = "SERVICE"
    PART = "PART"
    OTHER = "OTHER"
    LEVY = "LEVY"
    DISCOUNT = "DISCOUNT"
    DISCOUNT_PERCENTAGE = "DISCOUNT_PERCENTAGE"


MERCHANDISE_TYPES = frozenset({
    ItemType.TIRE,
    ItemType.SERVICE,
    ItemType.PART,
    ItemType.OTHER,
    ItemType.LEVY,
})
DISCOUNT_TYPES = frozenset({ItemType.DISCOUNT, ItemType.DISCOUNT_PERCENTAGE})


class ItemValidationError(ValueError):
    """Raised when an item does not fit the contract of its item type."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: ValidationError, index: Optional[int] = None) -> "ItemValidationError":
        errors = []
        for err in exc.errors():
            # drop the union tag from the location, it only names the variant
            loc = [str(part) for part in err.get("loc", ()) if part not in _VARIANT_TAGS]
            field = ".".join(loc) or "item"
            errors.append({"field": field, "message": err.get("msg", "Invalid value")})
        prefix = f"Item {index + 1}" if index is not None else "Item"
        summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        return cls(f"{prefix} is invalid: {summary}", errors)


class _LineItemBase(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    description: str = Field(min_length=1, max_length=255)
    quantity: int = Field(default=1, ge=1)
    reference_id: Optional[str] = None

    @property
    def kind(self) -> ItemType:
        return ItemType(self.item_type)

    @property
    def is_discount(self) -> bool:
        return self.kind in DISCOUNT_TYPES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_type": self.item_type,
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "reference_id": self.reference_id,
        }


class MerchandiseItem(_LineItemBase):
    item_type: Literal["TIRE", "SERVICE", "PART", "OTHER", "LEVY"]
    unit_price: Decimal = Field(gt=0)


class FlatDiscountItem(_LineItemBase):
    item_type: Literal["DISCOUNT"] = "DISCOUNT"
    unit_price: Decimal = Field(lt=0)

    @property
    def amount_off(self) -> Decimal:
        return -self.unit_price


class PercentageDiscountItem(_LineItemBase):
    item_type: Literal["DISCOUNT_PERCENTAGE"] = "DISCOUNT_PERCENTAGE"
    unit_price: Decimal = Field(ge=0, le=100)

    @property
    def percentage(self) -> Decimal:
        return self.unit_price


LineItem = Annotated[
    Union[MerchandiseItem, FlatDiscountItem, PercentageDiscountItem],
    Field(discriminator="item_type"),
]

_VARIANT_TAGS = {item_type.value for item_type in ItemType} | {
    "MerchandiseItem",
    "FlatDiscountItem",
    "PercentageDiscountItem",
}
_line_item_adapter = TypeAdapter(LineItem)


def _coerce_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    raw = dict(data)
    item_type = raw.get("item_type")
    if isinstance(item_type, ItemType):
        raw["item_type"] = item_type.value
    elif isinstance(item_type, str):
        raw["item_type"] = item_type.strip().upper()
    if raw.get("unit_price") is not None:
        try:
            raw["unit_price"] = to_decimal(raw["unit_price"])
        except ValueError:
            # leave it for pydantic to report against the field
            pass
    if raw.get("quantity") is None:
        raw.pop("quantity", None)
    raw.pop("total", None)
    return raw


def parse_line_item(data: Union[Mapping[str, Any], BaseModel], index: Optional[int] = None):
    """
    Validate an item that is already in stored form (discount amounts negative).

    Used when items come back from the database or from a client that
    submits the document as a whole. Any cached ``total`` on the input is
    ignored, it is never trusted.
    """
    if isinstance(data, (MerchandiseItem, FlatDiscountItem, PercentageDiscountItem)):
        return data
    try:
        return _line_item_adapter.validate_python(_coerce_fields(data))
    except ValidationError as exc:
        raise ItemValidationError.from_pydantic(exc, index) from exc


def accept_editor_item(data: Mapping[str, Any], index: Optional[int] = None):
    """
    Entry point for items typed into an editor.

    Operators enter a flat discount as a positive "discount amount"; it is
    negated here, once, before the item joins the list.
    """
    raw = _coerce_fields(data)
    if raw.get("item_type") == ItemType.DISCOUNT.value and isinstance(raw.get("unit_price"), Decimal):
        raw["unit_price"] = -abs(raw["unit_price"])
    return parse_line_item(raw, index)


def parse_line_items(rows: List[Mapping[str, Any]]) -> List[Any]:
    return [parse_line_item(row, index) for index, row in enumerate(rows or [])]


def is_discount(item) -> bool:
    return isinstance(item, (FlatDiscountItem, PercentageDiscountItem))


def levy_defaults(config: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Prefill for a new LEVY line in the editor."""
    config = config or {}
    return {
        "item_type": ItemType.LEVY.value,
        "description": config.get("LEVY_DEFAULT_DESCRIPTION", "ECO Fee"),
        "quantity": 1,
        "unit_price": to_decimal(config.get("LEVY_DEFAULT_UNIT_PRICE", "6.50")),
    }
