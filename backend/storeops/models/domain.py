# /storeops/models/domain.py

import logging
from decimal import Decimal
from datetime import datetime
from typing import Optional, List, Dict, Any, Union
from pydantic import BaseModel, Field, field_validator

# This file defines the core Pydantic models used by the commerce operations.
# These models mirror the parts of the Shopify Admin REST payloads we use.

logger = logging.getLogger(__name__)

Identifier = Union[int, str]


class Variant(BaseModel):
    id: Identifier
    price: str = "0.00"

    @field_validator("price", mode="before")
    @classmethod
    def price_as_string(cls, v):
        # Shopify sends decimal strings; keep that shape for numbers too.
        return "0.00" if v is None else str(v)


class Product(BaseModel):
    id: Identifier
    title: str
    variants: List[Variant] = []

    @property
    def first_variant(self) -> Optional[Variant]:
        return self.variants[0] if self.variants else None

    @classmethod
    def from_shopify_api(cls, product_data: Dict[str, Any]) -> Optional["Product"]:
        """
        A factory method to create a Product instance from a raw Shopify API dictionary.
        Variants without an id are dropped, since they cannot be updated.
        """
        try:
            variants = [
                Variant(id=v["id"], price=v.get("price"))
                for v in product_data.get("variants") or []
                if v.get("id") is not None
            ]
            return cls(
                id=product_data["id"],
                title=product_data.get("title", "No Title"),
                variants=variants,
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Could not parse product with ID {product_data.get('id')}: {e}")
            return None


class PriceRule(BaseModel):
    title: str
    target_type: str = "line_item"
    target_selection: str = "all"
    allocation_method: str = "across"
    value_type: str
    value: str
    customer_selection: str = "all"
    starts_at: str
    ends_at: Optional[str] = None

    @classmethod
    def for_code(cls, code: str, discount_type: str, value: Union[int, float],
                 starts_at: str, ends_at: Optional[str]) -> "PriceRule":
        """Builds the rule for a code; Shopify expects reductions as negative strings."""
        return cls(
            title=f"Rule-{code}",
            value_type="percentage" if discount_type == "percentage" else "fixed_amount",
            value=f"-{abs(value)}",
            starts_at=starts_at,
            ends_at=ends_at,
        )


class DiscountResult(BaseModel):
    code: str
    created: bool
    discount_type: str
    value: Union[int, float]
    starts_at: str
    ends_at: Optional[str] = None
    price_rule_id: Optional[Identifier] = None
    simulated: bool = False


class SalesSummary(BaseModel):
    days: int
    since: datetime
    count: int
    total: Decimal = Field(default=Decimal("0"))
    simulated: bool = False
