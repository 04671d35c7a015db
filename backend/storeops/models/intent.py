# /storeops/models/intent.py

import math
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, field_validator

# This file defines the structured intent the AI model extracts from a
# store-owner message, along with the coercion rules applied to every field.
# Fields that fail coercion become None; the validator decides whether a
# missing field matters for the requested action.


class IntentAction(str, Enum):
    UPDATE_PRICE = "update_price"
    CREATE_DISCOUNT = "create_discount"
    SALES_SUMMARY = "sales_summary"
    UNKNOWN = "unknown"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


Number = Union[int, float]


def non_blank_or_none(v) -> Optional[str]:
    if not isinstance(v, str):
        return None
    v = v.strip()
    return v or None


class Intent(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    action: IntentAction = IntentAction.UNKNOWN
    product_title: Optional[str] = None
    new_price: Optional[Number] = None
    currency: Optional[str] = None
    discount_code: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[Number] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    period: Optional[str] = None

    @classmethod
    def unknown(cls) -> "Intent":
        return cls(action=IntentAction.UNKNOWN)

    # ---------------- Coercion policy ---------------- #

    @field_validator("new_price", "discount_value", mode="before")
    @classmethod
    def require_json_number(cls, v):
        """Only real JSON numbers count; "499" or true is treated as missing."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        if isinstance(v, float) and not math.isfinite(v):
            return None
        return v

    @field_validator(
        "product_title", "currency", "discount_code", "start_date", "end_date",
        mode="before",
    )
    @classmethod
    def require_non_blank_string(cls, v):
        return non_blank_or_none(v)

    @field_validator("period", mode="before")
    @classmethod
    def normalize_period(cls, v):
        """A bare number such as 30 is read as a day count token."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        return non_blank_or_none(v)

    @field_validator("discount_type", mode="before")
    @classmethod
    def normalize_discount_type(cls, v):
        if not isinstance(v, str):
            return None
        v = v.strip().lower()
        return v if v in {t.value for t in DiscountType} else None


@dataclass(frozen=True)
class ParseFailure:
    """The model reply could not be read as an intent."""
    reason: str
    raw: str = ""


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    clarification: Optional[str] = None
