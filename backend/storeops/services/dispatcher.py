# /storeops/services/dispatcher.py

import re
import logging
from typing import List, Tuple

from storeops.config import strings
from storeops.models.intent import Intent, IntentAction
from storeops.models.domain import DiscountResult, SalesSummary
from storeops.services.intent_validator import validate, DEFAULT_SALES_PERIOD
from storeops.services.shopify_service import CommerceOperations, format_price

# Routes a validated intent to exactly one commerce operation and formats the
# reply. Business outcomes (not found, no variant, missing fields) become
# specific replies here; only remote failures raise out of dispatch().

logger = logging.getLogger(__name__)

# Checked in order; the first match wins.
KEYWORD_HINTS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"price|cost", re.IGNORECASE), strings.PRICE_HINT),
    (re.compile(r"discount|coupon|code", re.IGNORECASE), strings.DISCOUNT_HINT),
    (re.compile(r"sales|revenue|summary|report", re.IGNORECASE), strings.SALES_HINT),
]

THIRTY_DAY_RE = re.compile(r"30")


def resolve_window_days(period: str | None) -> int:
    return 30 if THIRTY_DAY_RE.search(period or DEFAULT_SALES_PERIOD) else 7


def keyword_hint(text: str) -> str:
    for pattern, hint in KEYWORD_HINTS:
        if pattern.search(text or ""):
            return hint
    return strings.CAPABILITIES


def format_discount(result: DiscountResult) -> str:
    if not result.created:
        return strings.DISCOUNT_RULE_FAILED
    if result.simulated:
        return strings.MOCK_DISCOUNT_CREATED.format(
            code=result.code, type=result.discount_type, value=format_price(result.value),
            start=result.starts_at, end=result.ends_at,
        )
    return strings.DISCOUNT_CREATED.format(code=result.code)


def format_sales(summary: SalesSummary) -> str:
    template = strings.MOCK_SALES_SUMMARY if summary.simulated else strings.SALES_SUMMARY
    return template.format(days=summary.days, count=summary.count, total=f"{summary.total:.2f}")


class ActionDispatcher:
    def __init__(self, commerce: CommerceOperations):
        self.commerce = commerce

    async def dispatch(self, intent: Intent, text: str) -> str:
        if intent.action == IntentAction.UNKNOWN:
            return keyword_hint(text)

        result = validate(intent)
        if not result.ok:
            logger.info(f"Intent '{intent.action.value}' is missing required fields")
            return result.clarification

        if intent.action == IntentAction.UPDATE_PRICE:
            return await self.handle_update_price(intent)
        if intent.action == IntentAction.CREATE_DISCOUNT:
            return await self.handle_create_discount(intent)
        return await self.handle_sales_summary(intent)

    async def handle_update_price(self, intent: Intent) -> str:
        product = await self.commerce.find_product_by_title(intent.product_title)
        if not product:
            return strings.PRODUCT_NOT_FOUND.format(title=intent.product_title)

        variant = product.first_variant
        if not variant:
            return strings.NO_VARIANTS.format(title=product.title)

        await self.commerce.set_variant_price(variant.id, intent.new_price)
        logger.info(f"Price of '{product.title}' updated via {self.commerce.mode} commerce")
        return strings.PRICE_UPDATED.format(title=product.title, price=format_price(intent.new_price))

    async def handle_create_discount(self, intent: Intent) -> str:
        result = await self.commerce.create_discount(
            intent.discount_code,
            intent.discount_type.value,
            intent.discount_value,
            intent.start_date,
            intent.end_date,
        )
        return format_discount(result)

    async def handle_sales_summary(self, intent: Intent) -> str:
        days = resolve_window_days(intent.period)
        summary = await self.commerce.summarize_orders(days)
        return format_sales(summary)
