# /storeops/services/shopify_service.py

import random
import logging
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Union

import httpx

from storeops.config.settings import Settings, settings
from storeops.models.domain import Product, Variant, PriceRule, DiscountResult, SalesSummary
from storeops.services.mock_store import MockCatalogStore
from storeops.utils.metrics import commerce_operations_counter

# This service wraps the few Shopify Admin operations the assistant performs.
# Two implementations share one interface: the live one talks to the REST API,
# the mock one works against an in-memory catalog. Which one runs is decided
# once, from settings, in build_commerce_service().

logger = logging.getLogger(__name__)

ORDERS_PAGE_SIZE = 250
PRODUCT_SEARCH_LIMIT = 5
MOCK_DISCOUNT_DAYS = 7

Number = Union[int, float]


def to_iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_days_ago(days: int, now: Optional[datetime] = None) -> str:
    return to_iso((now or datetime.now(timezone.utc)) - timedelta(days=days))


def format_price(value: Number) -> str:
    """499 -> "499", 12.5 -> "12.5"; matches what the owner typed."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_decimal(value: Any) -> Decimal:
    """Order totals that are missing or not numeric count as zero."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


class ShopifyAPIError(Exception):
    """Raised for any non-2xx response from the Shopify Admin API."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Shopify error {status_code} {body}")


class CommerceOperations(ABC):
    mode: str

    @abstractmethod
    async def find_product_by_title(self, title: str) -> Optional[Product]: ...

    @abstractmethod
    async def set_variant_price(self, variant_id, new_price: Number) -> Variant: ...

    @abstractmethod
    async def create_discount(self, code: str, discount_type: str, value: Number,
                              start_date: Optional[str] = None,
                              end_date: Optional[str] = None) -> DiscountResult: ...

    @abstractmethod
    async def summarize_orders(self, days: int) -> SalesSummary: ...

    async def aclose(self):
        return None

    def _record(self, operation: str, status: str):
        commerce_operations_counter.labels(operation=operation, mode=self.mode, status=status).inc()


class ShopifyCommerceService(CommerceOperations):
    mode = "live"

    def __init__(self, store_url: str, access_token: str, api_version: str = "2024-07",
                 http_client: Optional[httpx.AsyncClient] = None):
        self.store_url = store_url.replace('https://', '').replace('http://', '').rstrip('/')
        self.access_token = access_token
        self.base_url = f"https://{self.store_url}/admin/api/{api_version}"
        self.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(10.0, read=30.0, connect=5.0)
        )

    async def _request(self, method: str, path: str, json: Optional[Dict] = None,
                       params: Optional[Dict] = None) -> Dict:
        """Single entry point for Admin REST calls; non-2xx raises ShopifyAPIError."""
        url = f"{self.base_url}/{path}"
        headers = {"X-Shopify-Access-Token": self.access_token, "Content-Type": "application/json"}
        resp = await self.http_client.request(method, url, json=json, params=params, headers=headers)
        if not resp.is_success:
            logger.error(f"Shopify {method} {path} failed with {resp.status_code}")
            raise ShopifyAPIError(resp.status_code, resp.text)
        return resp.json() if resp.content else {}

    async def find_product_by_title(self, title: str) -> Optional[Product]:
        try:
            data = await self._request("GET", "products.json", params={"title": title, "limit": PRODUCT_SEARCH_LIMIT})
        except Exception:
            self._record("find_product", "error")
            raise
        products = data.get("products") or []
        self._record("find_product", "success" if products else "not_found")
        return Product.from_shopify_api(products[0]) if products else None

    async def set_variant_price(self, variant_id, new_price: Number) -> Variant:
        payload = {"variant": {"id": variant_id, "price": new_price}}
        try:
            data = await self._request("PUT", f"variants/{variant_id}.json", json=payload)
        except Exception:
            self._record("set_variant_price", "error")
            raise
        self._record("set_variant_price", "success")
        variant = data.get("variant") or {}
        return Variant(id=variant.get("id", variant_id), price=variant.get("price", format_price(new_price)))

    async def create_discount(self, code: str, discount_type: str, value: Number,
                              start_date: Optional[str] = None,
                              end_date: Optional[str] = None) -> DiscountResult:
        starts_at = start_date or to_iso(datetime.now(timezone.utc))
        rule = PriceRule.for_code(code, discount_type, value, starts_at, end_date)
        result = DiscountResult(code=code, created=False, discount_type=discount_type, value=value,
                                starts_at=starts_at, ends_at=end_date)
        try:
            rule_data = await self._request("POST", "price_rules.json", json={"price_rule": rule.model_dump()})
            rule_id = (rule_data.get("price_rule") or {}).get("id")
            if not rule_id:
                logger.warning(f"Shopify returned no price rule id for code {code}")
                self._record("create_discount", "no_rule")
                return result

            await self._request("POST", f"price_rules/{rule_id}/discount_codes.json",
                                json={"discount_code": {"code": code}})
        except Exception:
            self._record("create_discount", "error")
            raise

        self._record("create_discount", "success")
        logger.info(f"Discount code {code} attached to price rule {rule_id}")
        return result.model_copy(update={"created": True, "price_rule_id": rule_id})

    async def summarize_orders(self, days: int) -> SalesSummary:
        now = datetime.now(timezone.utc)
        params = {"status": "any", "created_at_min": iso_days_ago(days, now), "limit": ORDERS_PAGE_SIZE}
        try:
            data = await self._request("GET", "orders.json", params=params)
        except Exception:
            self._record("summarize_orders", "error")
            raise
        orders = data.get("orders") or []
        total = sum((to_decimal(o.get("total_price")) for o in orders), Decimal("0"))
        self._record("summarize_orders", "success")
        return SalesSummary(days=days, since=now - timedelta(days=days), count=len(orders), total=total)

    async def aclose(self):
        await self.http_client.aclose()


class MockCommerceService(CommerceOperations):
    mode = "mock"

    def __init__(self, store: Optional[MockCatalogStore] = None, rng: Optional[random.Random] = None):
        self.store = store or MockCatalogStore()
        self.rng = rng or random.Random()

    async def find_product_by_title(self, title: str) -> Optional[Product]:
        product = await self.store.find_by_title(title)
        self._record("find_product", "success" if product else "not_found")
        return product

    async def set_variant_price(self, variant_id, new_price: Number) -> Variant:
        variant = await self.store.set_variant_price(variant_id, format_price(new_price))
        self._record("set_variant_price", "success")
        return variant

    async def create_discount(self, code: str, discount_type: str, value: Number,
                              start_date: Optional[str] = None,
                              end_date: Optional[str] = None) -> DiscountResult:
        now = datetime.now(timezone.utc)
        self._record("create_discount", "success")
        return DiscountResult(
            code=code, created=True, discount_type=discount_type, value=value,
            starts_at=start_date or to_iso(now),
            ends_at=end_date or to_iso(now + timedelta(days=MOCK_DISCOUNT_DAYS)),
            simulated=True,
        )

    async def summarize_orders(self, days: int) -> SalesSummary:
        count = self.rng.randint(5, 34)
        revenue = Decimal(str(count * self.rng.uniform(50, 150))).quantize(Decimal("0.01"))
        self._record("summarize_orders", "success")
        return SalesSummary(days=days, since=datetime.now(timezone.utc) - timedelta(days=days),
                            count=count, total=revenue, simulated=True)


def build_commerce_service(config: Settings) -> CommerceOperations:
    if config.mock_mode:
        logger.info("MOCK_MODE is on. Commerce operations are simulated in memory.")
        return MockCommerceService()
    return ShopifyCommerceService(config.shopify_store_url, config.shopify_access_token, config.shopify_api_version)


# Globally accessible instance
commerce_service = build_commerce_service(settings)
