# backend/tests/unit/test_dispatcher.py
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock

from storeops.config import strings
from storeops.models.intent import Intent
from storeops.models.domain import DiscountResult, SalesSummary
from storeops.services.dispatcher import ActionDispatcher, keyword_hint, resolve_window_days
from storeops.services.mock_store import MockCatalogStore
from storeops.services.shopify_service import MockCommerceService


def intent(**fields) -> Intent:
    return Intent.model_validate(fields)


# --- Price updates ---

@pytest.mark.asyncio
async def test_update_price_changes_mock_catalog(dispatcher, mock_store):
    reply = await dispatcher.dispatch(intent(action="update_price", product_title="Blue Shirt", new_price=499), "")

    assert reply == "Done. Blue Shirt price is now 499"
    product = await mock_store.find_by_title("Blue Shirt")
    assert product.variants[0].price == "499"


@pytest.mark.asyncio
async def test_update_price_uses_catalog_title_for_partial_match(dispatcher, mock_store):
    reply = await dispatcher.dispatch(intent(action="update_price", product_title="hoodie", new_price=650.5), "")

    assert reply == "Done. Red Hoodie price is now 650.5"
    assert (await mock_store.find_by_title("Red Hoodie")).variants[0].price == "650.5"


@pytest.mark.asyncio
async def test_update_price_product_not_found(dispatcher):
    reply = await dispatcher.dispatch(intent(action="update_price", product_title="Purple Socks", new_price=99), "")
    assert reply == "Could not find a product named Purple Socks"


@pytest.mark.asyncio
async def test_update_price_product_without_variants():
    store = MockCatalogStore([{"title": "Gift Card", "id": 2000, "variants": []}])
    dispatcher = ActionDispatcher(MockCommerceService(store=store))

    reply = await dispatcher.dispatch(intent(action="update_price", product_title="Gift Card", new_price=50), "")
    assert reply == "No variants found for Gift Card"


@pytest.mark.asyncio
async def test_invalid_update_price_never_touches_commerce(mocker, dispatcher, mock_commerce):
    find = mocker.spy(mock_commerce, "find_product_by_title")
    set_price = mocker.spy(mock_commerce, "set_variant_price")

    reply = await dispatcher.dispatch(
        intent(action="update_price", product_title="Blue Shirt", new_price="cheap"), "make blue shirt cheap")

    assert reply == strings.UPDATE_PRICE_CLARIFICATION
    find.assert_not_called()
    set_price.assert_not_called()


# --- Discounts ---

@pytest.mark.asyncio
async def test_mock_discount_reply_mentions_code_type_and_value(dispatcher):
    reply = await dispatcher.dispatch(
        intent(action="create_discount", discount_code="SAVE10", discount_type="percentage", discount_value=10), "")

    assert reply.startswith("Mock created discount SAVE10")
    assert "percentage" in reply
    assert "Value 10." in reply


@pytest.mark.asyncio
async def test_mock_discount_keeps_given_dates(dispatcher):
    reply = await dispatcher.dispatch(intent(
        action="create_discount", discount_code="WINTER", discount_type="amount", discount_value=5,
        start_date="2026-12-01T00:00:00Z", end_date="2026-12-31T23:59:59Z"), "")

    assert "Starts 2026-12-01T00:00:00Z" in reply
    assert "Ends 2026-12-31T23:59:59Z" in reply


@pytest.mark.asyncio
async def test_live_discount_replies_created():
    commerce = AsyncMock()
    commerce.create_discount.return_value = DiscountResult(
        code="SAVE10", created=True, discount_type="percentage", value=10, starts_at="now", price_rule_id=77)

    reply = await ActionDispatcher(commerce).dispatch(
        intent(action="create_discount", discount_code="SAVE10", discount_type="percentage", discount_value=10), "")

    assert reply == "Discount code SAVE10 created"
    commerce.create_discount.assert_awaited_once_with("SAVE10", "percentage", 10, None, None)


@pytest.mark.asyncio
async def test_discount_rule_without_id_reports_failure():
    commerce = AsyncMock()
    commerce.create_discount.return_value = DiscountResult(
        code="SAVE10", created=False, discount_type="percentage", value=10, starts_at="now")

    reply = await ActionDispatcher(commerce).dispatch(
        intent(action="create_discount", discount_code="SAVE10", discount_type="percentage", discount_value=10), "")

    assert reply == strings.DISCOUNT_RULE_FAILED


# --- Sales summaries ---

@pytest.mark.parametrize("period, days", [
    ("last_30_days", 30),
    ("30 days", 30),
    ("last_7_days", 7),
    ("this week", 7),
    (None, 7),
])
def test_resolve_window_days(period, days):
    assert resolve_window_days(period) == days


@pytest.mark.asyncio
async def test_sales_summary_uses_thirty_day_window(mocker, dispatcher, mock_commerce):
    summarize = mocker.spy(mock_commerce, "summarize_orders")
    reply = await dispatcher.dispatch(intent(action="sales_summary", period="last_30_days"), "")

    summarize.assert_called_once_with(30)
    assert reply.startswith("Mock sales for last 30 days. Orders ")


@pytest.mark.asyncio
async def test_sales_summary_defaults_to_seven_days(mocker, dispatcher, mock_commerce):
    summarize = mocker.spy(mock_commerce, "summarize_orders")
    await dispatcher.dispatch(intent(action="sales_summary"), "how are sales")
    summarize.assert_called_once_with(7)


@pytest.mark.asyncio
async def test_live_sales_summary_format():
    commerce = AsyncMock()
    commerce.summarize_orders.return_value = SalesSummary(
        days=7, since=datetime.now(timezone.utc), count=3, total="120.5")

    reply = await ActionDispatcher(commerce).dispatch(intent(action="sales_summary"), "")
    assert reply == "Sales last 7 days. Orders 3. Revenue 120.50"


# --- Unknown intents ---

@pytest.mark.parametrize("text, expected", [
    ("what does the red hoodie COST", strings.PRICE_HINT),
    ("can you make a coupon", strings.DISCOUNT_HINT),
    ("I need a promo CODE", strings.DISCOUNT_HINT),
    ("weekly revenue please", strings.SALES_HINT),
    ("send me a report", strings.SALES_HINT),
    ("hello there", strings.CAPABILITIES),
])
def test_keyword_hint(text, expected):
    assert keyword_hint(text) == expected


@pytest.mark.asyncio
async def test_unknown_discount_text_gets_discount_hint(mocker, dispatcher, mock_commerce):
    create = mocker.spy(mock_commerce, "create_discount")
    reply = await dispatcher.dispatch(Intent.unknown(), "make a discount for the weekend")

    assert reply == strings.DISCOUNT_HINT
    create.assert_not_called()


@pytest.mark.asyncio
async def test_numeric_period_from_model_picks_thirty_days(mocker, dispatcher, mock_commerce):
    summarize = mocker.spy(mock_commerce, "summarize_orders")
    await dispatcher.dispatch(intent(action="sales_summary", period=30), "sales for 30 days")
    summarize.assert_called_once_with(30)
