# backend/tests/unit/test_intent_validator.py
import pytest

from storeops.config import strings
from storeops.models.intent import Intent
from storeops.services.intent_validator import validate


def intent(**fields) -> Intent:
    return Intent.model_validate(fields)


class TestUpdatePrice:

    def test_complete_intent_is_ok(self):
        result = validate(intent(action="update_price", product_title="Blue Shirt", new_price=499))
        assert result.ok
        assert result.clarification is None

    @pytest.mark.parametrize("fields", [
        {"product_title": "Blue Shirt"},
        {"new_price": 499},
        {"product_title": "Blue Shirt", "new_price": "499"},
        {"product_title": "", "new_price": 499},
    ])
    def test_missing_fields_ask_for_both(self, fields):
        result = validate(intent(action="update_price", **fields))
        assert not result.ok
        assert result.clarification == strings.UPDATE_PRICE_CLARIFICATION
        assert "Example" in result.clarification

    def test_zero_price_is_a_number(self):
        assert validate(intent(action="update_price", product_title="Green Cap", new_price=0)).ok


class TestCreateDiscount:

    def test_complete_intent_is_ok(self):
        result = validate(intent(action="create_discount", discount_code="SAVE10",
                                 discount_type="percentage", discount_value=10))
        assert result.ok

    @pytest.mark.parametrize("fields", [
        {"discount_type": "percentage", "discount_value": 10},
        {"discount_code": "SAVE10", "discount_value": 10},
        {"discount_code": "SAVE10", "discount_type": "percentage"},
        {"discount_code": "SAVE10", "discount_type": "percentage", "discount_value": "10"},
    ])
    def test_missing_fields_ask_for_code_and_discount(self, fields):
        result = validate(intent(action="create_discount", **fields))
        assert not result.ok
        assert result.clarification == strings.CREATE_DISCOUNT_CLARIFICATION


def test_sales_summary_needs_nothing():
    assert validate(intent(action="sales_summary")).ok


def test_unknown_is_not_checked():
    assert validate(Intent.unknown()).ok
