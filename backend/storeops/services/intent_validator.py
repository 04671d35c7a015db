# /storeops/services/intent_validator.py

from storeops.config import strings
from storeops.models.intent import Intent, IntentAction, ValidationResult

# Checks that an extracted intent carries what its action needs. Pure: no I/O.
# Field types were already coerced on the Intent model, so a missing or
# mistyped field shows up here as None.

DEFAULT_SALES_PERIOD = "last_7_days"

OK = ValidationResult(ok=True)


def _validate_update_price(intent: Intent) -> ValidationResult:
    if not intent.product_title or intent.new_price is None:
        return ValidationResult(ok=False, clarification=strings.UPDATE_PRICE_CLARIFICATION)
    return OK


def _validate_create_discount(intent: Intent) -> ValidationResult:
    if not intent.discount_code or intent.discount_type is None or intent.discount_value is None:
        return ValidationResult(ok=False, clarification=strings.CREATE_DISCOUNT_CLARIFICATION)
    return OK


VALIDATORS = {
    IntentAction.UPDATE_PRICE: _validate_update_price,
    IntentAction.CREATE_DISCOUNT: _validate_create_discount,
}


def validate(intent: Intent) -> ValidationResult:
    """
    Returns ok for sales summaries and unknown intents; the dispatcher sends
    unknown intents to the keyword hints without consulting this result.
    """
    check = VALIDATORS.get(intent.action)
    return check(intent) if check else OK
