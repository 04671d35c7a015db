# /storeops/config/strings.py

# This file contains all user-facing strings, making them easy to manage,
# update, and eventually localize without changing application logic.

# Action results
PRICE_UPDATED = "Done. {title} price is now {price}"
PRODUCT_NOT_FOUND = "Could not find a product named {title}"
NO_VARIANTS = "No variants found for {title}"

DISCOUNT_CREATED = "Discount code {code} created"
DISCOUNT_RULE_FAILED = "Could not create discount rule"
MOCK_DISCOUNT_CREATED = "Mock created discount {code}. Type {type}. Value {value}. Starts {start}. Ends {end}"

SALES_SUMMARY = "Sales last {days} days. Orders {count}. Revenue {total}"
MOCK_SALES_SUMMARY = "Mock sales for last {days} days. Orders {count}. Revenue {total}"

# Clarifications for incomplete intents
UPDATE_PRICE_CLARIFICATION = "I need the product name and new price. Example. Update price of Blue Shirt to 499"
CREATE_DISCOUNT_CLARIFICATION = "I need a code and a discount. Example. Create discount code SAVE10 for 10 percent"

# Keyword hints when no action was recognized
PRICE_HINT = "Try this. Update price of Exact Product Title to 499"
DISCOUNT_HINT = "Try this. Create discount code SAVE10 for 10 percent"
SALES_HINT = "Try this. Show sales summary for last 7 days"
CAPABILITIES = "I can update product prices, create discounts, or show sales. Try one of those."

# Errors
ERROR_GENERAL = "Sorry something went wrong. Try again"
