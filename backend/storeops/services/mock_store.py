# /storeops/services/mock_store.py

import asyncio
import logging
from typing import Dict, List, Optional

from storeops.models.domain import Product, Variant

# In-memory product catalog used when the assistant runs in mock mode.
# All reads and writes go through one lock, so interleaved message handlers
# see each update as a whole.

logger = logging.getLogger(__name__)

DEFAULT_CATALOG: List[Dict] = [
    {"title": "Blue Shirt", "id": 1111, "variants": [{"id": 1001, "price": "399.00"}]},
    {"title": "Red Hoodie", "id": 1112, "variants": [{"id": 1002, "price": "799.00"}]},
    {"title": "Green Cap", "id": 1113, "variants": [{"id": 1003, "price": "199.00"}]},
]


class MockCatalogStore:
    def __init__(self, products: Optional[List[Dict]] = None):
        seed = DEFAULT_CATALOG if products is None else products
        self._products: List[Product] = [Product.model_validate(p) for p in seed]
        self._lock = asyncio.Lock()

    async def find_by_title(self, title: str) -> Optional[Product]:
        """Case-insensitive exact match first, then the first substring match."""
        needle = title.strip().lower()
        if not needle:
            return None
        async with self._lock:
            exact = next((p for p in self._products if p.title.lower() == needle), None)
            if exact:
                return exact.model_copy(deep=True)
            partial = next((p for p in self._products if needle in p.title.lower()), None)
            return partial.model_copy(deep=True) if partial else None

    async def set_variant_price(self, variant_id, price: str) -> Variant:
        async with self._lock:
            for product in self._products:
                for i, variant in enumerate(product.variants):
                    if variant.id == variant_id:
                        updated = variant.model_copy(update={"price": price})
                        product.variants[i] = updated
                        logger.info(f"Mock price for '{product.title}' set to {price}")
                        return updated
        raise KeyError(f"Unknown mock variant {variant_id}")
