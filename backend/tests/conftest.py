import random
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from dotenv import load_dotenv
from unittest.mock import AsyncMock, MagicMock

# Load the test environment FIRST, before any app imports, so the module-level
# settings object is built in mock mode with test credentials.
load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent / ".env.test", override=True)

from storeops.main import app  # noqa: E402
from storeops.services.ai_service import AIService  # noqa: E402
from storeops.services.dispatcher import ActionDispatcher  # noqa: E402
from storeops.services.mock_store import MockCatalogStore  # noqa: E402
from storeops.services.shopify_service import MockCommerceService  # noqa: E402


def make_openai_client(content):
    """An AsyncOpenAI stand-in whose chat completion returns `content`."""
    completion = MagicMock()
    completion.choices = [MagicMock(message=MagicMock(content=content))]
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion)
    return client


@pytest.fixture
def mock_store():
    return MockCatalogStore()


@pytest.fixture
def mock_commerce(mock_store):
    return MockCommerceService(store=mock_store, rng=random.Random(42))


@pytest.fixture
def dispatcher(mock_commerce):
    return ActionDispatcher(mock_commerce)


@pytest.fixture
def ai_for():
    """Builds an AIService whose model always replies with the given text."""
    def _build(content):
        return AIService(api_key=None, model="gpt-4o-mini", max_tokens=400, client=make_openai_client(content))
    return _build


@pytest.fixture(scope="function")
def test_client():
    """Provides a TestClient for API integration tests."""
    with TestClient(app) as client:
        yield client
