import sys
import asyncio
import logging

# Load environment variables before the app settings are read.
from dotenv import load_dotenv
load_dotenv()

from storeops.services.message_service import message_service  # noqa: E402
from storeops.services.shopify_service import commerce_service  # noqa: E402

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


async def main():
    """
    Type messages as the store owner would send them on WhatsApp and read the
    replies. Set MOCK_MODE=true to try it without touching a real store.
    """
    logger.info(f"Console chat started in {commerce_service.mode} mode. Ctrl+D to quit.")
    try:
        while True:
            line = await asyncio.to_thread(sys.stdin.readline)
            if not line:
                break
            reply = await message_service.handle_message(line)
            if reply is not None:
                print(f"> {reply}", flush=True)
    finally:
        await commerce_service.aclose()


if __name__ == "__main__":
    asyncio.run(main())
