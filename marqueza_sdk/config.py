# marqueza_sdk/config.py
import logging
import os

from dotenv import load_dotenv
from rich.logging import RichHandler

load_dotenv()

API_BASE_URL = os.getenv("MARQUEZA_API_URL", "http://localhost:4000/api")
REQUEST_TIMEOUT = float(os.getenv("MARQUEZA_TIMEOUT", "10"))
API_TOKEN = os.getenv("MARQUEZA_TOKEN")
LOG_LEVEL = os.getenv("MARQUEZA_LOG_LEVEL", "WARNING").upper()

# Flat shipping fee shown on the order summary
SHIPPING_FEE = float(os.getenv("MARQUEZA_SHIPPING_FEE", "10.00"))
LOW_STOCK_THRESHOLD = int(os.getenv("MARQUEZA_LOW_STOCK", "5"))


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
