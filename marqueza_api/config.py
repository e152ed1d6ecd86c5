# marqueza_api/config.py
import logging
import os

from dotenv import load_dotenv
from rich.logging import RichHandler

load_dotenv()

# Root for uploaded images; served back under /uploads
UPLOAD_DIR = os.getenv("MARQUEZA_UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))
MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MB
CHUNK_SIZE = 256 * 1024

ALLOWED_ORIGINS = os.getenv("MARQUEZA_ALLOWED_ORIGINS", "http://localhost:5173").split(",")
HOST = os.getenv("MARQUEZA_HOST", "127.0.0.1")
PORT = int(os.getenv("MARQUEZA_PORT", "4000"))
LOG_LEVEL = os.getenv("MARQUEZA_LOG_LEVEL", "INFO").upper()

# Token handed to the seeded demo client so the CLI can log in without a login flow
DEMO_TOKEN = os.getenv("MARQUEZA_DEMO_TOKEN", "demo-token")


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
