"""
Booking engine API entry point.

Serves the availability and price-quote endpoints with uvicorn.

Usage:
    python main.py                 # 127.0.0.1:8000
    python main.py 0.0.0.0 8080
"""

import logging
import sys

import uvicorn

from booking_engine.api import create_app
from booking_engine.config import settings

logger = logging.getLogger(__name__)

app = create_app()


def _run(host: str, port: int) -> None:
    logger.info("Starting %s on %s:%d", settings.app_name, host, port)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    host = sys.argv[1] if len(sys.argv) > 1 else "127.0.0.1"
    port = int(sys.argv[2]) if len(sys.argv) > 2 else 8000
    _run(host, port)
