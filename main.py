"""
Affirmation reminder service - main entry point.

Runs the API server; the reminder scheduler starts and stops with it.
"""

import argparse

import uvicorn

from config.settings import settings
from core import configure_logging, get_logger

logger = get_logger(__name__)


def main():
    """Start the API server (and with it the reminder scheduler)."""
    parser = argparse.ArgumentParser(description="Affirmation reminder service")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Port (default: settings.PORT)")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    args = parser.parse_args()

    configure_logging()

    logger.info("=" * 50)
    logger.info("Affirmation reminder service starting...", port=args.port, environment=settings.ENVIRONMENT)
    logger.info("=" * 50)

    try:
        uvicorn.run(
            "api.server:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=settings.LOG_LEVEL.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")


if __name__ == "__main__":
    main()
