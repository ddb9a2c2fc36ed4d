"""
Chat relay server entry point.
"""
import logging

import uvicorn

from config import load_settings
from server import create_app
from server.logging_config import setup_logging


def main() -> None:
    """Start the chat relay server."""
    settings = load_settings()

    # Initialize logging before anything else
    setup_logging(settings.log_level, settings.log_file)
    logger = logging.getLogger(__name__)

    app = create_app(settings)

    logger.info("Server listening on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
