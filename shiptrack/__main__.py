"""Run the shipment API with uvicorn: ``python -m shiptrack``."""
from __future__ import annotations

import logging

import uvicorn

from shiptrack.core.config import get_settings
from shiptrack.core.logging_config import setup_logging

logger = logging.getLogger("shiptrack")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    logger.info("Server running on http://localhost:%d", settings.port)
    logger.info("API endpoints available at http://localhost:%d/api", settings.port)
    logger.info("Storing shipments in %s", settings.data_file)
    uvicorn.run(
        "shiptrack.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
