import logging

import uvicorn

from file_gateway.core.config import get_settings
from file_gateway.core.logging import setup_logging

logger = logging.getLogger("file_gateway")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Server is running on port %s", settings.port)
    uvicorn.run(
        "file_gateway.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
