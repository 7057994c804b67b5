"""Server module entry point for running with python -m server."""

import os

import uvicorn

# Import logging configuration first so the server logs through the package logger
from usefulreadme.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

if __name__ == "__main__":
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "false").lower() == "true"

    configure_logging(os.getenv("USEFULREADME_LOG_LEVEL", "INFO"))
    logger.info(
        "Starting usefulreadme server",
        extra={
            "host": host,
            "port": port,
        },
    )

    uvicorn.run(
        "server.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,  # Disable uvicorn's default logging config
    )
