#!/usr/bin/env python3
"""
Script to run the Books API server.
"""

import uvicorn
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from books_api.config import config
from books_api.main import app
from utilities.logger import get_logger

logger = get_logger("run_api")


def main():
    """Serve the application in this process; a failed startup ends it with a non-zero status."""
    logger.info(
        "Starting Books API Server",
        host=config.api_host,
        port=config.api_port,
        debug=config.debug
    )

    # Logging is already configured by the app factory; uvicorn must not replace it
    uvicorn.run(
        app,
        host=config.api_host,
        port=config.api_port,
        log_level=config.log_level.lower(),
        log_config=None,
        access_log=True
    )


if __name__ == "__main__":
    main()
