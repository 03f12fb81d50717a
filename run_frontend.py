#!/usr/bin/env python3
"""
Script to run the bookstore frontend server.
"""

import sys
from pathlib import Path

import uvicorn

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from frontend.main import create_app
from utilities.config import FrontendConfig
from utilities.logger import setup_logging, get_logger


def main():
    """Run the frontend server."""
    config = FrontendConfig()
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        debug=config.debug
    )

    logger = get_logger(__name__)
    logger.info(
        "Starting bookstore frontend server",
        host=config.host,
        port=config.server_port,
        api_uri=config.api_uri,
        debug=config.debug
    )

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.server_port,
        log_level=config.effective_log_level().lower(),
        access_log=False
    )


if __name__ == "__main__":
    main()
