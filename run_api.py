#!/usr/bin/env python3
"""
Script to run the bookstore backend API server.
"""

import sys
from pathlib import Path

import uvicorn

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from api.main import create_app
from utilities.config import ServerConfig
from utilities.logger import setup_logging, get_logger


def main():
    """Run the API server."""
    config = ServerConfig()
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        debug=config.debug
    )

    logger = get_logger(__name__)
    logger.info(
        "Starting bookstore API server",
        host=config.host,
        port=config.server_port,
        database=config.db_name,
        collection=config.collection_name,
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
