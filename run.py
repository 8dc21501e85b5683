#!/usr/bin/env python3
"""
Deployment entry point.
Loads configuration once, configures logging and starts the server.
"""

import logging
import sys

import uvicorn

from config import load_settings, validate_config

def main():
    settings = load_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    try:
        validate_config(settings)
    except ValueError as e:
        logger.error(f"Failed to start application: {e}")
        sys.exit(1)

    from main import create_app

    logger.info(f"Starting Slacky in {settings.ENVIRONMENT} on port {settings.PORT}")
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True
    )

if __name__ == "__main__":
    main()
