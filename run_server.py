#!/usr/bin/env python3
"""
Startup script for the CodeMove room server
"""

import uvicorn
import logging
from app.core.settings import reload_settings
from codemove.parse_args import overrides, parse_args

if __name__ == "__main__":
    # Command-line options win over environment variables
    settings = reload_settings(**overrides(parse_args()))

    # Configure logging
    logging.basicConfig(level=getattr(logging, settings.log_level.upper()))
    logger = logging.getLogger(__name__)

    logger.info(f"Starting {settings.app_name} server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Host: {settings.host}:{settings.port}")
    logger.info(f"Mentor reclaim: {'enabled' if settings.allow_mentor_reclaim else 'disabled'}")

    # Run the server
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
        access_log=True
    )
