"""
Divination Backend
FastAPI application serving the multi-agent Liu Yao divination pipeline
"""

import logging

import uvicorn

from divination.app import create_app
from divination.config import AppSettings

settings = AppSettings()

# Configure logging
logging.basicConfig(level=settings.log_level.upper())

app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
