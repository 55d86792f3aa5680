"""
License server package: app factory and uvicorn entry point.
"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from tenantlic.common.config import Config
from tenantlic.common.logging_utils import setup_logger

from .core import LicenseServer


def create_app(config: Config | None = None) -> FastAPI:
    """Build the FastAPI app with package logging configured."""
    config = config or Config()
    setup_logger(logging.getLogger("tenantlic"), config.LOG_LEVEL)
    return LicenseServer(config=config).app


def start_server(config: Config | None = None) -> None:
    """Serve the license API on the configured host and port."""
    config = config or Config()
    uvicorn.run(
        create_app(config),
        host=config.SERVER_HOST,
        port=config.SERVER_PORT,
        log_level=logging.getLevelName(config.LOG_LEVEL).lower(),
    )


__all__ = ["LicenseServer", "create_app", "start_server"]
