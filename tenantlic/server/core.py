"""
License server using FastAPI.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import FastAPI

from tenantlic.common.codec import LicenseCodec
from tenantlic.common.config import Config
from tenantlic.common.mixins import Configurable

from .persistence import LicenseStore
from .routes import LicenseRoutes
from .services import ClientLicenseService


class LicenseServer(Configurable):
    """Wires the store, codec, service and routes into a FastAPI app."""

    log_level: int
    admin_password: str | None
    server_host: str
    server_port: int
    license_store_path: Path

    def __init__(self, config: Config | None = None, **overrides: Any):
        self.config = config or Config()
        self.apply_overrides(
            overrides,
            self.config,
            [
                "log_level",
                "admin_password",
                "server_host",
                "server_port",
                "license_store_path",
            ],
        )
        self.license_store_path = Path(self.license_store_path)
        self.logger = logging.getLogger(__name__)
        self.logger.setLevel(self.log_level)

        self.codec = LicenseCodec(logger=logging.getLogger("tenantlic.codec"))
        self.store = LicenseStore(self.license_store_path)
        self.service = ClientLicenseService(
            store=self.store, codec=self.codec, config=self.config, logger=self.logger
        )
        self.routes = LicenseRoutes(self.service, self.codec, self.admin_password)

        self.app = FastAPI(title="tenantlic")
        self.routes.setup_routes(self.app)

        self.logger.info(
            "License server configured for http://%s:%s (store: %s)",
            self.server_host,
            self.server_port,
            self.license_store_path,
        )
        if not self.admin_password:
            self.logger.info("Admin password not set; codec endpoints disabled")
