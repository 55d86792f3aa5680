"""
Configuration settings for the tenant license system.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path


class Config:
    """Central configuration class for all system settings."""

    def __init__(self) -> None:
        # Server settings
        self.ADMIN_PASSWORD: str | None = os.getenv("TENANTLIC_ADMIN_PASSWORD")
        self.SERVER_HOST: str = os.getenv("TENANTLIC_SERVER_HOST", "127.0.0.1")
        self.SERVER_PORT: int = int(os.getenv("TENANTLIC_SERVER_PORT", "8000"))
        self.SERVER_URL: str = f"http://{self.SERVER_HOST}:{self.SERVER_PORT}"
        self.CLIENT_TIMEOUT: float = 10.0

        # File paths
        self.DATA_DIR: Path = Path(
            os.getenv("TENANTLIC_DATA_DIR", str(Path.cwd() / "data"))
        )
        self.LICENSE_STORE_PATH: Path = self.DATA_DIR / "licenses.json"

        # License record rules
        self.DEFAULT_LICENSE_MONTHS: int = 6

        # Logging
        level_name = os.getenv("TENANTLIC_LOG_LEVEL", "INFO").upper()
        self.LOG_LEVEL: int = logging.getLevelName(level_name)
        if not isinstance(self.LOG_LEVEL, int):
            self.LOG_LEVEL = logging.INFO
