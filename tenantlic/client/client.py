"""
HTTP client for the license server.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from tenantlic.common.config import Config
from tenantlic.common.models import (
    ClientLicenseCreate,
    ClientLicenseUpdate,
    ClientLicenseView,
    LicenseEntitlement,
)

logger = logging.getLogger(__name__)


class LicenseClientError(Exception):
    """Raised when the server answers with an error status."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class LicenseClient:
    """Thin wrapper over the license server's JSON API."""

    def __init__(
        self,
        server_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        config = Config()
        self.server_url = (server_url or config.SERVER_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.CLIENT_TIMEOUT
        self.session = session or requests.Session()

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/health")

    def list_licenses(self) -> list[ClientLicenseView]:
        data = self._request("GET", "/licenses")
        return [ClientLicenseView(**item) for item in data]

    def create_license(self, client_id: str, **fields: Any) -> ClientLicenseView:
        body = ClientLicenseCreate(**fields).model_dump(mode="json", exclude_unset=True)
        data = self._request("POST", f"/licenses/{client_id}", json=body)
        return ClientLicenseView(**data)

    def get_license(self, row_id: str) -> ClientLicenseView:
        return ClientLicenseView(**self._request("GET", f"/licenses/{row_id}"))

    def update_license(self, row_id: str, **fields: Any) -> ClientLicenseView:
        body = ClientLicenseUpdate(**fields).model_dump(mode="json", exclude_unset=True)
        data = self._request("PUT", f"/licenses/{row_id}", json=body)
        return ClientLicenseView(**data)

    def delete_license(self, row_id: str) -> None:
        self._request("DELETE", f"/licenses/{row_id}")

    def get_entitlement(self, row_id: str) -> LicenseEntitlement:
        data = self._request("GET", f"/licenses/{row_id}/entitlement")
        return LicenseEntitlement.model_validate(data)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.server_url}{path}"
        logger.debug("%s %s", method, url)
        response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if response.status_code >= 400:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            logger.warning("%s %s failed: %s %s", method, url, response.status_code, detail)
            raise LicenseClientError(response.status_code, str(detail))
        return response.json()
