"""
Routes for the license server.
"""

import hmac
import time
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from fastapi import FastAPI, Header, HTTPException

from tenantlic.common.exceptions import LicenseError
from tenantlic.common.models import (
    ClientLicenseCreate,
    ClientLicenseUpdate,
    ClientLicenseView,
    DecryptRequest,
    DecryptResponse,
    EncryptRequest,
    LicenseEntitlement,
    LicenseResult,
)

if TYPE_CHECKING:
    from tenantlic.common.interfaces import ILicenseCodec
    from tenantlic.server.services import ClientLicenseService

T = TypeVar("T")


def _handle(func: Callable[..., T], *args: Any) -> T:
    try:
        return func(*args)
    except LicenseError as e:
        raise HTTPException(e.status_code, str(e)) from e


class LicenseRoutes:
    """Handles FastAPI routes for the license server."""

    def __init__(
        self,
        service: "ClientLicenseService",
        codec: "ILicenseCodec",
        admin_password: str | None,
    ):
        self.service = service
        self.codec = codec
        self.admin_password = admin_password

    def setup_routes(self, app: FastAPI) -> None:
        """Setup API routes on the FastAPI app."""

        app.get("/health")(self.health)
        app.get("/licenses")(self.list_licenses)
        app.post("/licenses/{client_id}", status_code=201)(self.create_license)
        app.get("/licenses/{row_id}")(self.get_license)
        app.put("/licenses/{row_id}")(self.update_license)
        app.delete("/licenses/{row_id}")(self.delete_license)
        app.get("/licenses/{row_id}/entitlement")(self.get_entitlement)
        if self.admin_password:
            app.post("/codec/encrypt")(self.encrypt)
            app.post("/codec/decrypt")(self.decrypt)

    async def health(self) -> dict[str, Any]:
        """Handle /health endpoint."""
        return {"status": "ok", "timestamp": int(time.time())}

    async def list_licenses(self) -> list[ClientLicenseView]:
        return _handle(self.service.list)

    async def create_license(
        self, client_id: str, req: ClientLicenseCreate
    ) -> ClientLicenseView:
        return _handle(self.service.create, client_id, req)

    async def get_license(self, row_id: str) -> ClientLicenseView:
        return _handle(self.service.get, row_id)

    async def update_license(
        self, row_id: str, req: ClientLicenseUpdate
    ) -> ClientLicenseView:
        return _handle(self.service.update, row_id, req)

    async def delete_license(self, row_id: str) -> dict[str, str]:
        _handle(self.service.delete, row_id)
        return {"deleted": row_id}

    async def get_entitlement(self, row_id: str) -> LicenseEntitlement:
        return _handle(self.service.read_entitlement, row_id)

    async def encrypt(
        self,
        req: EncryptRequest,
        x_admin_password: str | None = Header(default=None),
    ) -> LicenseResult:
        """Handle /codec/encrypt endpoint."""
        self._check_admin(x_admin_password)
        return _handle(self.codec.encrypt_license, req.payload, req.tenant_id)

    async def decrypt(
        self,
        req: DecryptRequest,
        x_admin_password: str | None = Header(default=None),
    ) -> DecryptResponse:
        """Handle /codec/decrypt endpoint."""
        self._check_admin(x_admin_password)
        payload = _handle(self.codec.decrypt_license, req.result, req.tenant_id)
        return DecryptResponse(payload=payload)

    def _check_admin(self, password: str | None) -> None:
        if not self.admin_password or password is None or not hmac.compare_digest(
            password.encode(), self.admin_password.encode()
        ):
            raise HTTPException(403, "Invalid admin password")
