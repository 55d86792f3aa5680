"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from tenantlic.common.models import ClientLicenseRecord, LicenseResult


@runtime_checkable
class ILicenseCodec(Protocol):
    """Protocol for license payload encryption."""

    def encrypt_license(self, payload: str, tenant_id: str) -> LicenseResult: ...

    def decrypt_license(
        self, result: LicenseResult | Mapping[str, Any], tenant_id: str
    ) -> str: ...


@runtime_checkable
class ILicenseStore(Protocol):
    """Protocol for license record persistence."""

    def add(self, record: ClientLicenseRecord) -> ClientLicenseRecord: ...

    def get(self, row_id: str) -> ClientLicenseRecord | None: ...

    def list(self) -> list[ClientLicenseRecord]: ...

    def update(self, record: ClientLicenseRecord) -> ClientLicenseRecord: ...

    def delete(self, row_id: str) -> bool: ...
