"""
Pydantic models for license data and request/response validation.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class LicenseResult(BaseModel):
    """The persisted pair of base64 blobs produced by the codec."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    encrypted_license: str = Field(alias="EncryptedLicense")
    encrypted_private_key: str = Field(alias="EncryptedPrivateKey")


class LicenseEntitlement(BaseModel):
    """The JSON document sealed inside a client license."""

    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(alias="clientId")
    start_date: datetime = Field(alias="startDate")
    end_date: datetime = Field(alias="endDate")
    features: dict[str, bool] = Field(default_factory=dict)
    max_users: int | None = Field(default=None, alias="maxUsers", gt=0)

    def to_payload(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def is_active(self, at: datetime) -> bool:
        return self.start_date <= at <= self.end_date


class ClientLicenseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    start_date: datetime | None = None
    end_date: datetime | None = None
    features: dict[str, bool] = Field(default_factory=dict)
    max_users: int | None = Field(default=None, gt=0)


class ClientLicenseUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    start_date: datetime | None = None
    end_date: datetime | None = None
    features: dict[str, bool] | None = None
    max_users: int | None = Field(default=None, gt=0)


class ClientLicenseView(BaseModel):
    row_id: str
    client_id: str
    name: str
    description: str | None = None
    start_date: datetime
    end_date: datetime
    license_key: str
    created_at: datetime
    modified_at: datetime


class ClientLicenseRecord(ClientLicenseView):
    """Stored license row: non-secret metadata plus the codec output."""

    private_key: str
    is_deleted: bool = False

    def license_result(self) -> LicenseResult:
        return LicenseResult(
            encrypted_license=self.license_key,
            encrypted_private_key=self.private_key,
        )

    def to_view(self) -> ClientLicenseView:
        return ClientLicenseView(
            **self.model_dump(exclude={"private_key", "is_deleted"})
        )


class EncryptRequest(BaseModel):
    payload: str
    tenant_id: str


class DecryptRequest(BaseModel):
    result: LicenseResult
    tenant_id: str


class DecryptResponse(BaseModel):
    payload: str
