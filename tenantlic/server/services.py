"""Business logic for client licenses.
"""

from __future__ import annotations

import calendar
import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pydantic import ValidationError

from tenantlic.common.exceptions import (
    ArgumentError,
    FormatError,
    NotFoundError,
    RecordValidationError,
)
from tenantlic.common.models import (
    ClientLicenseCreate,
    ClientLicenseRecord,
    ClientLicenseUpdate,
    ClientLicenseView,
    LicenseEntitlement,
)

if TYPE_CHECKING:
    from tenantlic.common.config import Config
    from tenantlic.common.interfaces import ILicenseCodec, ILicenseStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def add_months(value: datetime, months: int) -> datetime:
    """Shift a datetime by whole months, clamping to the month's last day."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _check_window(start: datetime, end: datetime) -> None:
    if end <= start:
        msg = "End Date must be later than Start Date"
        raise RecordValidationError(msg)


class ClientLicenseService:
    """Creates, reads, updates and deletes encrypted client licenses."""

    def __init__(
        self,
        store: ILicenseStore,
        codec: ILicenseCodec,
        config: Config,
        logger: logging.Logger | None = None,
    ):
        self.store = store
        self.codec = codec
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def create(self, client_id: str, data: ClientLicenseCreate) -> ClientLicenseView:
        """Issue a new license for client_id."""
        if not isinstance(client_id, str) or not client_id.strip():
            msg = "Client identifier cannot be null or empty"
            raise ArgumentError(msg)

        start = _as_utc(data.start_date) or _utcnow()
        end = _as_utc(data.end_date) or add_months(
            start, self.config.DEFAULT_LICENSE_MONTHS
        )
        _check_window(start, end)

        entitlement = LicenseEntitlement(
            client_id=client_id,
            start_date=start,
            end_date=end,
            features=data.features,
            max_users=data.max_users,
        )
        result = self.codec.encrypt_license(entitlement.to_payload(), client_id)

        now = _utcnow()
        record = ClientLicenseRecord(
            row_id=uuid.uuid4().hex,
            client_id=client_id,
            name=data.name,
            description=data.description,
            start_date=start,
            end_date=end,
            license_key=result.encrypted_license,
            private_key=result.encrypted_private_key,
            created_at=now,
            modified_at=now,
        )
        self.store.add(record)
        self.logger.info("Created license %s for client %s", record.row_id, client_id)
        return record.to_view()

    def list(self) -> list[ClientLicenseView]:
        return [r.to_view() for r in self.store.list()]

    def get(self, row_id: str) -> ClientLicenseView:
        return self._get_record(row_id).to_view()

    def update(self, row_id: str, data: ClientLicenseUpdate) -> ClientLicenseView:
        """Apply a partial update and re-seal the entitlement."""
        record = self._get_record(row_id)
        current = self._decrypt(record)
        fields = data.model_fields_set

        start = _as_utc(data.start_date) or record.start_date
        end = _as_utc(data.end_date) or record.end_date
        _check_window(start, end)

        entitlement = LicenseEntitlement(
            client_id=record.client_id,
            start_date=start,
            end_date=end,
            features=data.features if data.features is not None else current.features,
            max_users=data.max_users if "max_users" in fields else current.max_users,
        )
        result = self.codec.encrypt_license(entitlement.to_payload(), record.client_id)

        updated = record.model_copy(
            update={
                "name": data.name or record.name,
                "description": (
                    data.description if "description" in fields else record.description
                ),
                "start_date": start,
                "end_date": end,
                "license_key": result.encrypted_license,
                "private_key": result.encrypted_private_key,
                "modified_at": _utcnow(),
            }
        )
        self.store.update(updated)
        self.logger.info("Updated license %s", row_id)
        return updated.to_view()

    def delete(self, row_id: str) -> None:
        if not self.store.delete(row_id):
            msg = f"License info with id {row_id} not found"
            raise NotFoundError(msg)
        self.logger.info("Deleted license %s", row_id)

    def read_entitlement(self, row_id: str) -> LicenseEntitlement:
        """Decrypt the stored license with the record's client id."""
        return self._decrypt(self._get_record(row_id))

    def is_active(self, row_id: str, at: datetime | None = None) -> bool:
        entitlement = self.read_entitlement(row_id)
        return entitlement.is_active(_as_utc(at) or _utcnow())

    def _get_record(self, row_id: str) -> ClientLicenseRecord:
        record = self.store.get(row_id)
        if record is None:
            msg = f"License info with id {row_id} not found"
            raise NotFoundError(msg)
        if not record.license_key:
            self.logger.warning("License %s has no license key", row_id)
            msg = f"License info with id {row_id} has invalid license data"
            raise NotFoundError(msg)
        return record

    def _decrypt(self, record: ClientLicenseRecord) -> LicenseEntitlement:
        payload = self.codec.decrypt_license(record.license_result(), record.client_id)
        try:
            return LicenseEntitlement.model_validate_json(payload)
        except ValidationError as err:
            msg = f"License {record.row_id} does not hold a valid entitlement"
            raise FormatError(msg) from err
