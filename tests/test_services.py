from datetime import datetime, timezone
from pathlib import Path

import pytest

from tenantlic.common.codec import LicenseCodec
from tenantlic.common.config import Config
from tenantlic.common.exceptions import (
    ArgumentError,
    DecryptionFailed,
    NotFoundError,
    RecordValidationError,
)
from tenantlic.common.models import ClientLicenseCreate, ClientLicenseUpdate
from tenantlic.server.persistence import LicenseStore
from tenantlic.server.services import ClientLicenseService, add_months

JAN_1 = datetime(2025, 1, 1, tzinfo=timezone.utc)
DEC_31 = datetime(2025, 12, 31, tzinfo=timezone.utc)


@pytest.fixture
def service(tmp_path: Path) -> ClientLicenseService:
    return ClientLicenseService(
        store=LicenseStore(tmp_path / "licenses.json"),
        codec=LicenseCodec(),
        config=Config(),
    )


def test_create_encrypts_entitlement(service: ClientLicenseService) -> None:
    view = service.create(
        "42",
        ClientLicenseCreate(
            name="Acme-License",
            start_date=JAN_1,
            end_date=DEC_31,
            features={"reports": True},
            max_users=10,
        ),
    )
    assert view.client_id == "42"
    assert view.license_key

    entitlement = service.read_entitlement(view.row_id)
    assert entitlement.client_id == "42"
    assert entitlement.start_date == JAN_1
    assert entitlement.end_date == DEC_31
    assert entitlement.features == {"reports": True}
    assert entitlement.max_users == 10  # noqa: PLR2004


def test_create_defaults_to_six_month_window(service: ClientLicenseService) -> None:
    view = service.create("42", ClientLicenseCreate(name="Acme", start_date=JAN_1))
    assert view.end_date == datetime(2025, 7, 1, tzinfo=timezone.utc)


def test_create_treats_naive_dates_as_utc(service: ClientLicenseService) -> None:
    view = service.create(
        "42", ClientLicenseCreate(name="Acme", start_date=datetime(2025, 1, 1))
    )
    assert view.start_date == JAN_1


def test_create_rejects_inverted_window(service: ClientLicenseService) -> None:
    with pytest.raises(RecordValidationError):
        service.create(
            "42", ClientLicenseCreate(name="Acme", start_date=DEC_31, end_date=JAN_1)
        )


def test_create_rejects_blank_client(service: ClientLicenseService) -> None:
    with pytest.raises(ArgumentError):
        service.create(" ", ClientLicenseCreate(name="Acme"))


def test_update_reseals_and_keeps_entitlement(service: ClientLicenseService) -> None:
    view = service.create(
        "42",
        ClientLicenseCreate(
            name="Acme", start_date=JAN_1, end_date=DEC_31, max_users=5
        ),
    )
    updated = service.update(
        view.row_id,
        ClientLicenseUpdate(end_date=datetime(2026, 6, 30, tzinfo=timezone.utc)),
    )
    assert updated.name == "Acme"
    assert updated.license_key != view.license_key

    entitlement = service.read_entitlement(view.row_id)
    assert entitlement.end_date == datetime(2026, 6, 30, tzinfo=timezone.utc)
    assert entitlement.max_users == 5  # noqa: PLR2004


def test_update_can_clear_seat_count(service: ClientLicenseService) -> None:
    view = service.create("42", ClientLicenseCreate(name="Acme", max_users=5))
    service.update(view.row_id, ClientLicenseUpdate(max_users=None))
    assert service.read_entitlement(view.row_id).max_users is None


def test_list_get_delete(service: ClientLicenseService) -> None:
    first = service.create("1", ClientLicenseCreate(name="One"))
    second = service.create("2", ClientLicenseCreate(name="Two"))
    assert {v.row_id for v in service.list()} == {first.row_id, second.row_id}

    service.delete(first.row_id)
    assert [v.row_id for v in service.list()] == [second.row_id]
    with pytest.raises(NotFoundError):
        service.get(first.row_id)
    with pytest.raises(NotFoundError):
        service.delete(first.row_id)


def test_is_active(service: ClientLicenseService) -> None:
    view = service.create(
        "42", ClientLicenseCreate(name="Acme", start_date=JAN_1, end_date=DEC_31)
    )
    assert service.is_active(view.row_id, datetime(2025, 6, 1, tzinfo=timezone.utc))
    assert not service.is_active(view.row_id, datetime(2026, 6, 1))


def test_swapped_client_fails_decryption(service: ClientLicenseService) -> None:
    view = service.create("42", ClientLicenseCreate(name="Acme"))
    record = service.store.get(view.row_id)
    service.store.update(record.model_copy(update={"client_id": "43"}))
    with pytest.raises(DecryptionFailed):
        service.read_entitlement(view.row_id)


@pytest.mark.parametrize(
    ("start", "months", "expected"),
    [
        (datetime(2025, 1, 31), 1, datetime(2025, 2, 28)),
        (datetime(2025, 8, 15), 6, datetime(2026, 2, 15)),
        (datetime(2024, 8, 31), 6, datetime(2025, 2, 28)),
    ],
)
def test_add_months(start: datetime, months: int, expected: datetime) -> None:
    assert add_months(start, months) == expected


def test_record_without_license_key_is_not_found(service: ClientLicenseService) -> None:
    view = service.create("42", ClientLicenseCreate(name="Acme"))
    record = service.store.get(view.row_id)
    service.store.update(record.model_copy(update={"license_key": ""}))
    with pytest.raises(NotFoundError):
        service.get(view.row_id)
    with pytest.raises(NotFoundError):
        service.read_entitlement(view.row_id)
