"""
Data persistence for client license records.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path  # noqa: TC003

from pydantic import ValidationError

from tenantlic.common.exceptions import NotFoundError
from tenantlic.common.models import ClientLicenseRecord

logger = logging.getLogger(__name__)


class LicenseStore:
    """Keeps license records in a JSON file keyed by row id."""

    def __init__(self, file_path: Path):
        self.file_path = file_path
        self._lock = threading.RLock()
        self._records: dict[str, ClientLicenseRecord] = self.load()

    @property
    def corrupt_path(self) -> Path:
        return self.file_path.with_name(self.file_path.name + ".corrupt")

    def load(self) -> dict[str, ClientLicenseRecord]:
        """Load records from file.

        A missing file loads as empty. An unreadable file is moved aside to
        ``<name>.corrupt`` so the next save cannot overwrite it.
        """
        try:
            with self.file_path.open() as f:
                data = json.load(f)
            return {k: ClientLicenseRecord(**v) for k, v in data.items()}
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, ValidationError, AttributeError, TypeError):
            os.replace(self.file_path, self.corrupt_path)
            logger.warning(
                "Unreadable license store %s moved to %s",
                self.file_path,
                self.corrupt_path,
            )
            return {}

    def save(self) -> None:
        """Save records atomically: write a temp file, then replace."""
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        data = {k: v.model_dump(mode="json") for k, v in self._records.items()}
        fd, tmp_name = tempfile.mkstemp(
            dir=self.file_path.parent, prefix=f".{self.file_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def add(self, record: ClientLicenseRecord) -> ClientLicenseRecord:
        with self._lock:
            self._records[record.row_id] = record
            self.save()
        return record

    def get(self, row_id: str) -> ClientLicenseRecord | None:
        with self._lock:
            record = self._records.get(row_id)
        if record is None or record.is_deleted:
            return None
        return record

    def list(self) -> list[ClientLicenseRecord]:
        with self._lock:
            records = [*self._records.values()]
        return [r for r in records if not r.is_deleted and r.license_key]

    def update(self, record: ClientLicenseRecord) -> ClientLicenseRecord:
        with self._lock:
            if record.row_id not in self._records:
                msg = f"License info with id {record.row_id} not found"
                raise NotFoundError(msg)
            self._records[record.row_id] = record
            self.save()
        return record

    def delete(self, row_id: str) -> bool:
        """Soft-delete a record. Returns False if it was not found."""
        with self._lock:
            record = self.get(row_id)
            if record is None:
                return False
            self._records[row_id] = record.model_copy(update={"is_deleted": True})
            self.save()
        return True
