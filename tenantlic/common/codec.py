"""
License encryption codec: envelope encryption keyed by a tenant identifier.
"""

from __future__ import annotations

import base64
import binascii
import logging
import time
from collections.abc import Mapping
from typing import Any

from tenantlic.common.crypto import TAG_SIZE, CryptoUtils, wipe
from tenantlic.common.exceptions import (
    ArgumentError,
    CryptographicError,
    DecryptionFailed,
    FormatError,
    LicenseError,
)
from tenantlic.common.models import LicenseResult


def _require_text(value: Any, name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        msg = f"{name} cannot be null or empty"
        raise ArgumentError(msg)
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as err:
        msg = f"{name} is not valid UTF-8 text"
        raise ArgumentError(msg) from err


def _b64decode(value: str, name: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as err:
        msg = f"{name} is not valid base64"
        raise FormatError(msg) from err


def _result_fields(result: Any) -> tuple[str, str]:
    if result is None:
        msg = "License result cannot be null"
        raise ArgumentError(msg)
    if isinstance(result, LicenseResult):
        encrypted_license = result.encrypted_license
        encrypted_key = result.encrypted_private_key
    elif isinstance(result, Mapping):
        encrypted_license = result.get(
            "EncryptedLicense", result.get("encrypted_license")
        )
        encrypted_key = result.get(
            "EncryptedPrivateKey", result.get("encrypted_private_key")
        )
    else:
        msg = f"Unsupported license result type: {type(result).__name__}"
        raise ArgumentError(msg)

    _require_text(encrypted_license, "Encrypted license")
    _require_text(encrypted_key, "Encrypted private key")
    return encrypted_license, encrypted_key


class LicenseCodec:
    """Encrypts and decrypts tenant license payloads.

    Instances hold no key material between calls and are safe to share
    across threads.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def encrypt_license(self, payload: str, tenant_id: str) -> LicenseResult:
        """Seal payload for tenant_id. Each call yields different blobs."""
        method = "encrypt_license"
        started = time.perf_counter()
        self.logger.info("%s - starting license encryption for tenant %s", method, tenant_id)
        try:
            _require_text(payload, "License payload")
            _require_text(tenant_id, "Tenant identifier")
            result = self._seal(payload, tenant_id)
        except LicenseError as err:
            self._log_failure(method, tenant_id, started, err)
            raise

        self.logger.info(
            "%s - license encryption completed for tenant %s in %.2fms",
            method,
            tenant_id,
            self._elapsed_ms(started),
        )
        return result

    def decrypt_license(self, result: LicenseResult | Mapping[str, Any], tenant_id: str) -> str:
        """Recover the payload sealed by encrypt_license for tenant_id.

        Raises DecryptionFailed for a wrong tenant or tampered blobs, without
        telling the caller which layer rejected them.
        """
        method = "decrypt_license"
        started = time.perf_counter()
        self.logger.info("%s - starting license decryption for tenant %s", method, tenant_id)
        try:
            encrypted_license, encrypted_key = _result_fields(result)
            _require_text(tenant_id, "Tenant identifier")
            payload = self._open(encrypted_license, encrypted_key, tenant_id)
        except LicenseError as err:
            self._log_failure(method, tenant_id, started, err)
            raise

        self.logger.info(
            "%s - license decryption completed for tenant %s in %.2fms",
            method,
            tenant_id,
            self._elapsed_ms(started),
        )
        return payload

    def _seal(self, payload: str, tenant_id: str) -> LicenseResult:
        wrap_key = data_key = None
        try:
            wrap_key = CryptoUtils.derive_wrap_key(tenant_id)
            nonce = CryptoUtils.derive_nonce(tenant_id)
            self.logger.debug("encrypt_license - generating random data key")
            data_key = CryptoUtils.generate_data_key()

            self.logger.debug("encrypt_license - encrypting payload with AES-GCM")
            ciphertext, tag = CryptoUtils.encrypt_payload(
                payload.encode("utf-8"), data_key, nonce
            )

            self.logger.debug("encrypt_license - wrapping data key")
            wrapped = CryptoUtils.wrap_data_key(data_key, wrap_key)
        finally:
            wipe(data_key)
            wipe(wrap_key)

        return LicenseResult(
            encrypted_license=base64.b64encode(ciphertext + tag).decode("ascii"),
            encrypted_private_key=base64.b64encode(wrapped).decode("ascii"),
        )

    def _open(self, encrypted_license: str, encrypted_key: str, tenant_id: str) -> str:
        sealed = _b64decode(encrypted_license, "Encrypted license")
        wrapped = _b64decode(encrypted_key, "Encrypted private key")
        if len(sealed) < TAG_SIZE:
            msg = f"Encrypted license is shorter than the {TAG_SIZE}-byte tag"
            raise FormatError(msg)

        wrap_key = data_key = None
        try:
            wrap_key = CryptoUtils.derive_wrap_key(tenant_id)
            self.logger.debug("decrypt_license - unwrapping data key")
            try:
                data_key = CryptoUtils.unwrap_data_key(wrapped, wrap_key)
            except CryptographicError as err:
                raise DecryptionFailed from err

            nonce = CryptoUtils.derive_nonce(tenant_id)
            self.logger.debug("decrypt_license - decrypting payload with AES-GCM")
            plaintext = CryptoUtils.decrypt_payload(
                sealed[:-TAG_SIZE], sealed[-TAG_SIZE:], data_key, nonce
            )
        finally:
            wipe(data_key)
            wipe(wrap_key)

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as err:
            msg = "Decrypted license is not valid UTF-8"
            raise FormatError(msg) from err

    def _log_failure(
        self, method: str, tenant_id: Any, started: float, err: LicenseError
    ) -> None:
        self.logger.error(
            "%s - %s for tenant %s after %.2fms: %s",
            method,
            type(err).__name__,
            tenant_id,
            self._elapsed_ms(started),
            err,
        )

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000


_default_codec = LicenseCodec()


def encrypt_license(payload: str, tenant_id: str) -> LicenseResult:
    """Encrypt with the shared module-level codec."""
    return _default_codec.encrypt_license(payload, tenant_id)


def decrypt_license(result: LicenseResult | Mapping[str, Any], tenant_id: str) -> str:
    """Decrypt with the shared module-level codec."""
    return _default_codec.decrypt_license(result, tenant_id)
