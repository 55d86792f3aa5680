"""Cryptographic primitives for tenant license envelope encryption.

The payload is sealed with AES-256-GCM under a random per-call data key and a
nonce derived from the tenant identifier. The data key is wrapped with
AES-256-CBC under a key derived from the same identifier, so nothing secret
has to be stored per tenant.
"""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from tenantlic.common.exceptions import (
    ArgumentError,
    CryptographicError,
    DecryptionFailed,
)

DATA_KEY_SIZE = 32
WRAP_KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16
NONCE_PREFIX = b"IV-"
WRAP_IV = bytes(16)


def wipe(buffer: bytearray | None) -> None:
    """Overwrite a key buffer with zeros in place."""
    if buffer is not None:
        buffer[:] = bytes(len(buffer))


def _tenant_bytes(tenant_id: str, purpose: str) -> bytes:
    if not isinstance(tenant_id, str) or not tenant_id.strip():
        msg = f"Tenant identifier cannot be null or empty for {purpose}"
        raise ArgumentError(msg)
    try:
        return tenant_id.encode("utf-8")
    except UnicodeEncodeError as err:
        msg = f"Tenant identifier is not valid UTF-8 text for {purpose}"
        raise ArgumentError(msg) from err


def _sha256(data: bytes) -> bytearray:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return bytearray(digest.finalize())


def _check_length(name: str, value: bytes | bytearray, size: int) -> None:
    if len(value) != size:
        msg = f"{name} must be {size} bytes, got {len(value)}"
        raise CryptographicError(msg)


class CryptoUtils:
    """Utility class for cryptographic operations."""

    @staticmethod
    def derive_wrap_key(tenant_id: str) -> bytearray:
        """Derive the 32-byte key-wrapping key: SHA-256 of the tenant id."""
        data = _tenant_bytes(tenant_id, "key derivation")
        try:
            return _sha256(data)
        except (UnsupportedAlgorithm, TypeError, ValueError) as err:
            msg = "Failed to derive key from tenant identifier"
            raise CryptographicError(msg) from err

    @staticmethod
    def derive_nonce(tenant_id: str) -> bytes:
        """Derive the 12-byte GCM nonce from the prefixed tenant id."""
        data = _tenant_bytes(tenant_id, "nonce derivation")
        try:
            digest = _sha256(NONCE_PREFIX + data)
        except (UnsupportedAlgorithm, TypeError, ValueError) as err:
            msg = "Failed to derive nonce from tenant identifier"
            raise CryptographicError(msg) from err
        nonce = bytes(digest[:NONCE_SIZE])
        wipe(digest)
        return nonce

    @staticmethod
    def generate_data_key() -> bytearray:
        """Draw a fresh 32-byte data key from the OS CSPRNG.

        Never cache or derive this value: the per-tenant nonce is fixed, so a
        fresh key per call is what keeps (key, nonce) pairs unique.
        """
        try:
            return bytearray(os.urandom(DATA_KEY_SIZE))
        except (OSError, NotImplementedError) as err:
            msg = "Failed to generate secure random data key"
            raise CryptographicError(msg) from err

    @staticmethod
    def encrypt_payload(
        plaintext: bytes, data_key: bytes | bytearray, nonce: bytes
    ) -> tuple[bytes, bytes]:
        """Seal plaintext with AES-256-GCM. Returns (ciphertext, tag)."""
        _check_length("Data key", data_key, DATA_KEY_SIZE)
        _check_length("Nonce", nonce, NONCE_SIZE)
        try:
            sealed = AESGCM(data_key).encrypt(nonce, plaintext, None)
        except (TypeError, ValueError, OverflowError) as err:
            msg = "Failed to encrypt license payload"
            raise CryptographicError(msg) from err
        return sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]

    @staticmethod
    def decrypt_payload(
        ciphertext: bytes,
        tag: bytes,
        data_key: bytes | bytearray,
        nonce: bytes,
    ) -> bytes:
        """Authenticate and open an AES-256-GCM payload."""
        _check_length("Data key", data_key, DATA_KEY_SIZE)
        _check_length("Nonce", nonce, NONCE_SIZE)
        _check_length("Authentication tag", tag, TAG_SIZE)
        try:
            return AESGCM(data_key).decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as err:
            raise DecryptionFailed from err
        except (TypeError, ValueError, OverflowError) as err:
            msg = "Failed to decrypt license payload"
            raise CryptographicError(msg) from err

    @staticmethod
    def wrap_data_key(
        data_key: bytes | bytearray, wrap_key: bytes | bytearray
    ) -> bytes:
        """Encrypt the data key with AES-256-CBC, PKCS7 and a zero IV."""
        _check_length("Data key", data_key, DATA_KEY_SIZE)
        _check_length("Wrap key", wrap_key, WRAP_KEY_SIZE)
        padded = None
        try:
            padder = padding.PKCS7(algorithms.AES.block_size).padder()
            padded = bytearray(padder.update(bytes(data_key)) + padder.finalize())
            encryptor = Cipher(algorithms.AES(wrap_key), modes.CBC(WRAP_IV)).encryptor()
            return encryptor.update(bytes(padded)) + encryptor.finalize()
        except (TypeError, ValueError) as err:
            msg = "Failed to wrap data key"
            raise CryptographicError(msg) from err
        finally:
            wipe(padded)

    @staticmethod
    def unwrap_data_key(wrapped: bytes, wrap_key: bytes | bytearray) -> bytearray:
        """Reverse wrap_data_key.

        A wrong wrap key usually fails the padding check, but may also yield
        a wrong key silently; only the payload tag can tell for sure.
        """
        _check_length("Wrap key", wrap_key, WRAP_KEY_SIZE)
        padded = None
        try:
            decryptor = Cipher(algorithms.AES(wrap_key), modes.CBC(WRAP_IV)).decryptor()
            padded = bytearray(decryptor.update(wrapped) + decryptor.finalize())
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            data_key = bytearray(unpadder.update(bytes(padded)) + unpadder.finalize())
        except (TypeError, ValueError) as err:
            msg = "Failed to unwrap data key"
            raise CryptographicError(msg) from err
        finally:
            wipe(padded)

        if len(data_key) != DATA_KEY_SIZE:
            wipe(data_key)
            msg = "Unwrapped data key has an invalid length"
            raise CryptographicError(msg)
        return data_key
