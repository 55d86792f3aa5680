import hashlib

import pytest

from tenantlic.common.crypto import (
    DATA_KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    CryptoUtils,
    wipe,
)
from tenantlic.common.exceptions import (
    ArgumentError,
    CryptographicError,
    DecryptionFailed,
)


def test_derive_wrap_key_is_sha256_of_tenant_id() -> None:
    key = CryptoUtils.derive_wrap_key("42")
    assert len(key) == 32  # noqa: PLR2004
    assert bytes(key) == hashlib.sha256(b"42").digest()
    assert CryptoUtils.derive_wrap_key("42") == key


def test_derive_nonce_uses_prefixed_preimage() -> None:
    nonce = CryptoUtils.derive_nonce("42")
    assert len(nonce) == NONCE_SIZE
    assert nonce == hashlib.sha256(b"IV-42").digest()[:NONCE_SIZE]
    assert nonce != bytes(CryptoUtils.derive_wrap_key("42"))[:NONCE_SIZE]


@pytest.mark.parametrize("tenant_id", [None, "", "   ", 42])
def test_derivations_reject_missing_tenant_id(tenant_id) -> None:
    with pytest.raises(ArgumentError):
        CryptoUtils.derive_wrap_key(tenant_id)
    with pytest.raises(ArgumentError):
        CryptoUtils.derive_nonce(tenant_id)


def test_generate_data_key_is_fresh_each_call() -> None:
    first = CryptoUtils.generate_data_key()
    second = CryptoUtils.generate_data_key()
    assert len(first) == DATA_KEY_SIZE
    assert isinstance(first, bytearray)
    assert first != second


def test_generate_data_key_wraps_rng_failure(monkeypatch) -> None:
    def broken(_: int) -> bytes:
        raise OSError("no entropy")

    monkeypatch.setattr("tenantlic.common.crypto.os.urandom", broken)
    with pytest.raises(CryptographicError) as exc_info:
        CryptoUtils.generate_data_key()
    assert isinstance(exc_info.value.__cause__, OSError)


def test_payload_cipher_round_trip() -> None:
    key = CryptoUtils.generate_data_key()
    nonce = CryptoUtils.derive_nonce("tenant")
    ciphertext, tag = CryptoUtils.encrypt_payload(b"hello", key, nonce)
    assert len(tag) == TAG_SIZE
    assert len(ciphertext) == len(b"hello")
    assert CryptoUtils.decrypt_payload(ciphertext, tag, key, nonce) == b"hello"


def test_payload_cipher_rejects_bad_tag() -> None:
    key = CryptoUtils.generate_data_key()
    nonce = CryptoUtils.derive_nonce("tenant")
    ciphertext, tag = CryptoUtils.encrypt_payload(b"hello", key, nonce)
    bad_tag = bytes([tag[0] ^ 0x01]) + tag[1:]
    with pytest.raises(DecryptionFailed):
        CryptoUtils.decrypt_payload(ciphertext, bad_tag, key, nonce)


def test_payload_cipher_rejects_wrong_key_length() -> None:
    nonce = CryptoUtils.derive_nonce("tenant")
    with pytest.raises(CryptographicError):
        CryptoUtils.encrypt_payload(b"hello", bytes(16), nonce)


def test_key_wrap_round_trip() -> None:
    data_key = CryptoUtils.generate_data_key()
    wrap_key = CryptoUtils.derive_wrap_key("tenant")
    wrapped = CryptoUtils.wrap_data_key(data_key, wrap_key)
    assert len(wrapped) == 48  # noqa: PLR2004
    assert CryptoUtils.unwrap_data_key(wrapped, wrap_key) == data_key


def test_unwrap_rejects_truncated_input() -> None:
    wrap_key = CryptoUtils.derive_wrap_key("tenant")
    with pytest.raises(CryptographicError):
        CryptoUtils.unwrap_data_key(b"\x00" * 10, wrap_key)


def test_wipe_zeroes_buffer_in_place() -> None:
    buffer = bytearray(b"secret")
    wipe(buffer)
    assert buffer == bytearray(6)
    wipe(None)
