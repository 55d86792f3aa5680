# Tenant license encryption

from tenantlic.common.codec import LicenseCodec, decrypt_license, encrypt_license
from tenantlic.common.exceptions import (
    ArgumentError,
    CryptographicError,
    DecryptionFailed,
    FormatError,
    LicenseError,
)
from tenantlic.common.models import LicenseResult

__all__ = [
    "ArgumentError",
    "CryptographicError",
    "DecryptionFailed",
    "FormatError",
    "LicenseCodec",
    "LicenseError",
    "LicenseResult",
    "decrypt_license",
    "encrypt_license",
]
