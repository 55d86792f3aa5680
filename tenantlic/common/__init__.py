# Common utilities
from tenantlic.common.codec import LicenseCodec as LicenseCodec
from tenantlic.common.crypto import CryptoUtils as CryptoUtils
from tenantlic.common.logging_utils import setup_logger as setup_logger
from tenantlic.common.mixins import Configurable as Configurable

__all__ = ["Configurable", "CryptoUtils", "LicenseCodec", "setup_logger"]
