from tenantlic.client.client import LicenseClient, LicenseClientError

__all__ = ["LicenseClient", "LicenseClientError"]
