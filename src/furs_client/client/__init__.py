"""
Client module for the FURS SDK
"""

from furs_client.client.furs_client import FursClient
from furs_client.client.http_client import (
    HttpClient,
    HttpRequestOptions,
    HttpResponse,
    HttpAuditEntry,
    bundle_to_temp_pem_files,
    cleanup_pem_files,
)

__all__ = [
    "FursClient",
    "HttpClient",
    "HttpRequestOptions",
    "HttpResponse",
    "HttpAuditEntry",
    "bundle_to_temp_pem_files",
    "cleanup_pem_files",
]
