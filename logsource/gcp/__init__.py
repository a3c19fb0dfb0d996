"""Google Cloud provider implementation."""

from .auth import build_credentials, gce_default_project
from .client import GoogleCloudLoggingClient, to_raw_record

__all__ = [
    "GoogleCloudLoggingClient",
    "build_credentials",
    "gce_default_project",
    "to_raw_record",
]
