"""Client and data source factory.

Turns raw data source settings into an authenticated
:class:`~logsource.gcp.client.GoogleCloudLoggingClient`.  The caller owns
the returned client and must close it when the settings change.
"""

from __future__ import annotations

from typing import Any

from logsource.base.config import DatasourceSettings, validate_config
from logsource.gcp.auth import build_credentials, gce_default_project
from logsource.gcp.client import GoogleCloudLoggingClient
from logsource.plugin import CloudLoggingDatasource


def new_client(settings: DatasourceSettings | dict[str, Any] | str) -> GoogleCloudLoggingClient:
    """Create an authenticated client from data source settings.

    Args:
        settings: Validated settings, a settings dict, or settings JSON.

    Returns:
        A ready-to-use client.

    Raises:
        MissingCredentialsError: ``jwt`` authentication without a private key.
        pydantic.ValidationError: If the settings are invalid.
    """
    if not isinstance(settings, DatasourceSettings):
        settings = validate_config(settings)
    credentials = build_credentials(settings)
    return GoogleCloudLoggingClient(credentials=credentials, project_id=settings.default_project)


def new_datasource(client: GoogleCloudLoggingClient) -> CloudLoggingDatasource:
    """Data source bound to *client*, with the GCE default-project lookup."""
    return CloudLoggingDatasource(client, default_project_lookup=gce_default_project)
