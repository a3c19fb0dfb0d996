"""Credential resolution for the Google Cloud client."""

from __future__ import annotations

from typing import Any

import google.auth
from google.auth import exceptions as auth_exceptions
from google.oauth2 import service_account

from logsource.base.config import DatasourceSettings
from logsource.base.context import CallContext
from logsource.base.exceptions import ProviderError

SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


def build_credentials(settings: DatasourceSettings) -> Any:
    """Credentials for *settings*.

    ``jwt`` builds service-account credentials from the settings;
    ``gce`` uses Application Default Credentials.

    Raises:
        MissingCredentialsError: ``jwt`` without a private key.
        ProviderError: If ambient credentials cannot be found.
    """
    if settings.authentication_type == "jwt":
        return service_account.Credentials.from_service_account_info(
            settings.to_service_account_info(), scopes=SCOPES
        )
    try:
        credentials, _ = google.auth.default(scopes=SCOPES)
    except auth_exceptions.DefaultCredentialsError as e:
        raise ProviderError(f"Failed to load default credentials: {e}") from e
    return credentials


def gce_default_project(ctx: CallContext | None = None) -> str:
    """Project bound to the ambient (GCE / ADC) credentials.

    Raises:
        ProviderError: If there are no ambient credentials or no project.
    """
    try:
        _, project = google.auth.default()
    except auth_exceptions.DefaultCredentialsError as e:
        raise ProviderError(f"Failed to get GCE default project: {e}") from e
    if not project:
        raise ProviderError("Failed to get GCE default project: none configured")
    return project
