"""
Pydantic settings model for the Cloud Logging data source.

Mirrors the JSON settings saved by the data source configuration page and
validates them before any SDK client is built.
"""

from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from logsource.base.exceptions import MissingCredentialsError

DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


class DatasourceSettings(BaseModel):
    """Data source settings.

    The default project is resolved in order:
    1. ``defaultProject`` in the settings.
    2. Environment variables (GOOGLE_CLOUD_PROJECT, GCLOUD_PROJECT).
    3. Left as None; with ``gce`` authentication the project bound to the
       ambient credentials is used instead.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    authentication_type: Literal["jwt", "gce"] = Field(
        default="jwt", alias="authenticationType", description="'jwt' or 'gce'"
    )
    client_email: str | None = Field(
        default=None, alias="clientEmail", description="Service account e-mail"
    )
    default_project: str | None = Field(
        default=None, alias="defaultProject", description="Default GCP project ID"
    )
    token_uri: str = Field(default=DEFAULT_TOKEN_URI, alias="tokenUri")
    private_key: str | None = Field(
        default=None, alias="privateKey", description="Service account private key (secure)"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: Any) -> Any:
        """Fall back to environment variables for a missing default project."""
        if not isinstance(values, dict):
            return values
        values = dict(values)
        if not (values.get("defaultProject") or values.get("default_project")):
            values["defaultProject"] = os.environ.get("GOOGLE_CLOUD_PROJECT") or os.environ.get(
                "GCLOUD_PROJECT"
            )
        return values

    @field_validator("authentication_type", mode="before")
    @classmethod
    def default_authentication_type(cls, value: Any) -> Any:
        return value or "jwt"

    @field_validator("token_uri", mode="before")
    @classmethod
    def default_token_uri(cls, value: Any) -> Any:
        return value or DEFAULT_TOKEN_URI

    def to_service_account_info(self) -> dict[str, Any]:
        """Build the service-account JSON dict for JWT authentication.

        Raises:
            MissingCredentialsError: If no private key is configured.
        """
        if not self.private_key:
            raise MissingCredentialsError("missing credentials")
        return {
            "type": "service_account",
            "project_id": self.default_project,
            "private_key": self.private_key,
            "client_email": self.client_email,
            "token_uri": self.token_uri,
        }


def validate_config(raw: dict[str, Any] | str | bytes) -> DatasourceSettings:
    """Validate raw settings (dict or JSON text) into :class:`DatasourceSettings`.

    Raises:
        pydantic.ValidationError: If the settings are invalid.
    """
    if isinstance(raw, (str, bytes)):
        return DatasourceSettings.model_validate_json(raw)
    return DatasourceSettings.model_validate(raw)


__all__ = [
    "DatasourceSettings",
    "DEFAULT_TOKEN_URI",
    "validate_config",
]
