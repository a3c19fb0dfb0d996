"""Google Cloud implementation of the log provider blueprint."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import timezone
from typing import Any

from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import resourcemanager_v3
from google.cloud.logging_v2.services.config_service_v2 import ConfigServiceV2Client
from google.cloud.logging_v2.services.logging_service_v2 import LoggingServiceV2Client
from google.cloud.logging_v2.types import LogEntry
from google.protobuf import json_format

from logsource.base.blueprint import LogProviderBlueprint
from logsource.base.context import CallContext
from logsource.base.exceptions import (
    DeadlineExceededError,
    LogSourceError,
    ProviderError,
    QueryCancelledError,
)
from logsource.base.types import (
    JsonPayload,
    LogRequest,
    MonitoredResource,
    Payload,
    ProtoPayload,
    RawLogRecord,
    Severity,
    TextPayload,
)
from logsource.query import provider_filter, qualify_bucket

_PROVIDER_ERRORS = (
    gcp_exceptions.GoogleAPICallError,
    gcp_exceptions.RetryError,
    auth_exceptions.GoogleAuthError,
)


def _map_error(e: Exception, message: str) -> LogSourceError:
    """Map an SDK error to a cancellation error or a generic ProviderError."""
    if isinstance(e, gcp_exceptions.DeadlineExceeded):
        return DeadlineExceededError(message)
    if isinstance(e, gcp_exceptions.Cancelled):
        return QueryCancelledError(message)
    return ProviderError(f"{message}: {e}")


# Struct stores every number as a double; integers beyond this lose precision.
_MAX_EXACT_INT = 2**53


def _struct_value(value: Any) -> Any:
    """Restore integral Struct numbers to ``int``."""
    if isinstance(value, float) and value.is_integer() and abs(value) <= _MAX_EXACT_INT:
        return int(value)
    if isinstance(value, dict):
        return {k: _struct_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_struct_value(v) for v in value]
    return value


def _payload(pb: Any) -> Payload:
    kind = pb.WhichOneof("payload")
    if kind == "text_payload":
        return TextPayload(pb.text_payload)
    if kind == "json_payload":
        return JsonPayload(_struct_value(json_format.MessageToDict(pb.json_payload)))
    if kind == "proto_payload":
        return ProtoPayload(pb.proto_payload.type_url, pb.proto_payload.value)
    return None


def to_raw_record(entry: LogEntry) -> RawLogRecord:
    """Convert a Cloud Logging ``LogEntry`` to a provider-neutral record."""
    pb = LogEntry.pb(entry)
    resource = None
    if pb.HasField("resource"):
        resource = MonitoredResource(pb.resource.type, dict(pb.resource.labels))
    receive_timestamp = None
    if pb.HasField("receive_timestamp"):
        receive_timestamp = pb.receive_timestamp.ToDatetime(tzinfo=timezone.utc)
    return RawLogRecord(
        insert_id=pb.insert_id,
        timestamp=pb.timestamp.ToDatetime(tzinfo=timezone.utc),
        receive_timestamp=receive_timestamp,
        severity=Severity.parse(pb.severity),
        resource=resource,
        labels=dict(pb.labels),
        trace=pb.trace,
        payload=_payload(pb),
    )


class GoogleCloudLoggingClient(LogProviderBlueprint):
    """Cloud Logging and Resource Manager client.

    Attributes:
        logging: Cloud Logging entries client.
        config: Cloud Logging config client (buckets and views).
        projects: Resource Manager projects client.
        project_id: Default project, if known.
    """

    def __init__(self, credentials: Any | None = None, project_id: str | None = None) -> None:
        """Initialize the SDK clients.

        Args:
            credentials: Google credentials; None uses Application Default
                Credentials.
            project_id: Default project for health checks and display.
        """
        self.project_id = project_id
        self.logging = LoggingServiceV2Client(credentials=credentials)
        self.config = ConfigServiceV2Client(credentials=credentials)
        self.projects = resourcemanager_v3.ProjectsClient(credentials=credentials)

    # --- Log entries ---

    def list_log_pages(
        self, request: LogRequest, ctx: CallContext
    ) -> Iterator[list[RawLogRecord]]:
        try:
            pager = self.logging.list_log_entries(
                request={
                    "resource_names": list(request.resource_names),
                    "filter": provider_filter(request),
                    "order_by": request.order_by,
                    "page_size": request.page_size,
                },
                timeout=ctx.remaining(),
            )
            for page in pager.pages:
                yield [to_raw_record(entry) for entry in page.entries]
        except _PROVIDER_ERRORS as e:
            raise _map_error(e, "Failed to list log entries") from e

    # --- Discovery ---

    def list_projects(self, ctx: CallContext) -> list[str]:
        try:
            return [
                p.project_id
                for p in self.projects.search_projects(request={}, timeout=ctx.remaining())
            ]
        except _PROVIDER_ERRORS as e:
            raise _map_error(e, "Failed to list projects") from e

    def list_buckets(self, project_id: str, ctx: CallContext) -> list[str]:
        """List buckets in every location, as ``locations/<loc>/buckets/<id>``."""
        prefix = f"projects/{project_id}/"
        try:
            buckets = self.config.list_buckets(
                request={"parent": f"{prefix}locations/-"}, timeout=ctx.remaining()
            )
            return [b.name.removeprefix(prefix) for b in buckets]
        except _PROVIDER_ERRORS as e:
            raise _map_error(e, f"Failed to list log buckets of '{project_id}'") from e

    def list_views(self, project_id: str, bucket_id: str, ctx: CallContext) -> list[str]:
        parent = f"projects/{project_id}/{qualify_bucket(bucket_id)}"
        try:
            views = self.config.list_views(request={"parent": parent}, timeout=ctx.remaining())
            return [v.name.rsplit("/", 1)[-1] for v in views]
        except _PROVIDER_ERRORS as e:
            raise _map_error(e, f"Failed to list log views of '{parent}'") from e

    # --- Lifecycle ---

    def close(self) -> None:
        for client in (self.logging, self.config, self.projects):
            client.transport.close()

    def __enter__(self) -> GoogleCloudLoggingClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
