"""Tests for the Google Cloud provider client."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from google.api import monitored_resource_pb2
from google.api_core import exceptions as gcp_exceptions
from google.cloud import resourcemanager_v3
from google.cloud.logging_v2.types import LogBucket, LogEntry, LogView
from google.logging.type import log_severity_pb2
from google.protobuf import any_pb2, duration_pb2

from logsource.base.context import CallContext
from logsource.base.exceptions import (
    DeadlineExceededError,
    ProviderError,
    QueryCancelledError,
)
from logsource.base.types import (
    JsonPayload,
    LogRequest,
    ProtoPayload,
    Severity,
    TextPayload,
)
from logsource.gcp.client import GoogleCloudLoggingClient, to_raw_record
from logsource.normalizer import entry_body

RECEIVED_AT = datetime(2022, 8, 19, 14, 45, 49, 373000, tzinfo=timezone.utc)
TRACE = "projects/xxx/traces/c0e331eab1515bbcd1b8306029902ff7"
CTX = CallContext.background()

REQUEST = LogRequest(
    resource_names=("projects/testing",),
    filter='resource.type = "testing"',
    page_size=20,
    limit=20,
    time_from="2022-08-19T13:45:49+00:00",
    time_to="2022-08-19T14:45:49+00:00",
)


def _entry(insert_id="b6f39be2", **payload):
    payload = payload or {"text_payload": "Full log message from this GCE instance"}
    return LogEntry(
        log_name="organizations/1234567890/logs/cloudresourcemanager.googleapis.com%2Factivity",
        resource=monitored_resource_pb2.MonitoredResource(type="gce_instance", labels={"zone": "eu"}),
        timestamp=RECEIVED_AT,
        receive_timestamp=RECEIVED_AT,
        severity=log_severity_pb2.INFO,
        insert_id=insert_id,
        trace=TRACE,
        labels={"instance_id": "unique", "custom_label": "custom_value"},
        **payload,
    )


@pytest.fixture
def svc():
    with (
        patch("logsource.gcp.client.LoggingServiceV2Client") as MockLogging,
        patch("logsource.gcp.client.ConfigServiceV2Client") as MockConfig,
        patch("logsource.gcp.client.resourcemanager_v3.ProjectsClient") as MockProjects,
    ):
        instance = GoogleCloudLoggingClient(credentials=None, project_id="testing")
        yield instance, MockLogging.return_value, MockConfig.return_value, MockProjects.return_value


# --- to_raw_record ---

class TestToRawRecord:
    def test_text_entry(self):
        rec = to_raw_record(_entry())
        assert rec.insert_id == "b6f39be2"
        assert rec.timestamp == RECEIVED_AT
        assert rec.receive_timestamp == RECEIVED_AT
        assert rec.severity is Severity.INFO
        assert rec.resource.type == "gce_instance"
        assert rec.resource.labels == {"zone": "eu"}
        assert rec.labels == {"instance_id": "unique", "custom_label": "custom_value"}
        assert rec.trace == TRACE
        assert rec.payload == TextPayload("Full log message from this GCE instance")

    def test_json_entry(self):
        rec = to_raw_record(_entry(json_payload={"message": "hi", "count": 2}))
        assert rec.payload == JsonPayload({"message": "hi", "count": 2})
        assert isinstance(rec.payload.data["count"], int)

    def test_json_entry_keeps_whole_numbers(self):
        rec = to_raw_record(
            _entry(json_payload={"count": 1, "ratio": 0.5, "nested": {"items": [3, 4.25]}, "msg": "hi"})
        )
        assert entry_body(rec.payload) == (
            '{"count":1,"msg":"hi","nested":{"items":[3,4.25]},"ratio":0.5}'
        )

    def test_proto_entry(self):
        wrapped = any_pb2.Any()
        wrapped.Pack(duration_pb2.Duration(seconds=3))
        rec = to_raw_record(_entry(proto_payload=wrapped))
        assert rec.payload == ProtoPayload(wrapped.type_url, wrapped.value)

    def test_no_payload_no_resource(self):
        rec = to_raw_record(LogEntry(insert_id="x", timestamp=RECEIVED_AT))
        assert rec.payload is None
        assert rec.resource is None
        assert rec.receive_timestamp is None
        assert rec.severity is Severity.DEFAULT


# --- list_log_pages ---

class TestListLogPages:
    def test_pages(self, svc):
        inst, logging_client, _, _ = svc
        logging_client.list_log_entries.return_value = MagicMock(
            pages=[MagicMock(entries=[_entry("a"), _entry("b")]), MagicMock(entries=[_entry("c")])]
        )
        pages = list(inst.list_log_pages(REQUEST, CTX))
        assert [[r.insert_id for r in page] for page in pages] == [["a", "b"], ["c"]]

    def test_request_fields(self, svc):
        inst, logging_client, _, _ = svc
        logging_client.list_log_entries.return_value = MagicMock(pages=[])
        list(inst.list_log_pages(REQUEST, CallContext(timeout=30)))
        kwargs = logging_client.list_log_entries.call_args[1]
        assert kwargs["request"]["resource_names"] == ["projects/testing"]
        assert kwargs["request"]["page_size"] == 20
        assert kwargs["request"]["order_by"] == "timestamp desc"
        assert kwargs["request"]["filter"].startswith('resource.type = "testing"\ntimestamp >= ')
        assert 0 < kwargs["timeout"] <= 30

    def test_permission_denied(self, svc):
        inst, logging_client, _, _ = svc
        logging_client.list_log_entries.side_effect = gcp_exceptions.PermissionDenied("denied")
        with pytest.raises(ProviderError, match="Failed to list log entries"):
            list(inst.list_log_pages(REQUEST, CTX))

    def test_deadline(self, svc):
        inst, logging_client, _, _ = svc
        logging_client.list_log_entries.side_effect = gcp_exceptions.DeadlineExceeded("slow")
        with pytest.raises(DeadlineExceededError):
            list(inst.list_log_pages(REQUEST, CTX))

    def test_cancelled(self, svc):
        inst, logging_client, _, _ = svc
        logging_client.list_log_entries.side_effect = gcp_exceptions.Cancelled("stop")
        with pytest.raises(QueryCancelledError):
            list(inst.list_log_pages(REQUEST, CTX))


# --- discovery ---

class TestListProjects:
    def test_success(self, svc):
        inst, _, _, projects = svc
        projects.search_projects.return_value = [
            resourcemanager_v3.Project(project_id="project1"),
            resourcemanager_v3.Project(project_id="project2"),
        ]
        assert inst.list_projects(CTX) == ["project1", "project2"]

    def test_error(self, svc):
        inst, _, _, projects = svc
        projects.search_projects.side_effect = gcp_exceptions.PermissionDenied("denied")
        with pytest.raises(ProviderError):
            inst.list_projects(CTX)


class TestListBuckets:
    def test_success(self, svc):
        inst, _, config, _ = svc
        config.list_buckets.return_value = [
            LogBucket(name="projects/p/locations/global/buckets/_Default"),
            LogBucket(name="projects/p/locations/eu/buckets/audit"),
        ]
        assert inst.list_buckets("p", CTX) == [
            "locations/global/buckets/_Default",
            "locations/eu/buckets/audit",
        ]
        assert config.list_buckets.call_args[1]["request"] == {"parent": "projects/p/locations/-"}

    def test_error(self, svc):
        inst, _, config, _ = svc
        config.list_buckets.side_effect = gcp_exceptions.NotFound("no project")
        with pytest.raises(ProviderError):
            inst.list_buckets("p", CTX)


class TestListViews:
    def test_success(self, svc):
        inst, _, config, _ = svc
        config.list_views.return_value = [
            LogView(name="projects/p/locations/global/buckets/_Default/views/_AllLogs"),
        ]
        assert inst.list_views("p", "_Default", CTX) == ["_AllLogs"]
        assert config.list_views.call_args[1]["request"] == {
            "parent": "projects/p/locations/global/buckets/_Default"
        }

    def test_error(self, svc):
        inst, _, config, _ = svc
        config.list_views.side_effect = gcp_exceptions.InternalServerError("fail")
        with pytest.raises(ProviderError):
            inst.list_views("p", "locations/eu/buckets/b", CTX)


# --- lifecycle ---

class TestClose:
    def test_closes_transports(self, svc):
        inst, logging_client, config, projects = svc
        with inst:
            pass
        logging_client.transport.close.assert_called_once()
        config.transport.close.assert_called_once()
        projects.transport.close.assert_called_once()
