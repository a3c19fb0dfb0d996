"""Shared fixtures: canned records and a provider client double."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from logsource.base import (
    LogProviderBlueprint,
    MonitoredResource,
    RawLogRecord,
    Severity,
    TextPayload,
)

INSERT_ID = "b6f39be2-b298-44da-9001-1f04e5756fa0"
RECEIVED_AT = datetime(2022, 8, 19, 14, 45, 49, 373000, tzinfo=timezone.utc)
TRACE = "projects/xxx/traces/c0e331eab1515bbcd1b8306029902ff7"


def make_record(insert_id: str = INSERT_ID, **overrides) -> RawLogRecord:
    fields = dict(
        insert_id=insert_id,
        timestamp=RECEIVED_AT,
        receive_timestamp=RECEIVED_AT,
        severity=Severity.INFO,
        resource=MonitoredResource(type="gce_instance", labels={}),
        labels={"instance_id": "unique", "custom_label": "custom_value"},
        trace=TRACE,
        payload=TextPayload("Full log message from this GCE instance"),
    )
    fields.update(overrides)
    return RawLogRecord(**fields)


@pytest.fixture
def record():
    return make_record()


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def client():
    return MagicMock(spec=LogProviderBlueprint)


@pytest.fixture
def page_source():
    """Build a stand-in for ``list_log_pages`` that records each page served."""

    def _build(*batches, served=None):
        def _gen(request, ctx):
            for batch in batches:
                if served is not None:
                    served.append(len(batch))
                yield list(batch)

        return _gen

    return _build
