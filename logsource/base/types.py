"""Provider-neutral record and request types shared by the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Union


class Severity(IntEnum):
    """Log severity levels, numbered as Cloud Logging numbers them."""

    DEFAULT = 0
    DEBUG = 100
    INFO = 200
    NOTICE = 300
    WARNING = 400
    ERROR = 500
    CRITICAL = 600
    ALERT = 700
    EMERGENCY = 800

    @classmethod
    def parse(cls, value: int | str | None) -> Severity:
        """Map a numeric or textual severity to a member, ``DEFAULT`` if unknown."""
        if isinstance(value, str):
            return cls.__members__.get(value.upper(), cls.DEFAULT)
        try:
            return cls(value or 0)
        except ValueError:
            return cls.DEFAULT


# --- Payload variants ---

@dataclass(frozen=True)
class TextPayload:
    text: str


@dataclass(frozen=True)
class JsonPayload:
    data: dict[str, Any]


@dataclass(frozen=True)
class ProtoPayload:
    """A serialised ``google.protobuf.Any``."""

    type_url: str
    value: bytes


Payload = Union[TextPayload, JsonPayload, ProtoPayload, None]


@dataclass(frozen=True)
class MonitoredResource:
    type: str
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class RawLogRecord:
    """One log entry as returned by the provider.

    Attributes:
        insert_id: Provider-assigned unique id.
        timestamp: When the event occurred; used for the time column.
        receive_timestamp: When the provider received the entry.
        severity: Entry severity.
        resource: Monitored resource that wrote the entry, if any.
        labels: User-supplied labels.
        trace: Trace reference, e.g. ``projects/<id>/traces/<trace-id>``.
        payload: Text, JSON or proto payload.
    """

    insert_id: str
    timestamp: datetime
    receive_timestamp: datetime | None = None
    severity: Severity = Severity.DEFAULT
    resource: MonitoredResource | None = None
    labels: dict[str, str] = field(default_factory=dict)
    trace: str = ""
    payload: Payload = None


@dataclass
class NormalizedRecord:
    id: str
    timestamp: datetime
    body: str
    labels: dict[str, str]


@dataclass(frozen=True)
class LogRequest:
    """Compiled provider request for one query.

    Attributes:
        resource_names: Scopes to read from (project or bucket view).
        filter: Full filter string including the time window.
        page_size: Entries per provider page; ``0`` lets the provider decide.
        limit: Maximum entries to return; ``<= 0`` means one default page.
        time_from: Window start, RFC 3339 with offset, second precision.
        time_to: Window end, same format.
        order_by: Provider sort order.
    """

    resource_names: tuple[str, ...]
    filter: str
    page_size: int
    limit: int
    time_from: str
    time_to: str
    order_by: str = "timestamp desc"
