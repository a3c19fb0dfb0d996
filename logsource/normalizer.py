"""Record normalizer.

Collapses a :class:`~logsource.base.types.RawLogRecord` into a single body
string plus a flat label map.  Pure; no I/O.
"""

from __future__ import annotations

import json
from collections.abc import Callable

from google.protobuf import any_pb2, json_format
from google.protobuf.message import DecodeError as ProtoDecodeError

# Registers the audit log payload type with the default descriptor pool so
# audit entries can be rendered.
from google.cloud.audit import audit_log_pb2  # noqa: F401

from logsource.base.exceptions import DecodeError
from logsource.base.types import (
    JsonPayload,
    NormalizedRecord,
    Payload,
    ProtoPayload,
    RawLogRecord,
    TextPayload,
)


def _text_body(payload: TextPayload) -> str:
    return payload.text


def _dump(data: object) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _json_body(payload: JsonPayload) -> str:
    try:
        return _dump(payload.data)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"json payload is not serialisable: {e}") from e


def _proto_body(payload: ProtoPayload) -> str:
    message = any_pb2.Any(type_url=payload.type_url, value=payload.value)
    try:
        return _dump(json_format.MessageToDict(message))
    except (TypeError, ProtoDecodeError, json_format.Error) as e:
        raise DecodeError(f"cannot decode proto payload of type '{payload.type_url}': {e}") from e


_BODY_BUILDERS: dict[type, Callable[..., str]] = {
    TextPayload: _text_body,
    JsonPayload: _json_body,
    ProtoPayload: _proto_body,
}


def entry_body(payload: Payload) -> str:
    """Render a payload as the record body.

    Raises:
        DecodeError: If the payload is missing, of an unknown kind, or
            cannot be decoded.
    """
    builder = _BODY_BUILDERS.get(type(payload))
    if builder is None:
        raise DecodeError(f"unsupported payload: {type(payload).__name__}")
    return builder(payload)


def trace_id(trace: str) -> str:
    """Trace id from a reference like ``projects/<id>/traces/<trace-id>``."""
    return trace.rsplit("/", 1)[-1]


def entry_labels(record: RawLogRecord) -> dict[str, str]:
    """Derive the label map shown next to each log line."""
    labels: dict[str, str] = {
        "id": record.insert_id,
        "level": record.severity.name.lower(),
    }
    if record.resource is not None:
        labels["resource.type"] = record.resource.type
        for key, value in record.resource.labels.items():
            labels[f'labels."{key}"'] = value
    for key, value in record.labels.items():
        labels[f'labels."{key}"'] = value
    if isinstance(record.payload, TextPayload):
        labels["textPayload"] = record.payload.text
    if record.trace:
        labels["trace"] = record.trace
        labels["traceId"] = trace_id(record.trace)
    return labels


def normalize(record: RawLogRecord) -> NormalizedRecord:
    """Normalize one record.

    Raises:
        DecodeError: If the payload cannot be rendered; the caller skips
            the record.
    """
    return NormalizedRecord(
        id=record.insert_id,
        timestamp=record.timestamp,
        body=entry_body(record.payload),
        labels=entry_labels(record),
    )
