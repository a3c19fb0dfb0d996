"""Frame builder.

Each log entry becomes its own single-row frame with a ``time`` and a
``content`` column.  The label map rides on the content column as field
labels, not as extra columns.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from logsource.base.exceptions import DecodeError
from logsource.base.logger import ds_logger
from logsource.base.types import NormalizedRecord, RawLogRecord
from logsource.normalizer import normalize

VIS_TYPE_LOGS = "logs"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_FRAME_TYPES = {"time": "time.Time", "string": "string"}


def epoch_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // timedelta(milliseconds=1)


@dataclass
class Field:
    name: str
    type: str
    values: list[Any]
    labels: dict[str, str] | None = None

    def schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "typeInfo": {"frame": _FRAME_TYPES[self.type]},
        }
        if self.labels:
            schema["labels"] = dict(sorted(self.labels.items()))
        return schema

    def encoded_values(self) -> list[Any]:
        if self.type == "time":
            return [epoch_millis(v) for v in self.values]
        return list(self.values)


@dataclass
class Frame:
    name: str
    fields: list[Field] = field(default_factory=list)
    preferred_visualisation: str = VIS_TYPE_LOGS

    def to_dict(self) -> dict[str, Any]:
        """Render the frame in the data-frame JSON layout."""
        return {
            "schema": {
                "name": self.name,
                "meta": {
                    "typeVersion": [0, 0],
                    "preferredVisualisationType": self.preferred_visualisation,
                },
                "fields": [f.schema() for f in self.fields],
            },
            "data": {"values": [f.encoded_values() for f in self.fields]},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


def log_frame(record: NormalizedRecord) -> Frame:
    """One frame for one normalized record."""
    return Frame(
        name=record.id,
        fields=[
            Field("time", "time", [record.timestamp]),
            Field("content", "string", [record.body], labels=record.labels),
        ],
    )


def build_frames(records: Iterable[RawLogRecord], *, ref_id: str | None = None) -> list[Frame]:
    """Normalize *records* and build one frame each, in input order.

    Records whose payload cannot be decoded are logged and skipped.
    """
    frames: list[Frame] = []
    for record in records:
        try:
            normalized = normalize(record)
        except DecodeError as e:
            ds_logger.warning(
                "failed getting log message",
                ref_id=ref_id,
                operation="normalize",
                error=e,
            )
            continue
        frames.append(log_frame(normalized))
    return frames
