"""Query compiler.

Turns the per-query JSON sent by the frontend plus the caller-supplied time
range and row limit into a :class:`~logsource.base.types.LogRequest`.
Filter syntax is not validated here; the provider rejects bad filters.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from logsource.base.exceptions import ClientInputError
from logsource.base.types import LogRequest

MAX_PAGE_SIZE = 1000
DEFAULT_VIEW = "_AllLogs"


class QueryModel(BaseModel):
    """Fields of a single query as stored by the query editor."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query_text: str = Field(default="", alias="queryText")
    project_id: str = Field(alias="projectId", min_length=1)
    bucket_id: str | None = Field(default=None, alias="bucketId")
    view_id: str | None = Field(default=None, alias="viewId")


class TimeRange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: datetime = Field(alias="from")
    to: datetime


def parse_query_model(raw: Any) -> QueryModel:
    """Parse a query payload (JSON text, bytes or dict).

    Raises:
        ClientInputError: If the payload is not valid JSON or lacks a project.
    """
    try:
        if isinstance(raw, (str, bytes)):
            return QueryModel.model_validate_json(raw)
        return QueryModel.model_validate(raw if raw is not None else {})
    except ValidationError as e:
        raise ClientInputError(f"invalid query: {e}") from e


def format_timestamp(value: datetime) -> str:
    """Render *value* as RFC 3339 with an explicit offset and second precision.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.replace(microsecond=0).isoformat()


def qualify_bucket(bucket_id: str) -> str:
    """Location-qualified bucket id; bare ids are taken to be global."""
    if "/" in bucket_id:
        return bucket_id
    return f"locations/global/buckets/{bucket_id}"


def resource_name(project_id: str, bucket_id: str | None = None, view_id: str | None = None) -> str:
    """Resource to read entries from: the project, or a view of a bucket."""
    if not bucket_id:
        return f"projects/{project_id}"
    return f"projects/{project_id}/{qualify_bucket(bucket_id)}/views/{view_id or DEFAULT_VIEW}"


def compile_query(query: QueryModel, time_range: TimeRange, max_data_points: int) -> LogRequest:
    """Compile one query into a provider request.

    Args:
        query: Parsed query fields.
        time_range: Window to search; ``from`` may be after ``to``.
        max_data_points: Row limit.  Zero or negative asks for the
            provider's default page size.

    Returns:
        The compiled request.
    """
    limit = max_data_points
    return LogRequest(
        resource_names=(resource_name(query.project_id, query.bucket_id, query.view_id),),
        filter=query.query_text,
        page_size=min(limit, MAX_PAGE_SIZE) if limit > 0 else 0,
        limit=limit,
        time_from=format_timestamp(time_range.from_),
        time_to=format_timestamp(time_range.to),
    )


def provider_filter(request: LogRequest) -> str:
    """Full provider filter: the user filter AND the time window.

    Newlines are implicit ANDs in the Logging query language.
    """
    window = f'timestamp >= "{request.time_from}" AND timestamp <= "{request.time_to}"'
    if request.filter.strip():
        return f"{request.filter}\n{window}"
    return window


# --- Query fix actions ---

ADD_FILTER = "ADD_FILTER"
ADD_FILTER_OUT = "ADD_FILTER_OUT"

_LEVEL_TO_SEVERITY = {
    "debug": "DEFAULT",
    "critical": "EMERGENCY",
}


def escape_label_value(value: str) -> str:
    """Escape backslash, newline and double quote for a filter literal."""
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def modify_query(query_text: str, action: str, key: str | None, value: str | None) -> str:
    """Append a label filter to *query_text* for a log-row filter action.

    ``id`` filters on ``insertId`` and ``level`` on ``severity``; the
    frontend's ``debug`` and ``critical`` levels map back to ``DEFAULT``
    and ``EMERGENCY``.  Unknown actions leave the query unchanged.
    """
    if action not in (ADD_FILTER, ADD_FILTER_OUT) or not key or not value:
        return query_text

    operator = "=" if action == ADD_FILTER else "!="
    if key == "id":
        key = "insertId"
    elif key == "level":
        key = "severity"
        value = _LEVEL_TO_SEVERITY.get(value, value)
    return f'{query_text}\n{key}{operator}"{escape_label_value(value)}"'
