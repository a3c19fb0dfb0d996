"""Cloud Logging data source.

Runs each query of a batch through compile → fetch → normalize → frames
and keys every result by its ``refId``.  A failing query only fails its own
entry in the response.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from logsource.base.blueprint import LogProviderBlueprint
from logsource.base.context import CallContext
from logsource.base.exceptions import ClientInputError, LogSourceError
from logsource.base.logger import ds_logger
from logsource.fetcher import fetch_logs
from logsource.frames import Frame, build_frames
from logsource.query import TimeRange, compile_query, parse_query_model
from logsource.resources import ResourceRequest, ResourceResponse, ResourceRouter


class DataQuery(BaseModel):
    """One query of a batch, as handed over by the caller.

    ``json`` carries the editor's query fields (``queryText``,
    ``projectId``, ``bucketId``, ``viewId``) as JSON text or a dict.
    """

    model_config = ConfigDict(populate_by_name=True)

    ref_id: str = Field(alias="refId")
    json_data: Any = Field(default=None, alias="json")
    time_range: TimeRange | None = Field(default=None, alias="timeRange")
    max_data_points: int = Field(default=0, alias="maxDataPoints")


@dataclass
class DataResponse:
    frames: list[Frame] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"frames": [f.to_dict() for f in self.frames]}
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class QueryDataResponse:
    responses: dict[str, DataResponse] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {ref_id: resp.to_dict() for ref_id, resp in self.responses.items()}


def _as_data_query(raw: Any) -> DataQuery:
    if isinstance(raw, DataQuery):
        return raw
    try:
        return DataQuery.model_validate(raw)
    except ValidationError as e:
        raise ClientInputError(f"invalid query: {e}") from e


class CloudLoggingDatasource:
    """Query and resource handler bound to one provider client.

    The client is owned by the caller, which also closes it.
    """

    def __init__(
        self,
        client: LogProviderBlueprint,
        default_project_lookup: Callable[[CallContext], str] | None = None,
    ) -> None:
        self.client = client
        self.router = ResourceRouter(client, default_project_lookup)

    def query_data(
        self,
        queries: Iterable[DataQuery | dict[str, Any]],
        ctx: CallContext | None = None,
    ) -> QueryDataResponse:
        """Run every query and map each ``refId`` to its response."""
        ctx = ctx or CallContext.background()
        response = QueryDataResponse()
        for raw in queries:
            if isinstance(raw, DataQuery):
                ref_id = raw.ref_id
            elif isinstance(raw, dict):
                ref_id = str(raw.get("refId", ""))
            else:
                ref_id = ""
            try:
                q = _as_data_query(raw)
            except ClientInputError as e:
                response.responses[ref_id] = DataResponse(error=str(e))
                continue
            response.responses[q.ref_id] = self.query(q, ctx)
        return response

    def query(self, query: DataQuery, ctx: CallContext) -> DataResponse:
        try:
            model = parse_query_model(query.json_data)
            if query.time_range is None:
                raise ClientInputError("invalid query: missing time range")
        except ClientInputError as e:
            return DataResponse(error=str(e))

        request = compile_query(model, query.time_range, query.max_data_points)
        try:
            logs = fetch_logs(self.client, request, ctx)
        except LogSourceError as e:
            ds_logger.warning(
                "query failed",
                ref_id=query.ref_id,
                operation="list_logs",
                project_id=model.project_id,
                error=e,
            )
            return DataResponse(error=f"query: {e}")

        return DataResponse(frames=build_frames(logs, ref_id=query.ref_id))

    def call_resource(
        self, request: ResourceRequest, ctx: CallContext | None = None
    ) -> ResourceResponse:
        return self.router.call_resource(request, ctx or CallContext.background())
