"""Resource dispatch router.

Maps a resource path plus query parameters onto one discovery call and
renders the HTTP-shaped response.  Provider error text is logged, never
returned; each path answers with its own fixed guidance message.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from logsource import discovery
from logsource.base.blueprint import LogProviderBlueprint
from logsource.base.context import CallContext
from logsource.base.exceptions import (
    EncodingError,
    ProviderError,
    QueryCancelledError,
)
from logsource.base.logger import ds_logger

DEFAULT_PROJECT_PATH = "gceDefaultProject"

NOT_FOUND_BODY = b"No such path"
ENCODING_FAILED_BODY = b"Unable to create response"


@dataclass(frozen=True)
class ResourceRequest:
    path: str
    url: str = ""
    query: dict[str, str] = field(default_factory=dict)

    @property
    def params(self) -> dict[str, str]:
        """Query parameters from the URL, overridden by ``query``."""
        params = dict(parse_qsl(urlsplit(self.url).query))
        params.update(self.query)
        return params


@dataclass(frozen=True)
class ResourceResponse:
    status: int
    body: bytes

    def json(self) -> Any:
        return json.loads(self.body)


Handler = Callable[[LogProviderBlueprint, dict[str, str], CallContext], list[str]]


@dataclass(frozen=True)
class Route:
    operation: str
    params: tuple[str, ...]
    handler: Handler
    failure_message: str


ROUTES: dict[str, Route] = {
    "projects": Route(
        operation="list_projects",
        params=(),
        handler=lambda client, p, ctx: discovery.list_projects(client, ctx),
        failure_message=(
            "Failed to list projects. "
            "Please check your permissions and authentication configuration."
        ),
    ),
    "logbuckets": Route(
        operation="list_buckets",
        params=("ProjectId",),
        handler=lambda client, p, ctx: discovery.list_buckets(client, p["ProjectId"], ctx),
        failure_message="Failed to list log buckets. Please check your project ID and permissions.",
    ),
    "logviews": Route(
        operation="list_views",
        params=("ProjectId", "BucketId"),
        handler=lambda client, p, ctx: discovery.list_views(
            client, p["ProjectId"], p["BucketId"], ctx
        ),
        failure_message="Failed to list log views. Please check your bucket ID and permissions.",
    ),
}

# Path spellings used by the query editor.
ROUTES["logBuckets"] = ROUTES["logbuckets"]
ROUTES["logViews"] = ROUTES["logviews"]


def match_route(path: str) -> Route | None:
    """Route for *path*; only ``projects`` matches case-insensitively."""
    if path.lower() == "projects":
        return ROUTES["projects"]
    return ROUTES.get(path)


def _encode(value: Any) -> bytes:
    try:
        return json.dumps(value, separators=(",", ":")).encode()
    except (TypeError, ValueError) as e:
        raise EncodingError("unable to encode response body") from e


def _error_body(message: str) -> bytes:
    return json.dumps({"error": message}).encode()


class ResourceRouter:
    """Serves resource calls against an already-authenticated client.

    Attributes:
        client: Provider client; never created or closed here.
        default_project_lookup: Resolves the project bound to the ambient
            credentials for the ``gceDefaultProject`` path.
    """

    def __init__(
        self,
        client: LogProviderBlueprint,
        default_project_lookup: Callable[[CallContext], str] | None = None,
    ) -> None:
        self.client = client
        self.default_project_lookup = default_project_lookup

    def call_resource(self, request: ResourceRequest, ctx: CallContext) -> ResourceResponse:
        """Dispatch *request* and build the response.

        Statuses: 200 with a JSON list, 400 for a missing parameter, 404 for
        an unknown path, 502 for a provider failure and 500 if the result
        cannot be encoded.
        """
        if request.path == DEFAULT_PROJECT_PATH and self.default_project_lookup is not None:
            return self._default_project(ctx)

        route = match_route(request.path)
        if route is None:
            return ResourceResponse(HTTPStatus.NOT_FOUND, NOT_FOUND_BODY)

        params = request.params
        missing = [name for name in route.params if not params.get(name)]
        if missing:
            return ResourceResponse(
                HTTPStatus.BAD_REQUEST,
                _error_body(f"missing required parameter '{missing[0]}'"),
            )

        try:
            result = route.handler(self.client, params, ctx)
        except (ProviderError, QueryCancelledError) as e:
            ds_logger.warning(
                f"problem calling {route.operation}",
                operation=route.operation,
                path=request.path,
                project_id=params.get("ProjectId"),
                error=e,
            )
            return ResourceResponse(HTTPStatus.BAD_GATEWAY, _error_body(route.failure_message))

        return self._ok(result)

    def _default_project(self, ctx: CallContext) -> ResourceResponse:
        try:
            project = self.default_project_lookup(ctx)  # type: ignore[misc]
        except ProviderError as e:
            ds_logger.warning(
                "problem getting GCE default project",
                operation="default_project",
                path=DEFAULT_PROJECT_PATH,
                error=e,
            )
            project = ""
        return self._ok(project)

    @staticmethod
    def _ok(result: Any) -> ResourceResponse:
        try:
            body = _encode(result)
        except EncodingError as e:
            ds_logger.error("unable to create response", operation="encode", error=e.__cause__)
            return ResourceResponse(HTTPStatus.INTERNAL_SERVER_ERROR, ENCODING_FAILED_BODY)
        return ResourceResponse(HTTPStatus.OK, body)
