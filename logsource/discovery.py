"""Resource discovery cascade: projects → log buckets → log views.

Each call checks its required parameters, makes one provider read and
returns the provider's list untouched (no sorting, no dedup, no cache).
"""

from __future__ import annotations

from logsource.base.blueprint import LogProviderBlueprint
from logsource.base.context import CallContext
from logsource.base.exceptions import MissingParameterError


def _require(**params: str | None) -> None:
    for name, value in params.items():
        if not value:
            raise MissingParameterError(name)


def list_projects(client: LogProviderBlueprint, ctx: CallContext) -> list[str]:
    ctx.check()
    return client.list_projects(ctx)


def list_buckets(
    client: LogProviderBlueprint, project_id: str | None, ctx: CallContext
) -> list[str]:
    """List the log buckets of *project_id*.

    Raises:
        MissingParameterError: If *project_id* is empty; no provider call
            is made.
        ProviderError: On provider failure.
    """
    _require(ProjectId=project_id)
    ctx.check()
    return client.list_buckets(project_id, ctx)


def list_views(
    client: LogProviderBlueprint,
    project_id: str | None,
    bucket_id: str | None,
    ctx: CallContext,
) -> list[str]:
    """List the views of a log bucket.

    Raises:
        MissingParameterError: If either id is empty.
        ProviderError: On provider failure.
    """
    _require(ProjectId=project_id, BucketId=bucket_id)
    ctx.check()
    return client.list_views(project_id, bucket_id, ctx)
