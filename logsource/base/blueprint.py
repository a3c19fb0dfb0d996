"""Log provider blueprint."""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from logsource.base.context import CallContext
from logsource.base.types import LogRequest, RawLogRecord


class LogProviderBlueprint(ABC):
    """Abstract interface for an authenticated log provider client.

    The pipeline depends only on this interface.  Creating and closing the
    client is the caller's job.
    """

    # --- Log entries ---

    @abstractmethod
    def list_log_pages(
        self, request: LogRequest, ctx: CallContext
    ) -> Iterator[list[RawLogRecord]]:
        """Yield log entries one provider page at a time.

        Each ``next()`` issues at most one provider call, so a consumer that
        stops iterating stops fetching.

        Args:
            request: Compiled request.
            ctx: Call context; its remaining time is the per-call timeout.

        Raises:
            ProviderError: On provider API failure.
            QueryCancelledError: If the provider reports a cancelled call.
        """

    # --- Discovery ---

    @abstractmethod
    def list_projects(self, ctx: CallContext) -> list[str]:
        """List the IDs of every project visible to the credentials."""

    @abstractmethod
    def list_buckets(self, project_id: str, ctx: CallContext) -> list[str]:
        """List log bucket ids (``locations/<loc>/buckets/<id>``) in a project."""

    @abstractmethod
    def list_views(self, project_id: str, bucket_id: str, ctx: CallContext) -> list[str]:
        """List the view ids of a log bucket."""

    # --- Lifecycle ---

    @abstractmethod
    def close(self) -> None:
        """Release transports held by the client."""
