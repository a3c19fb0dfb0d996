"""Log fetcher.

Drains provider pages until the request limit is reached or the provider
runs out of pages.  No page is requested once the limit is met, and a
failed call is reported once, never retried.
"""

from __future__ import annotations

from logsource.base.blueprint import LogProviderBlueprint
from logsource.base.context import CallContext
from logsource.base.exceptions import LogFetchError, ProviderError
from logsource.base.types import LogRequest, RawLogRecord


def fetch_logs(
    client: LogProviderBlueprint,
    request: LogRequest,
    ctx: CallContext,
) -> list[RawLogRecord]:
    """Fetch up to ``request.limit`` records in provider order.

    A limit of zero or less returns the provider's first (default-sized)
    page.

    Raises:
        LogFetchError: On provider failure.
        QueryCancelledError: If *ctx* is cancelled or expires mid-fetch;
            records fetched so far are discarded.
    """
    ctx.check()
    records: list[RawLogRecord] = []
    try:
        for page in client.list_log_pages(request, ctx):
            ctx.check()
            records.extend(page)
            if request.limit <= 0 or len(records) >= request.limit:
                break
    except ProviderError as e:
        raise LogFetchError(f"listing logs: {e}") from e

    if request.limit > 0:
        del records[request.limit:]
    return records
