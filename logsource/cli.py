"""Logsource CLI: run log queries and resource calls from the command line.

Usage examples::

    logsource --settings '{"authenticationType":"gce"}' query --project my-proj \\
        --filter 'severity>=ERROR' --since 3600
    logsource --settings '{"authenticationType":"gce"}' resource logbuckets \\
        --param ProjectId=my-proj
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timedelta, timezone
from typing import Any


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``logsource`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="logsource",
        description="Query Cloud Logging the way a log panel does",
    )
    parser.add_argument(
        "--settings", "-s",
        type=str,
        default="{}",
        help='JSON data source settings (e.g. \'{"authenticationType":"gce"}\')',
    )
    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="Request deadline in seconds",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    query = sub.add_parser("query", help="Run a log query and print frames")
    query.add_argument("--project", "-p", required=True, help="Project ID")
    query.add_argument("--filter", "-f", default="", help="Logging query language filter")
    query.add_argument("--bucket", default=None, help="Log bucket id")
    query.add_argument("--view", default=None, help="Log view id")
    query.add_argument("--limit", "-n", type=int, default=100, help="Maximum entries")
    query.add_argument("--since", type=int, default=3600, help="Window length in seconds")

    resource = sub.add_parser("resource", help="Call a resource path")
    resource.add_argument("path", help="Resource path (projects, logbuckets, logviews)")
    resource.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter, repeatable",
    )
    return parser


def _query_payload(ns: argparse.Namespace) -> dict[str, Any]:
    to = datetime.now(timezone.utc)
    return {
        "refId": "A",
        "json": {
            "queryText": ns.filter,
            "projectId": ns.project,
            "bucketId": ns.bucket,
            "viewId": ns.view,
        },
        "timeRange": {"from": to - timedelta(seconds=ns.since), "to": to},
        "maxDataPoints": ns.limit,
    }


def _params(pairs: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"expected KEY=VALUE, got '{pair}'")
        params[key] = value
    return params


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Builds a client from ``--settings``, runs the requested command and
    prints the result as JSON.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    try:
        settings: dict[str, Any] = json.loads(ns.settings)
    except json.JSONDecodeError as e:
        print(f"Invalid --settings JSON: {e}", file=sys.stderr)
        sys.exit(1)

    # Lazy-import to avoid loading the SDKs for --help
    from logsource.base.context import CallContext
    from logsource.base.exceptions import LogSourceError
    from logsource.factory import new_client, new_datasource
    from logsource.resources import ResourceRequest

    try:
        client = new_client(settings)
    except (LogSourceError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    ctx = CallContext(timeout=ns.timeout)
    with client:
        ds = new_datasource(client)
        if ns.command == "query":
            result = ds.query_data([_query_payload(ns)], ctx).responses["A"]
            if result.error:
                print(f"Query failed: {result.error}", file=sys.stderr)
                sys.exit(1)
            print(json.dumps([f.to_dict() for f in result.frames], indent=2))
            return

        try:
            params = _params(ns.param)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        response = ds.call_resource(ResourceRequest(ns.path, query=params), ctx)
        print(f"{int(response.status)} {response.body.decode()}")
        if response.status != 200:
            sys.exit(1)


if __name__ == "__main__":
    main()
