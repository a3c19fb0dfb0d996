"""Logsource: Cloud Logging query and discovery backend for log panels.

Build a client from the data source settings, then hand it to the data
source::

    from logsource import new_client, new_datasource

    with new_client({"authenticationType": "gce"}) as client:
        ds = new_datasource(client)
        response = ds.query_data([...])
"""

from .base import LogProviderBlueprint, CallContext
from .factory import new_client, new_datasource
from .plugin import CloudLoggingDatasource, DataQuery
from .resources import ResourceRequest, ResourceResponse

__all__ = [
    "LogProviderBlueprint",
    "CallContext",
    "CloudLoggingDatasource",
    "DataQuery",
    "ResourceRequest",
    "ResourceResponse",
    "new_client",
    "new_datasource",
]
