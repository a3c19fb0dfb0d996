"""Provider blueprint and core utilities.

Import the blueprint to type-hint your own code or to plug in a different
log provider.
"""

from .blueprint import LogProviderBlueprint
from .context import CallContext
from .types import (
    JsonPayload,
    LogRequest,
    MonitoredResource,
    NormalizedRecord,
    ProtoPayload,
    RawLogRecord,
    Severity,
    TextPayload,
)


__all__ = [
    "LogProviderBlueprint",
    "CallContext",
    "JsonPayload",
    "LogRequest",
    "MonitoredResource",
    "NormalizedRecord",
    "ProtoPayload",
    "RawLogRecord",
    "Severity",
    "TextPayload",
]
