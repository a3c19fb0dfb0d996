"""
Logsource exception hierarchy.

Every failure raised by the query pipeline or the resource router inherits
from :class:`LogSourceError`.  Provider failures keep the underlying SDK
exception as ``__cause__``.
"""


# ── Base ──────────────────────────────────────────────────────────────
class LogSourceError(Exception):
    """Root exception for all logsource errors."""


# ── Caller input ──────────────────────────────────────────────────────
class ClientInputError(LogSourceError):
    """Malformed query payload or resource request."""


class MissingParameterError(ClientInputError):
    """A discovery call is missing a required path parameter."""

    def __init__(self, parameter: str) -> None:
        super().__init__(f"missing required parameter '{parameter}'")
        self.parameter = parameter


class MissingCredentialsError(LogSourceError):
    """JWT authentication selected but no private key configured."""


# ── Provider ──────────────────────────────────────────────────────────
class ProviderError(LogSourceError):
    """Network, permission or quota failure from the log provider."""


class LogFetchError(ProviderError):
    """Listing log entries failed."""


# ── Cancellation ──────────────────────────────────────────────────────
class QueryCancelledError(LogSourceError):
    """The caller cancelled the request."""


class DeadlineExceededError(QueryCancelledError):
    """The request deadline passed."""


# ── Encoding ──────────────────────────────────────────────────────────
class DecodeError(LogSourceError):
    """A record payload could not be turned into a body string."""


class EncodingError(LogSourceError):
    """A successful result could not be serialised."""
