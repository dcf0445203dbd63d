"""
archivestats errors - Exception hierarchy raised by the client and CLI
"""
from typing import Optional


class ArchiveStatsError(Exception):
    """Base class for all archivestats errors."""


class ConfigurationError(ArchiveStatsError):
    """Raised when a configuration value cannot be used."""


class ConnectionFailure(ArchiveStatsError):
    """
    The document store could not be reached.

    Raised for refused connections, name resolution failures and timeouts.
    """


class QueryExecutionError(ArchiveStatsError):
    """
    The store rejected or failed to execute a command.

    Args:
        message: Error description
        status_code: HTTP status code, if the failure came from the transport
        details: Raw error payload returned by the store
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


class EmptyResultError(QueryExecutionError):
    """Raised by ``Queryable.first()`` when the query produced no rows."""
