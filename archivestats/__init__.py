"""
archivestats

Total page count of a document archive, computed locally and delegated to a
LauraDB-compatible document store.
"""

from .client import Client
from .collection import Collection
from .query import Queryable
from .aggregation import Aggregation, sum_of
from .aggregator import PageCountAggregator, STRATEGIES, total_page_count
from .schema import ArchiveDocument, ArchiveEntry
from .errors import (
    ArchiveStatsError,
    ConfigurationError,
    ConnectionFailure,
    EmptyResultError,
    QueryExecutionError,
)
from .timing import Measurement, measure, timed

__version__ = "1.0.0"
__all__ = [
    "Client",
    "Collection",
    "Queryable",
    "Aggregation",
    "sum_of",
    "PageCountAggregator",
    "STRATEGIES",
    "total_page_count",
    "ArchiveDocument",
    "ArchiveEntry",
    "ArchiveStatsError",
    "ConfigurationError",
    "ConnectionFailure",
    "EmptyResultError",
    "QueryExecutionError",
    "Measurement",
    "measure",
    "timed",
]


def create_client(url="http://localhost:8080", **kwargs):
    """
    Create a new client from a store URL.

    Args:
        url: Server URL (default: 'http://localhost:8080')
        **kwargs: Additional client configuration options

    Returns:
        Client: archivestats client instance

    Example:
        >>> client = create_client('http://localhost:8080', database='local')
        >>> entries = client.collection('ArchiveEntry')
    """
    return Client.from_url(url, **kwargs)
