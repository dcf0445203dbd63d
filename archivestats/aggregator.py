"""
archivestats Aggregator - Total page count of an archive, computed three ways
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Union

from .aggregation import Aggregation
from .errors import ConfigurationError, QueryExecutionError
from .schema import ArchiveEntry, field_path, projection

logger = logging.getLogger(__name__)

STRATEGIES = ("local", "pipeline", "queryable")

SUBTOTAL_FIELD = "DocumentsPageCount"
TOTAL_FIELD = "TotalPageCount"


def total_page_count(entries: Iterable[ArchiveEntry]) -> Union[int, float]:
    """
    Sum ``page_count`` over every document of every entry.

    Entries without documents contribute 0; an empty input gives 0.

    Example:
        >>> total_page_count([])
        0
    """
    return sum(sum(doc.page_count for doc in entry.documents) for entry in entries)


def page_count_pipeline() -> List[Dict[str, Any]]:
    """
    Raw pipeline: one subtotal per entry, then a single global sum.

    Returns:
        [{'$project': {'DocumentsPageCount': {'$sum': '$Documents.PageCount'}}},
         {'$group': {'_id': None, 'TotalPageCount': {'$sum': '$DocumentsPageCount'}}}]
    """
    return [
        Aggregation.project({
            SUBTOTAL_FIELD: Aggregation.sum(field_path("documents", "page_count")),
        }),
        Aggregation.group(None, {
            TOTAL_FIELD: Aggregation.sum(f"${SUBTOTAL_FIELD}"),
        }),
    ]


def _as_total(value: Any) -> int:
    # Empty groups come back as null or not at all
    if value is None:
        return 0
    return int(value)


class PageCountAggregator:
    """
    Computes the archive's total page count against one collection.

    Args:
        collection: Collection holding archive entries
        allow_disk_use: Sent with delegated aggregations (default: True)

    Example:
        >>> aggregator = PageCountAggregator(client.collection('ArchiveEntry'))
        >>> aggregator.local_total() == aggregator.pipeline_total()
        True
    """

    def __init__(self, collection, allow_disk_use: bool = True):
        self.collection = collection
        self.allow_disk_use = allow_disk_use

    def fetch_entries(self) -> List[ArchiveEntry]:
        """
        Fetch every entry with its documents' page counts.

        Raises:
            QueryExecutionError: If a stored entry does not match the schema
        """
        raw_entries = self.collection.find(projection=projection())
        logger.debug("Fetched %d entries from %s", len(raw_entries), self.collection.full_name)
        try:
            return [ArchiveEntry.from_document(raw) for raw in raw_entries]
        except (TypeError, ValueError, AttributeError) as e:
            raise QueryExecutionError(
                f"Entry in {self.collection.full_name} does not match the archive schema: {e}"
            ) from e

    def local_total(self) -> int:
        """Fetch all entries and reduce them in memory."""
        return _as_total(total_page_count(self.fetch_entries()))

    def pipeline_total(self) -> int:
        """Send the raw two-stage pipeline and read the single result row."""
        rows = self.collection.aggregate(page_count_pipeline(), allow_disk_use=self.allow_disk_use)
        if not rows:
            logger.debug("Aggregation on %s returned no rows", self.collection.full_name)
            return 0
        return _as_total(rows[0].get(TOTAL_FIELD))

    def queryable_total(self) -> int:
        """Express the same reduction with the fluent query builder."""
        value = (
            self.collection.as_queryable(allow_disk_use=self.allow_disk_use)
            .select(Aggregation.sum(field_path("documents", "page_count")))
            .group_by(None)
            .sum()
            .first_or_default(0)
        )
        return _as_total(value)

    def strategy(self, name: str) -> Callable[[], int]:
        """
        Look up a strategy by name.

        Raises:
            ConfigurationError: If ``name`` is not one of ``STRATEGIES``
        """
        if name not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown strategy {name!r}, expected one of {', '.join(STRATEGIES)}"
            )
        return getattr(self, f"{name}_total")

    def run(self, name: str) -> int:
        """Run the named strategy."""
        return self.strategy(name)()
