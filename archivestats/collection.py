"""
archivestats Collection - Read-only interface for collection queries
"""
from typing import Dict, Any, List, Optional


class Collection:
    """
    Collection object for running read queries.

    Args:
        client: archivestats client instance
        name: Collection name

    Example:
        >>> entries = client.collection('ArchiveEntry')
        >>> entries.find(projection={'Documents.PageCount': 1})
    """

    def __init__(self, client, name: str):
        self.client = client
        self.name = name
        self._base_path = f"/collections/{name}"

    @property
    def full_name(self) -> str:
        """Namespace of the collection, ``<database>.<collection>``."""
        return f"{self.client.database}.{self.name}"

    def find(
        self,
        filter: Optional[Dict[str, Any]] = None,
        projection: Optional[Dict[str, int]] = None,
        sort: Optional[Dict[str, int]] = None,
        skip: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Find documents matching the filter.

        Args:
            filter: Query filter (default: {})
            projection: Field projection (1 = include, 0 = exclude)
            sort: Sort specification (1 = ascending, -1 = descending)
            skip: Number of documents to skip
            limit: Maximum number of documents to return

        Returns:
            List of matching documents

        Example:
            >>> docs = entries.find(
            ...     {'Name': {'$exists': True}},
            ...     projection={'Name': 1},
            ...     sort={'Name': 1},
            ...     limit=10
            ... )
        """
        body = {"filter": filter or {}}
        if projection:
            body["projection"] = projection
        if sort:
            body["sort"] = sort
        if skip is not None:
            body["skip"] = skip
        if limit is not None:
            body["limit"] = limit

        response = self.client._request(
            "POST",
            f"{self._base_path}/find",
            body=body
        )
        return response.get("result", {}).get("documents", [])

    def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        """
        Count documents matching the filter.

        Args:
            filter: Query filter (default: {})

        Returns:
            Number of matching documents
        """
        response = self.client._request(
            "POST",
            f"{self._base_path}/count",
            body={"filter": filter or {}}
        )
        return response.get("result", {}).get("count", 0)

    def aggregate(
        self,
        pipeline: List[Dict[str, Any]],
        allow_disk_use: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Execute an aggregation pipeline.

        Args:
            pipeline: List of aggregation stages
            allow_disk_use: Let the server spill large stages to disk

        Returns:
            List of aggregation results

        Example:
            >>> entries.aggregate([
            ...     {'$project': {'pages': {'$sum': '$Documents.PageCount'}}},
            ...     {'$group': {'_id': None, 'total': {'$sum': '$pages'}}}
            ... ], allow_disk_use=True)
            [{'_id': None, 'total': 18}]
        """
        body = {"pipeline": pipeline}
        if allow_disk_use:
            body["allowDiskUse"] = True

        response = self.client._request(
            "POST",
            f"{self._base_path}/aggregate",
            body=body
        )
        return response.get("result", {}).get("documents", [])

    def as_queryable(self, allow_disk_use: bool = False) -> "Queryable":
        """
        Start a fluent query over this collection.

        Args:
            allow_disk_use: Passed through to ``aggregate`` when the query runs

        Returns:
            Queryable bound to this collection

        Example:
            >>> entries.as_queryable().select(sum_of('$Documents.PageCount')).sum().first()
        """
        from .query import Queryable
        return Queryable(self, allow_disk_use=allow_disk_use)

    def __repr__(self) -> str:
        return f"Collection(name='{self.name}')"
