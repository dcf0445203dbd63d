"""
archivestats Aggregation - Aggregation pipeline builder
"""
from typing import Any, Dict, Optional, Union


class Aggregation:
    """
    Aggregation pipeline builder for constructing aggregation stages.

    Example:
        >>> agg = Aggregation()
        >>> pipeline = [
        ...     agg.project({'DocumentsPageCount': agg.sum('$Documents.PageCount')}),
        ...     agg.group(None, {'TotalPageCount': agg.sum('$DocumentsPageCount')})
        ... ]
    """

    # Pipeline stages
    @staticmethod
    def match(filter: Dict[str, Any]) -> Dict[str, Any]:
        """
        Filter documents ($match stage).

        Example:
            >>> agg.match({'Name': {'$exists': True}})
        """
        return {"$match": filter}

    @staticmethod
    def group(
        group_by: Optional[Union[str, Dict[str, Any]]],
        accumulators: Dict[str, Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Group documents by key with accumulator expressions ($group stage).

        Args:
            group_by: Field to group by ('$fieldName'), a compound key,
                or None to collapse every document into one group
            accumulators: Dictionary of accumulator expressions

        Returns:
            Group stage

        Example:
            >>> agg.group(None, {'total': agg.sum('$pages')})
            {'$group': {'_id': None, 'total': {'$sum': '$pages'}}}
        """
        stage = {"_id": group_by}
        stage.update(accumulators)
        return {"$group": stage}

    @staticmethod
    def project(fields: Dict[str, Union[int, str, Dict]]) -> Dict[str, Any]:
        """
        Include, exclude, or compute fields ($project stage).

        Args:
            fields: Field specification (1 = include, 0 = exclude, or expression)

        Returns:
            Project stage

        Example:
            >>> agg.project({'_v': agg.sum('$Documents.PageCount'), '_id': 0})
        """
        return {"$project": fields}

    @staticmethod
    def sort(sort_spec: Dict[str, int]) -> Dict[str, Any]:
        """Sort documents ($sort stage)."""
        return {"$sort": sort_spec}

    @staticmethod
    def limit(count: int) -> Dict[str, Any]:
        """Limit number of documents ($limit stage)."""
        return {"$limit": count}

    @staticmethod
    def skip(count: int) -> Dict[str, Any]:
        """Skip documents ($skip stage)."""
        return {"$skip": count}

    # Accumulators / expressions
    @staticmethod
    def sum(expression: Union[str, int]) -> Dict[str, Any]:
        """
        Sum values ($sum).

        Inside $group it accumulates over documents; inside $project over
        the elements of an array path.

        Args:
            expression: Field to sum (use '$fieldName') or constant

        Example:
            >>> agg.sum('$Documents.PageCount')
            >>> agg.sum(1)  # Count
        """
        return {"$sum": expression}


def sum_of(expression: Union[str, int]) -> Dict[str, Any]:
    """Shorthand for ``Aggregation.sum``."""
    return Aggregation.sum(expression)
