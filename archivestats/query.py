"""
archivestats Query - Fluent query builder translated to aggregation pipelines
"""
from typing import Any, Dict, List, Optional, Tuple, Union

from .aggregation import Aggregation
from .errors import EmptyResultError

VALUE_FIELD = "_v"
_NO_GROUP = object()


class Queryable:
    """
    Immutable, chainable query over a collection.

    Each call returns a new ``Queryable``; nothing is sent to the store until
    ``to_list``, ``first`` or ``first_or_default`` runs. Projected values are
    carried in a single ``_v`` field, so ``select`` followed by an aggregate
    reads like a query over plain values.

    Args:
        collection: Collection the query runs against
        allow_disk_use: Passed through to ``Collection.aggregate``

    Example:
        >>> total = (
        ...     entries.as_queryable(allow_disk_use=True)
        ...     .select(sum_of('$Documents.PageCount'))
        ...     .group_by(None)
        ...     .sum()
        ...     .first()
        ... )
    """

    def __init__(
        self,
        collection,
        allow_disk_use: bool = False,
        _stages: Tuple[Dict[str, Any], ...] = (),
        _scalar: bool = False,
        _group_key: Any = _NO_GROUP,
        _agg_count: int = 0,
    ):
        self.collection = collection
        self.allow_disk_use = allow_disk_use
        self._stages = _stages
        self._scalar = _scalar
        self._group_key = _group_key
        self._agg_count = _agg_count

    def _derive(self, stages=(), **changes) -> "Queryable":
        state = {
            "_stages": self._stages + tuple(stages),
            "_scalar": self._scalar,
            "_group_key": self._group_key,
            "_agg_count": self._agg_count,
        }
        state.update(changes)
        return Queryable(self.collection, self.allow_disk_use, **state)

    def _check_not_grouping(self, operation: str):
        if self._group_key is not _NO_GROUP:
            raise ValueError(f"group_by() must be followed by an aggregate, not {operation}()")

    def where(self, filter: Dict[str, Any]) -> "Queryable":
        """Keep only documents matching ``filter`` ($match)."""
        self._check_not_grouping("where")
        return self._derive([Aggregation.match(filter)])

    def select(self, expression: Union[str, Dict[str, Any]]) -> "Queryable":
        """
        Replace each document by the value of ``expression``.

        Example:
            >>> q.select(sum_of('$Documents.PageCount'))
        """
        self._check_not_grouping("select")
        stage = Aggregation.project({VALUE_FIELD: expression, "_id": 0})
        return self._derive([stage], _scalar=True)

    def group_by(self, key: Optional[Union[str, Dict[str, Any]]]) -> "Queryable":
        """
        Group documents by ``key``; ``None`` puts every document in one group.

        Must be followed by an aggregate such as ``sum()``.
        """
        self._check_not_grouping("group_by")
        return self._derive(_group_key=key)

    def sum(self, expression: Optional[Union[str, Dict[str, Any]]] = None) -> "Queryable":
        """
        Sum the selected values (or ``expression``) per group.

        Without a preceding ``group_by`` the whole input is one group.

        Raises:
            ValueError: If there is nothing selected and no expression given
        """
        if expression is None:
            if not self._scalar:
                raise ValueError("sum() needs an expression or a preceding select()")
            expression = f"${VALUE_FIELD}"

        key = None if self._group_key is _NO_GROUP else self._group_key
        agg_field = f"__agg{self._agg_count}"
        stages = [
            Aggregation.group(key, {agg_field: Aggregation.sum(expression)}),
            Aggregation.project({VALUE_FIELD: f"${agg_field}", "_id": 0}),
        ]
        return self._derive(
            stages,
            _scalar=True,
            _group_key=_NO_GROUP,
            _agg_count=self._agg_count + 1,
        )

    def limit(self, count: int) -> "Queryable":
        """Return at most ``count`` results ($limit)."""
        self._check_not_grouping("limit")
        return self._derive([Aggregation.limit(count)])

    def to_pipeline(self) -> List[Dict[str, Any]]:
        """
        Translate the query into aggregation stages.

        Raises:
            ValueError: If a ``group_by`` has not been followed by an aggregate
        """
        self._check_not_grouping("to_pipeline")
        return [dict(stage) for stage in self._stages]

    def _unwrap(self, row: Dict[str, Any]) -> Any:
        return row.get(VALUE_FIELD) if self._scalar else row

    def to_list(self) -> List[Any]:
        """Run the query and return all results."""
        rows = self.collection.aggregate(self.to_pipeline(), allow_disk_use=self.allow_disk_use)
        return [self._unwrap(row) for row in rows]

    def first(self) -> Any:
        """
        Run the query and return its first result.

        Raises:
            EmptyResultError: If the query produced no results
        """
        results = self.limit(1).to_list()
        if not results:
            raise EmptyResultError(f"Query on '{self.collection.name}' returned no results")
        return results[0]

    def first_or_default(self, default: Any = None) -> Any:
        """Like ``first()``, but return ``default`` when there are no results."""
        results = self.limit(1).to_list()
        return results[0] if results else default

    def __repr__(self) -> str:
        return f"Queryable(collection='{self.collection.name}', stages={len(self._stages)})"
