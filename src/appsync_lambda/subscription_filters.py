"""
AppSync enhanced subscription filters.

Subscription handlers return a FilterGroup (or a Filter / FieldFilter, which
are wrapped automatically) to control which published events reach the
subscriber. AppSync limits are enforced when the filter is built:

- field paths are at most 256 characters
- ``in``/``notIn`` take at most 5 values, ``containsAny`` at most 20
- a Filter combines at most 5 field filters (AND)
- a FilterGroup combines at most 10 filters (OR)

Example:
    group = FilterGroup([
        Filter([FieldPath.new("user.role").eq("admin"), FieldPath.new("user.age").gt(21)]),
        Filter([FieldPath.new("user.permissions").contains_any(["moderate", "review"])]),
    ])
    group.to_dict()
    # {"filterGroup": [{"filters": [{"fieldName": "user.role", "operator": "eq", ...
"""

from enum import Enum
from typing import Any, Dict, Generic, Iterable, List, TypeVar, Union

from .runtime.errors import AppsyncError, ErrorType

T = TypeVar("T")

MAX_PATH_LENGTH = 256
MAX_IN_VALUES = 5
MAX_CONTAINS_ANY_VALUES = 20
MAX_FIELD_FILTERS = 5
MAX_FILTERS = 10


class FilterOp(Enum):
    EQ = "eq"
    NE = "ne"
    LE = "le"
    LT = "lt"
    GE = "ge"
    GT = "gt"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    BEGINS_WITH = "beginsWith"
    IN = "in"
    NOT_IN = "notIn"
    BETWEEN = "between"
    CONTAINS_ANY = "containsAny"


class FixedVec(Generic[T]):
    """Sequence holding at most ``capacity`` items."""

    def __init__(self, capacity: int, items: Iterable[T] = ()) -> None:
        values = list(items)
        if len(values) > capacity:
            raise ValueError(f"At most {capacity} values are allowed, got {len(values)}")
        self.capacity = capacity
        self.items: List[T] = values

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedVec):
            return NotImplemented
        return (self.capacity, self.items) == (other.capacity, other.items)

    def __repr__(self) -> str:
        return f"FixedVec({self.capacity}, {self.items!r})"


def _check_value(value: Any, allow_bool: bool) -> Any:
    # AppSync scalars are str/int subclasses and pass these checks
    if isinstance(value, bool):
        if not allow_bool:
            raise TypeError("Boolean values are only allowed with eq and ne")
        return value
    if isinstance(value, Enum):
        return value.value
    if not isinstance(value, (int, float, str)):
        raise TypeError(f"Unsupported filter value type {type(value).__name__}")
    return value


def _check_values(values: Iterable[Any]) -> List[Any]:
    return [_check_value(v, allow_bool=False) for v in values]


class FieldFilter:
    """One condition: a field path, an operator and a value."""

    def __init__(self, path: "FieldPath", operator: FilterOp, value: Any) -> None:
        self.path = path
        self.operator = operator
        self.value = value

    def to_dict(self) -> Dict[str, Any]:
        return {"fieldName": str(self.path), "operator": self.operator.value, "value": self.value}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldFilter):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"FieldFilter({self.to_dict()!r})"


class FieldPath:
    """
    Dotted path to a field of the published payload (e.g. ``user.name``).

    Build it with ``FieldPath.new``, which enforces the path length limit.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    @classmethod
    def new(cls, path: str) -> "FieldPath":
        """
        Raises:
            AppsyncError: ``ValidationError`` if the path exceeds 256 characters
        """
        if len(path) > MAX_PATH_LENGTH:
            raise AppsyncError(ErrorType.VALIDATION_ERROR, "Field path exceeds 256 characters")
        return cls(path)

    @classmethod
    def new_unchecked(cls, path: str) -> "FieldPath":
        """Build a path without checking its length."""
        return cls(path)

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"FieldPath({self.path!r})"

    def _filter(self, operator: FilterOp, value: Any) -> FieldFilter:
        return FieldFilter(self, operator, value)

    # Scalar comparisons

    def eq(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.EQ, _check_value(value, allow_bool=True))

    def eq_unchecked(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.EQ, value)

    def ne(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.NE, _check_value(value, allow_bool=True))

    def ne_unchecked(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.NE, value)

    def le(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.LE, _check_value(value, allow_bool=False))

    def le_unchecked(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.LE, value)

    def lt(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.LT, _check_value(value, allow_bool=False))

    def lt_unchecked(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.LT, value)

    def ge(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.GE, _check_value(value, allow_bool=False))

    def ge_unchecked(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.GE, value)

    def gt(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.GT, _check_value(value, allow_bool=False))

    def gt_unchecked(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.GT, value)

    def contains(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.CONTAINS, _check_value(value, allow_bool=False))

    def contains_unchecked(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.CONTAINS, value)

    def not_contains(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.NOT_CONTAINS, _check_value(value, allow_bool=False))

    def not_contains_unchecked(self, value: Any) -> FieldFilter:
        return self._filter(FilterOp.NOT_CONTAINS, value)

    def begins_with(self, value: str) -> FieldFilter:
        """String prefix match."""
        if not isinstance(value, str):
            raise TypeError("begins_with expects a string")
        return self._filter(FilterOp.BEGINS_WITH, str(value))

    # Array operators

    def in_values(self, values: Iterable[Any]) -> FieldFilter:
        """Field equals one of up to 5 values."""
        return self._filter(FilterOp.IN, _check_values(FixedVec(MAX_IN_VALUES, values)))

    def in_values_unchecked(self, values: Iterable[Any]) -> FieldFilter:
        return self._filter(FilterOp.IN, list(FixedVec(MAX_IN_VALUES, values)))

    def not_in(self, values: Iterable[Any]) -> FieldFilter:
        """Field equals none of up to 5 values."""
        return self._filter(FilterOp.NOT_IN, _check_values(FixedVec(MAX_IN_VALUES, values)))

    def not_in_unchecked(self, values: Iterable[Any]) -> FieldFilter:
        return self._filter(FilterOp.NOT_IN, list(FixedVec(MAX_IN_VALUES, values)))

    def between(self, start: Any, end: Any) -> FieldFilter:
        """Field lies in the inclusive range [start, end]."""
        return self._filter(FilterOp.BETWEEN, _check_values([start, end]))

    def between_unchecked(self, start: Any, end: Any) -> FieldFilter:
        return self._filter(FilterOp.BETWEEN, [start, end])

    def contains_any(self, values: Iterable[Any]) -> FieldFilter:
        """Array field contains at least one of up to 20 values."""
        return self._filter(
            FilterOp.CONTAINS_ANY, _check_values(FixedVec(MAX_CONTAINS_ANY_VALUES, values))
        )

    def contains_any_unchecked(self, values: Iterable[Any]) -> FieldFilter:
        return self._filter(FilterOp.CONTAINS_ANY, list(FixedVec(MAX_CONTAINS_ANY_VALUES, values)))


class Filter:
    """Up to 5 field filters, all of which must match."""

    def __init__(self, filters: Union[FieldFilter, Iterable[FieldFilter]]) -> None:
        if isinstance(filters, FieldFilter):
            filters = [filters]
        self.filters: FixedVec[FieldFilter] = FixedVec(MAX_FIELD_FILTERS, filters)

    def to_dict(self) -> Dict[str, Any]:
        return {"filters": [f.to_dict() for f in self.filters]}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filter):
            return NotImplemented
        return self.to_dict() == other.to_dict()


class FilterGroup:
    """Up to 10 filters, any of which may match."""

    def __init__(self, filters: Union[FieldFilter, Filter, Iterable[Filter]]) -> None:
        if isinstance(filters, FieldFilter):
            filters = [Filter(filters)]
        elif isinstance(filters, Filter):
            filters = [filters]
        self.filters: FixedVec[Filter] = FixedVec(MAX_FILTERS, filters)

    def to_dict(self) -> Dict[str, Any]:
        return {"filterGroup": [f.to_dict() for f in self.filters]}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterGroup):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"FilterGroup({self.to_dict()!r})"


def as_filter_group(value: Any) -> Any:
    """Wrap a Filter or FieldFilter returned by a subscription handler into a FilterGroup."""
    if isinstance(value, (FieldFilter, Filter)):
        return FilterGroup(value)
    return value
