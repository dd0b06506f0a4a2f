from __future__ import annotations
from abc import ABC, abstractmethod
from functools import cmp_to_key
from .types import *
from .errors import ValidationError
from .fields import get_field


def compare_values(a: Any, b: Any) -> int:
    """three-way comparison where none sorts before every other value"""
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    return (a > b) - (a < b)


class Comparator(ABC, Generic[T]):
    """three-way ordering between two records"""

    @abstractmethod
    def compare(self, a: T, b: T) -> int:
        pass

    def __call__(self, a: T, b: T) -> int:
        return self.compare(a, b)

    def sort_key(self) -> Callable[[T], Any]:
        """key function usable with list.sort / sorted"""
        return cmp_to_key(self.compare)

    def reversed(self) -> 'Comparator[T]':
        return _Reversed(self)

    def then(self, other: Any) -> 'Comparator[T]':
        return ChainedComparator(self, as_comparator(other))


class _Reversed(Comparator[T]):
    def __init__(self, inner: Comparator[T]):
        self.inner = inner

    def compare(self, a: T, b: T) -> int:
        return -self.inner.compare(a, b)

    def reversed(self) -> Comparator[T]:
        return self.inner


class NaturalComparator(Comparator[T]):
    """compares records directly with < and >"""

    def compare(self, a: T, b: T) -> int:
        return compare_values(a, b)


class FieldComparator(Comparator[T]):
    """orders by a field value; none comes first ascending and last descending"""

    def __init__(self, field: str, descending: bool = False):
        if not isinstance(field, str) or not field:
            raise ValidationError("FieldComparator requires a field name")
        self.field = field
        self.descending = descending

    def compare(self, a: T, b: T) -> int:
        result = compare_values(get_field(a, self.field), get_field(b, self.field))
        return -result if self.descending else result

    def reversed(self) -> 'FieldComparator[T]':
        return FieldComparator(self.field, not self.descending)

    def __repr__(self) -> str:
        return f"FieldComparator({self.field!r}, {'desc' if self.descending else 'asc'})"


class FunctionComparator(Comparator[T]):
    def __init__(self, func: Comparer[T]):
        if not callable(func):
            raise ValidationError("FunctionComparator requires a callable")
        self._func = func

    def compare(self, a: T, b: T) -> int:
        return self._func(a, b)


class ChainedComparator(Comparator[T]):
    """tie-breaking chain: the first non-zero comparison wins"""

    def __init__(self, *comparators: Any):
        if not comparators:
            raise ValidationError("ChainedComparator requires at least one comparator")
        self.comparators = [as_comparator(c) for c in comparators]

    def compare(self, a: T, b: T) -> int:
        for comparator in self.comparators:
            result = comparator.compare(a, b)
            if result:
                return result
        return 0


def ascending(field: str) -> FieldComparator:
    return FieldComparator(field)


def descending(field: str) -> FieldComparator:
    return FieldComparator(field, descending=True)


def as_comparator(spec: Any = None, descending: bool = False) -> Comparator:
    """
    coerce a comparator spec: none (natural order), a field name, a tuple of field names,
    a comparator instance or a cmp-style callable. descending flips the result.
    """
    if spec is None:
        comparator = NaturalComparator()
    elif isinstance(spec, Comparator):
        comparator = spec
    elif isinstance(spec, str):
        comparator = FieldComparator(spec)
    elif isinstance(spec, (tuple, list)):
        comparator = ChainedComparator(*[FieldComparator(field) for field in spec])
    elif callable(spec):
        comparator = FunctionComparator(spec)
    else:
        raise ValidationError(f"cannot use {spec!r} as a comparator")
    return comparator.reversed() if descending else comparator
