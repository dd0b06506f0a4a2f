from __future__ import annotations
import operator as _op
from abc import ABC, abstractmethod

import numpy as np

from .types import *
from .config import get_settings
from .errors import ValidationError
from .fields import get_field, identity_of

# mean earth radius per supported unit
EARTH_RADIUS = {'mi': 3958.8, 'km': 6371.0}

_ORDERING = {
    '>': _op.gt,
    '>=': _op.ge,
    '<': _op.lt,
    '<=': _op.le,
}
_EQUALITY = {
    '==': _op.eq,
    '!=': _op.ne,
}
_MEMBERSHIP = ('IN', 'NOT IN')

OPERATORS = tuple(_EQUALITY) + tuple(_ORDERING) + _MEMBERSHIP


class Predicate(ABC, Generic[T]):
    """accept / reject decision for a record, optionally given its prior version"""

    @abstractmethod
    def accepts(self, record: T, prior: Optional[T] = None) -> bool:
        pass

    def __call__(self, record: T, prior: Optional[T] = None) -> bool:
        return self.accepts(record, prior)

    def __invert__(self) -> 'Predicate[T]':
        return Not(self)

    def __and__(self, other: Any) -> 'Predicate[T]':
        return AllOf(self, as_predicate(other))

    def __or__(self, other: Any) -> 'Predicate[T]':
        return AnyOf(self, as_predicate(other))


class FunctionPredicate(Predicate[T]):
    """adapts a plain callable; with_prior=True passes (record, prior)"""

    def __init__(self, func: Callable[..., bool], with_prior: bool = False):
        if not callable(func):
            raise ValidationError("FunctionPredicate requires a callable")
        self._func = func
        self.with_prior = with_prior

    def accepts(self, record: T, prior: Optional[T] = None) -> bool:
        if self.with_prior:
            return bool(self._func(record, prior))
        return bool(self._func(record))


def _normalize_operator(operator: str) -> str:
    if not isinstance(operator, str):
        raise ValidationError(f"operator must be a string, got {operator!r}")
    normalized = ' '.join(operator.split())
    if normalized.upper() in _MEMBERSHIP:
        return normalized.upper()
    if normalized not in OPERATORS:
        raise ValidationError(f"unsupported operator {operator!r}; expected one of {', '.join(OPERATORS)}")
    return normalized


def _as_values(values: Any) -> Union[frozenset, tuple]:
    if values is None or isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise ValidationError(f"membership test needs a collection of values, got {values!r}")
    values = tuple(values)
    try:
        return frozenset(values)
    except TypeError:
        # unhashable values fall back to a linear scan
        return values


class FieldValues(Predicate[T]):
    """IN / NOT IN membership of a field value"""

    def __init__(self, field: str, values: Iterable[Any], negate: bool = False):
        self.field = field
        self.values = _as_values(values)
        self.negate = negate

    def accepts(self, record: T, prior: Optional[T] = None) -> bool:
        actual = get_field(record, self.field)
        try:
            found = actual in self.values
        except TypeError:
            # unhashable field value (list, dict) against a frozenset
            found = any(value == actual for value in self.values)
        return not found if self.negate else found

    def __repr__(self) -> str:
        return f"FieldValues({self.field!r}, {'NOT IN' if self.negate else 'IN'}, {sorted(map(repr, self.values))})"


class FieldValue(Predicate[T]):
    """compares a field against a constant with one of ==, !=, >, >=, <, <=, IN, NOT IN"""

    def __init__(self, field: str, operator: str, value: Any):
        self.field = field
        self.operator = _normalize_operator(operator)
        self.value = value
        self._membership = None
        if self.operator in _MEMBERSHIP:
            self._membership = FieldValues(field, value, negate=self.operator == 'NOT IN')

    def accepts(self, record: T, prior: Optional[T] = None) -> bool:
        if self._membership is not None:
            return self._membership.accepts(record)
        actual = get_field(record, self.field)
        if self.operator in _EQUALITY:
            return _EQUALITY[self.operator](actual, self.value)
        if actual is None or self.value is None:
            return False
        return _ORDERING[self.operator](actual, self.value)

    def __repr__(self) -> str:
        return f"FieldValue({self.field!r} {self.operator} {self.value!r})"


class RelatedTo(Predicate[T]):
    """accepts records whose foreign-key field points at one of the given parent records"""

    def __init__(self, field: str, parents: Optional[Iterable[Any]], id_field: Optional[str] = None):
        self.field = field
        self.parent_ids = {
            pid for pid in (identity_of(parent, id_field) for parent in (parents or []))
            if pid is not None
        }

    def accepts(self, record: T, prior: Optional[T] = None) -> bool:
        try:
            return get_field(record, self.field) in self.parent_ids
        except TypeError:
            return False


def distance(origin: Tuple[float, float], target: Tuple[float, float], unit: Optional[str] = None) -> float:
    """great-circle (haversine) distance between two (latitude, longitude) points"""
    unit = _check_unit(unit)
    lat1, lng1, lat2, lng2 = np.radians([origin[0], origin[1], target[0], target[1]])
    a = np.sin((lat2 - lat1) / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin((lng2 - lng1) / 2) ** 2
    return float(2 * EARTH_RADIUS[unit] * np.arcsin(np.sqrt(a)))


def _check_unit(unit: Optional[str]) -> str:
    unit = (unit or get_settings().distance_unit).lower()
    if unit not in EARTH_RADIUS:
        raise ValidationError(f"unsupported distance unit {unit!r}; expected one of {', '.join(EARTH_RADIUS)}")
    return unit


class WithinDistance(Predicate[T]):
    """accepts records whose coordinates lie within max_distance of the origin"""

    def __init__(self, latitude_field: str, longitude_field: str, origin: Tuple[float, float],
                 max_distance: float, unit: Optional[str] = None):
        if max_distance is None or max_distance < 0:
            raise ValidationError(f"max_distance must be zero or positive, got {max_distance!r}")
        if origin is None or len(origin) != 2:
            raise ValidationError(f"origin must be a (latitude, longitude) pair, got {origin!r}")
        self.latitude_field = latitude_field
        self.longitude_field = longitude_field
        self.origin = (float(origin[0]), float(origin[1]))
        self.max_distance = max_distance
        self.unit = _check_unit(unit)

    def accepts(self, record: T, prior: Optional[T] = None) -> bool:
        lat = get_field(record, self.latitude_field)
        lng = get_field(record, self.longitude_field)
        if lat is None or lng is None:
            return False
        return distance(self.origin, (float(lat), float(lng)), self.unit) <= self.max_distance


class FieldChanged(Predicate[T]):
    """
    change detection against the prior version of a record.
    accepts when the field value differs from the prior one and the transition
    matches from_value -> to_value (ANY matches either side).
    records without a prior version never count as changed.
    """

    def __init__(self, field: str, from_value: Any = ANY, to_value: Any = ANY):
        self.field = field
        self.from_value = from_value
        self.to_value = to_value

    def accepts(self, record: T, prior: Optional[T] = None) -> bool:
        if prior is None:
            return False
        old = get_field(prior, self.field)
        new = get_field(record, self.field)
        if old == new:
            return False
        return _matches(self.from_value, old) and _matches(self.to_value, new)

    def __repr__(self) -> str:
        return f"FieldChanged({self.field!r}, {self.from_value!r} -> {self.to_value!r})"


def _matches(expected: Any, actual: Any) -> bool:
    return expected is ANY or expected == actual


class Not(Predicate[T]):
    def __init__(self, inner: Predicate[T]):
        self.inner = as_predicate(inner)

    def accepts(self, record: T, prior: Optional[T] = None) -> bool:
        return not self.inner.accepts(record, prior)


class AllOf(Predicate[T]):
    def __init__(self, *predicates: Any):
        self.predicates = [as_predicate(p) for p in predicates]

    def accepts(self, record: T, prior: Optional[T] = None) -> bool:
        return all(p.accepts(record, prior) for p in self.predicates)


class AnyOf(Predicate[T]):
    def __init__(self, *predicates: Any):
        self.predicates = [as_predicate(p) for p in predicates]

    def accepts(self, record: T, prior: Optional[T] = None) -> bool:
        return any(p.accepts(record, prior) for p in self.predicates)


def as_predicate(spec: Any) -> Predicate:
    """coerce a predicate instance, a (field, operator, value) triple or a one-argument callable"""
    if isinstance(spec, Predicate):
        return spec
    if isinstance(spec, tuple) and len(spec) == 3:
        return FieldValue(*spec)
    if callable(spec):
        return FunctionPredicate(spec)
    raise ValidationError(f"cannot use {spec!r} as a predicate")
