from __future__ import annotations
import typing
from ..types import *
from ..errors import ValidationError

if typing.TYPE_CHECKING:
    from ..collection import Collection


def _prior_lookup(prior: Any, id_field: Optional[str]) -> Mapping[Any, Any]:
    """accept either an identity -> record mapping or a sequence of prior records"""
    from ..fields import identity_of
    if isinstance(prior, Mapping):
        return {key: record for key, record in prior.items() if key is not None}
    lookup = {}
    for record in prior:
        identity = identity_of(record, id_field)
        if identity is not None:
            lookup[identity] = record
    return lookup


class _CoreOperations(Generic[T]):
    def filter(self: 'Collection[T]', predicate: Any, prior: Any = None,
               id_field: Optional[str] = None) -> 'Collection[T]':
        """
        keep the records the predicate accepts, in their original order.
        with prior (identity -> record mapping, or a list of prior records) each
        record is evaluated together with its previous version; records without
        one are given none.
        """
        from ..collection import Collection
        from ..fields import identity_of
        from ..predicates import as_predicate
        pred = as_predicate(predicate)
        data = self._get_data()
        if prior is None:
            return Collection([x for x in data if pred.accepts(x)])
        lookup = _prior_lookup(prior, id_field)
        # records without an identity have no prior version
        return Collection([x for x in data if pred.accepts(x, lookup.get(identity_of(x, id_field)))])

    def find(self: 'Collection[T]', predicate: Any, default: Optional[T] = None) -> Optional[T]:
        """first accepted record, or default when nothing matches"""
        from ..predicates import as_predicate
        pred = as_predicate(predicate)
        for item in self._get_data():
            if pred.accepts(item):
                return item
        return default

    def sort(self: 'Collection[T]', comparator: Any = None, descending: bool = False) -> 'Collection[T]':
        """stable in-place sort of this collection's sequence; returns the same collection"""
        from ..comparators import as_comparator
        # list.sort is stable, so equal records keep their relative order
        self._get_data().sort(key=as_comparator(comparator, descending).sort_key())
        return self

    def wrap(self: 'Collection[T]', factory: Callable[[T], U]) -> 'Collection[U]':
        """one wrapper per record, each built from (and holding) its source record"""
        from ..collection import Collection
        from ..wrappers import as_wrapper_factory
        build = as_wrapper_factory(factory)
        return Collection([build(item) for item in self._get_data()])

    def reduce(self: 'Collection[T]', reducer: Reducer[U, T], initial: U) -> U:
        """left fold; reducer(accumulator, record, index)"""
        result = initial
        for index, item in enumerate(self._get_data()):
            result = reducer(result, item, index)
        return result

    def for_each(self: 'Collection[T]', action: Action[T]) -> 'Collection[T]':
        """
        eager side-effect pass: action(record, index) for every record in order.
        returns the same collection to keep chaining.
        """
        for index, item in enumerate(self._get_data()):
            action(item, index)
        return self

    def fill(self: 'Collection[T]', count: int, prototype: T,
             clone_spec: Optional[CloneSpec] = None) -> 'Collection[T]':
        """append count independent copies of prototype (see CloneSpec)"""
        from ..cloning import clone_record
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise ValidationError(f"fill count must be a non-negative integer, got {count!r}")
        if prototype is None:
            raise ValidationError("fill requires a prototype record")
        self._get_data().extend(clone_record(prototype, clone_spec) for _ in range(count))
        return self

    def is_empty(self: 'Collection[T]') -> bool:
        return not self._get_data()

    def is_not_empty(self: 'Collection[T]') -> bool:
        return bool(self._get_data())

    def cast(self: 'Collection[T]', target_type: Any = List[Any]) -> Any:
        """deep, checked conversion of the sequence, e.g. cast(List[Opportunity])"""
        from ..casting import convert
        return convert(self._get_data(), target_type)
