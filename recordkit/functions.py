"""
one-shot forms of the collection operations, taking the sequence explicitly.

a none sequence behaves like an empty one. only sort and fill modify the list
they are given (both documented as in-place); every other function leaves the
caller's sequence untouched.
"""
from .types import *
from .collection import Collection
from .comparators import as_comparator
from .casting import convert


def unique_values(records: Optional[Iterable[T]], extractor: Any) -> Set[Any]:
    return Collection(records).unique_values(extractor)


def map_by(records: Optional[Iterable[T]], extractor: Any, overwrite: bool = False) -> Dict[Any, Any]:
    return Collection(records).map_by(extractor, overwrite=overwrite)


def group_by(records: Optional[Iterable[T]], extractor: Any) -> Dict[Any, List[Any]]:
    return Collection(records).group_by(extractor)


def filter(records: Optional[Iterable[T]], predicate: Any, prior: Any = None,
           id_field: Optional[str] = None) -> List[T]:
    return Collection(records).filter(predicate, prior=prior, id_field=id_field).to.list()


def find(records: Optional[Iterable[T]], predicate: Any, default: Optional[T] = None) -> Optional[T]:
    return Collection(records).find(predicate, default)


def sort(records: Optional[List[T]], comparator: Any = None, descending: bool = False) -> List[T]:
    """stable in-place sort of the given list, which is also returned"""
    if records is None:
        return []
    records.sort(key=as_comparator(comparator, descending).sort_key())
    return records


def wrap(records: Optional[Iterable[T]], factory: Callable[[T], U]) -> List[U]:
    return Collection(records).wrap(factory).to.list()


def reduce(records: Optional[Iterable[T]], reducer: Reducer[U, T], initial: U) -> U:
    return Collection(records).reduce(reducer, initial)


def for_each(records: Optional[Iterable[T]], action: Action[T]) -> Optional[Iterable[T]]:
    """
    action(record, index) for every record; returns the records it was given.
    a one-shot iterator is consumed by the pass, so the records come back as a list.
    """
    if isinstance(records, Iterator):
        records = list(records)
    Collection(records).for_each(action)
    return records


def fill(records: Optional[List[T]], count: int, prototype: T,
         clone_spec: Optional[CloneSpec] = None) -> List[T]:
    """append count copies of prototype to the given list (a new list when none)"""
    copies = Collection().fill(count, prototype, clone_spec).to.list()
    if records is None:
        return copies
    records.extend(copies)
    return records


def is_empty(records: Optional[Iterable[Any]]) -> bool:
    return records is None or Collection(records).is_empty()


def is_not_empty(records: Optional[Iterable[Any]]) -> bool:
    return not is_empty(records)


def cast(value: Any, target_type: Any) -> Any:
    """deep, checked conversion of a loosely-typed result; none gives an empty target"""
    return convert(value, target_type)
