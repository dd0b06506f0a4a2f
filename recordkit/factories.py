from .types import *
from .collection import Collection


def from_iterable(data: Optional[Iterable[T]]) -> Collection[T]:
    """create a collection from any iterable; none gives an empty collection"""
    return Collection(data)


def empty() -> Collection[Any]:
    """create empty collection"""
    return Collection()


def filled(count: int, prototype: T, clone_spec: Optional[CloneSpec] = None) -> Collection[T]:
    """collection of count independent copies of prototype"""
    return Collection().fill(count, prototype, clone_spec)


# --- aliases ---
collect = from_iterable
C = from_iterable
