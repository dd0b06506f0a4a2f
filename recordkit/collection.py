from __future__ import annotations

from .types import *

# --- operations ---
from .extensions.core import _CoreOperations
from .extensions.grouping import _GroupingOperations

# --- accessors ---
from .extensions.terminal import TerminalAccessor


class _BaseCollection(Generic[T]):
    def __init__(self, data: Optional[Iterable[T]] = None):
        """copy the source into a list owned by this collection; none means empty"""
        self._data: List[T] = list(data) if data is not None else []

    def _get_data(self) -> List[T]:
        return self._data

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, index):
        return self._data[index]

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, _BaseCollection):
            return self._data == other._data
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


class Collection(
    _BaseCollection[T],
    _CoreOperations[T],
    _GroupingOperations[T]
):
    """chainable operations over an ordered sequence of records."""
    def __init__(self, data: Optional[Iterable[T]] = None):
        super().__init__(data)
        self.to = TerminalAccessor(self)
