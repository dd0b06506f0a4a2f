from __future__ import annotations
import typing
import numpy as np
import pandas as pd
from ..types import *

if typing.TYPE_CHECKING:
    from ..collection import Collection


class TerminalAccessor(Generic[T]):
    def __init__(self, collection_instance: 'Collection[T]'):
        self._collection = collection_instance

    def list(self) -> List[T]:
        """copy of the sequence as a plain list"""
        return list(self._collection._get_data())

    def set(self) -> Set[T]:
        """convert to set"""
        return set(self._collection._get_data())

    def count(self, predicate: Any = None) -> int:
        """count records, optionally only the accepted ones"""
        if predicate is None: return len(self._collection._get_data())
        from ..predicates import as_predicate
        pred = as_predicate(predicate)
        return sum(1 for x in self._collection._get_data() if pred.accepts(x))

    def array(self) -> np.ndarray:
        """convert to numpy array"""
        return np.array(self._collection._get_data(), dtype=object)

    def series(self) -> pd.Series:
        """convert to pandas series"""
        return pd.Series(self._collection._get_data(), dtype=object)

    def df(self) -> pd.DataFrame:
        """
        records as a pandas dataframe, one row per record.
        mappings become columns directly; other records are read through vars().
        """
        rows = [x if isinstance(x, Mapping) else vars(x) for x in self._collection._get_data()]
        return pd.DataFrame(rows)
