from dataclasses import dataclass
from typing import (
    TypeVar, Generic, Callable, Iterator, Iterable, Any, Optional, Union,
    Dict, List, Tuple, Set, Type, Mapping, Sequence
)

T = TypeVar('T')
U = TypeVar('U')
K = TypeVar('K')
V = TypeVar('V')

PredicateFunc = Callable[[T], bool]
Selector = Callable[[T], U]
KeySelector = Callable[[T], K]
Comparer = Callable[[T, T], int]
Reducer = Callable[[U, T, int], U]
Action = Callable[[T, int], Any]


class _AnyValue:
    """wildcard that matches every value, including none"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'ANY'

    def __reduce__(self):
        return (_AnyValue, ())


ANY = _AnyValue()


@dataclass(frozen=True)
class CloneSpec:
    """controls how fill() replicates a prototype record"""
    preserve_identity: bool = False
    deep_copy: bool = False
    preserve_generated_timestamps: bool = False
    preserve_auto_sequence: bool = False
