"""
deep, checked conversion of loosely-typed results (plain dicts, lists, sets)
into a declared target type such as Dict[str, List[Opportunity]].

validation is delegated to pydantic: containers are rebuilt, dataclasses are
built from mappings, and every leaf is checked against its declared type.
"""
import collections.abc as abc
import types as _types
from typing import Any, Union, get_origin

from pydantic import PydanticUserError, TypeAdapter, ValidationError as PydanticValidationError

from .errors import ConversionError

_LIST_ORIGINS = (list, abc.Sequence, abc.MutableSequence, abc.Iterable, abc.Collection)
_SET_ORIGINS = (set, abc.Set, abc.MutableSet)
_DICT_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)


def convert(value: Any, target: Any) -> Any:
    """convert value into target; none becomes an empty instance of the target"""
    if value is None:
        return empty_of(target)
    try:
        adapter = TypeAdapter(target)
    except PydanticUserError as e:
        raise ConversionError(f"unsupported target type {target!r}: {e}") from e
    try:
        return adapter.validate_python(value)
    except PydanticValidationError as e:
        raise ConversionError(_describe(e, target)) from e


def _path(loc: tuple) -> str:
    return '$' + ''.join(f"[{part!r}]" for part in loc)


def _describe(error: PydanticValidationError, target: Any) -> str:
    problems = [f"{_path(detail['loc'])}: {detail['msg']}" for detail in error.errors()]
    return f"cannot convert to {_name(target)}: {'; '.join(problems)}"


def empty_of(target: Any) -> Any:
    origin = get_origin(target) or target
    if _is_union(target):
        return None
    if target is Any or target is object:
        return None
    if origin in _LIST_ORIGINS:
        return []
    if origin in _SET_ORIGINS:
        return set()
    if origin is frozenset:
        return frozenset()
    if origin is tuple:
        return ()
    if origin in _DICT_ORIGINS:
        return {}
    if isinstance(origin, type):
        try:
            return origin()
        except TypeError as e:
            raise ConversionError(f"cannot build an empty {_name(target)}: {e}") from e
    raise ConversionError(f"unsupported target type {target!r}")


def _is_union(target: Any) -> bool:
    origin = get_origin(target)
    return origin is Union or (hasattr(_types, 'UnionType') and origin is _types.UnionType)


def _name(target: Any) -> str:
    return getattr(target, '__name__', None) or repr(target)
