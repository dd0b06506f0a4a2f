import dataclasses
from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

from .config import get_settings
from .errors import ValidationError

_MISSING = object()


def _check_path(path: str) -> None:
    if not isinstance(path, str) or not path.strip():
        raise ValidationError(f"field path must be a non-empty string, got {path!r}")


def _read(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, _MISSING)
    return getattr(record, name, _MISSING)


def get_field(record: Any, path: str, default: Any = None) -> Any:
    """
    read a field from a mapping or an attribute-bearing object.
    dotted paths ('account.owner.name') walk through related records;
    a missing field or an absent related record yields the default.
    """
    _check_path(path)
    current = record
    for part in path.split('.'):
        if current is None:
            return default
        current = _read(current, part)
        if current is _MISSING:
            return default
    return current


def has_field(record: Any, name: str) -> bool:
    _check_path(name)
    return record is not None and _read(record, name) is not _MISSING


def set_field(record: Any, name: str, value: Any) -> None:
    """write a top-level field in place"""
    _check_path(name)
    if isinstance(record, MutableMapping):
        record[name] = value
    else:
        try:
            setattr(record, name, value)
        except AttributeError as e:
            raise ValidationError(f"cannot set {name!r} on {type(record).__name__}: {e}") from e


def clear_fields(record: Any, names) -> Any:
    """
    set every present field in names to none and return the record.
    frozen dataclasses and namedtuples cannot be written in place, so a replaced copy is returned for them.
    """
    present = [name for name in names if has_field(record, name)]
    if not present:
        return record
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return dataclasses.replace(record, **{name: None for name in present})
    if isinstance(record, tuple) and hasattr(record, '_replace'):
        return record._replace(**{name: None for name in present})
    for name in present:
        set_field(record, name, None)
    return record


def identity_of(record: Any, id_field: Optional[str] = None) -> Any:
    """the stable primary key of a record, read from the configured identity field"""
    return get_field(record, id_field or get_settings().id_field)
