from __future__ import annotations
from abc import ABC, abstractmethod
from .types import *
from .errors import ValidationError
from .fields import get_field


class KeyExtractor(ABC, Generic[T, K]):
    """derives a grouping / mapping key from a record"""
    key_type: Optional[type] = None

    @abstractmethod
    def key(self, record: T) -> K:
        pass

    def check(self, key: K) -> K:
        """validate a key against the declared key type (none always passes)"""
        if self.key_type is not None and key is not None and not isinstance(key, self.key_type):
            raise ValidationError(
                f"{type(self).__name__} produced {key!r} ({type(key).__name__}), "
                f"expected {self.key_type.__name__}")
        return key

    def extract(self, record: T) -> Tuple[K, Any]:
        """the (key, value) pair stored for a record; plain extractors store the record itself"""
        return self.check(self.key(record)), record


class KeyValueExtractor(KeyExtractor[T, K]):
    """extractor whose mapped value differs from the record"""

    @abstractmethod
    def value(self, record: T) -> Any:
        pass

    def extract(self, record: T) -> Tuple[K, Any]:
        return self.check(self.key(record)), self.value(record)


class FieldKey(KeyExtractor[T, Any]):
    def __init__(self, field: str, key_type: Optional[type] = None):
        if not isinstance(field, str) or not field:
            raise ValidationError("FieldKey requires a field name")
        self.field = field
        self.key_type = key_type

    def key(self, record: T) -> Any:
        return get_field(record, self.field)

    def __repr__(self) -> str:
        return f"FieldKey({self.field!r})"


class CompositeKey(KeyExtractor[T, Tuple]):
    """compound key: a tuple of several field values"""

    def __init__(self, *fields: str):
        if not fields:
            raise ValidationError("CompositeKey requires at least one field")
        for field in fields:
            if not isinstance(field, str) or not field:
                raise ValidationError(f"invalid field name in CompositeKey: {field!r}")
        self.fields = tuple(fields)

    def key(self, record: T) -> Tuple:
        return tuple(get_field(record, field) for field in self.fields)

    def __repr__(self) -> str:
        return f"CompositeKey{self.fields!r}"


class FieldPairKey(CompositeKey[T]):
    """key made of exactly two attributes, e.g. (account_id, stage)"""

    def __init__(self, first: str, second: str, key_type: Optional[type] = None):
        super().__init__(first, second)
        self.key_type = key_type


class FieldKeyValue(KeyValueExtractor[T, Any]):
    """maps one field to another, e.g. id -> name"""

    def __init__(self, key_field: str, value_field: str, key_type: Optional[type] = None):
        self._key = FieldKey(key_field)
        self.value_field = value_field
        self.key_type = key_type

    @property
    def key_field(self) -> str:
        return self._key.field

    def key(self, record: T) -> Any:
        return self._key.key(record)

    def value(self, record: T) -> Any:
        return get_field(record, self.value_field)


class FunctionKey(KeyExtractor[T, K]):
    def __init__(self, func: KeySelector[T, K], key_type: Optional[type] = None):
        if not callable(func):
            raise ValidationError("FunctionKey requires a callable")
        self._func = func
        self.key_type = key_type

    def key(self, record: T) -> K:
        return self._func(record)


class FunctionKeyValue(KeyValueExtractor[T, K]):
    def __init__(self, key_func: KeySelector[T, K], value_func: Selector[T, V],
                 key_type: Optional[type] = None):
        if not callable(key_func) or not callable(value_func):
            raise ValidationError("FunctionKeyValue requires two callables")
        self._key_func = key_func
        self._value_func = value_func
        self.key_type = key_type

    def key(self, record: T) -> K:
        return self._key_func(record)

    def value(self, record: T) -> V:
        return self._value_func(record)


def as_extractor(spec: Any) -> KeyExtractor:
    """
    coerce an extractor spec:
    an extractor instance, a field name, a tuple/list of field names (compound key) or a callable.
    """
    if isinstance(spec, KeyExtractor):
        return spec
    if isinstance(spec, str):
        return FieldKey(spec)
    if isinstance(spec, (tuple, list)):
        return CompositeKey(*spec)
    if callable(spec):
        return FunctionKey(spec)
    raise ValidationError(f"cannot use {spec!r} as a key extractor")
