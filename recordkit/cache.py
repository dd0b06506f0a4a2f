"""
small in-memory record cache with secondary indexes on field values.

records are stored by identity; every index maps a field value to the records
currently holding it. lookups that miss return none / an empty list.
"""
import logging
from .types import *
from .collection import Collection
from .config import get_settings
from .errors import ValidationError
from .fields import get_field, identity_of

logger = logging.getLogger(__name__)


class IndexedCache(Generic[T]):
    def __init__(self, *index_fields: str, id_field: Optional[str] = None,
                 records: Optional[Iterable[T]] = None):
        if not index_fields:
            raise ValidationError("IndexedCache needs at least one index field")
        self._id_field = id_field or get_settings().id_field
        self._records: Dict[Any, T] = {}
        # field -> value -> identity -> record; inner dicts keep insertion order
        self._indexes: Dict[str, Dict[Any, Dict[Any, T]]] = {field: {} for field in index_fields}
        # identity -> the field values it was indexed under
        self._indexed: Dict[Any, Dict[str, Any]] = {}
        if records is not None:
            self.put_all(records)

    @property
    def index_fields(self) -> Tuple[str, ...]:
        return tuple(self._indexes)

    def _index_for(self, field: str) -> Dict[Any, Dict[Any, T]]:
        if field not in self._indexes:
            raise ValidationError(f"field {field!r} is not indexed (indexed: {', '.join(self._indexes)})")
        return self._indexes[field]

    def _identity(self, record: T) -> Any:
        identity = identity_of(record, self._id_field)
        if identity is None:
            raise ValidationError(f"cannot cache a record without {self._id_field!r}: {record!r}")
        try:
            hash(identity)
        except TypeError as e:
            raise ValidationError(f"identity is not hashable: {identity!r}") from e
        return identity

    def put(self, record: T) -> 'IndexedCache[T]':
        """add or replace a record (by identity), keeping every index in step"""
        identity = self._identity(record)
        values = {field: get_field(record, field) for field in self._indexes}
        for field, value in values.items():
            try:
                hash(value)
            except TypeError as e:
                raise ValidationError(f"value of {field!r} is not hashable: {value!r}") from e
        if identity in self._records:
            self._unindex(identity)
        self._records[identity] = record
        # _unindex removes what was indexed here, not what the record holds now
        self._indexed[identity] = values
        for field, value in values.items():
            self._indexes[field].setdefault(value, {})[identity] = record
        logger.debug(f"cached record {identity!r}")
        return self

    def put_all(self, records: Optional[Iterable[T]]) -> 'IndexedCache[T]':
        for record in records or []:
            self.put(record)
        return self

    def _unindex(self, identity: Any) -> None:
        for field, value in self._indexed.pop(identity, {}).items():
            bucket = self._indexes[field].get(value)
            if bucket is None:
                continue
            bucket.pop(identity, None)
            if not bucket:
                del self._indexes[field][value]

    def get(self, identity: Any, default: Optional[T] = None) -> Optional[T]:
        return self._records.get(identity, default)

    def find(self, field: str, value: Any) -> List[T]:
        """every cached record whose field equals value, in insertion order"""
        bucket = self._index_for(field).get(value)
        return list(bucket.values()) if bucket else []

    def find_one(self, field: str, value: Any) -> Optional[T]:
        bucket = self._index_for(field).get(value)
        return next(iter(bucket.values())) if bucket else None

    def match(self, **criteria: Any) -> List[T]:
        """records matching every field=value pair; all fields must be indexed"""
        if not criteria:
            return list(self._records.values())
        identities = None
        for field, value in criteria.items():
            bucket = self._index_for(field).get(value) or {}
            identities = set(bucket) if identities is None else identities & set(bucket)
            if not identities:
                return []
        return [record for identity, record in self._records.items() if identity in identities]

    def keys(self, field: str) -> Set[Any]:
        """distinct values currently indexed for a field"""
        return set(self._index_for(field))

    def remove(self, identity: Any) -> Optional[T]:
        record = self._records.pop(identity, None)
        if record is not None:
            self._unindex(identity)
            logger.debug(f"evicted record {identity!r}")
        return record

    def clear(self) -> None:
        self._records.clear()
        self._indexed.clear()
        for index in self._indexes.values():
            index.clear()

    def values(self) -> Collection[T]:
        return Collection(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, identity: Any) -> bool:
        return identity in self._records

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._records.values()))

    def __repr__(self) -> str:
        return f"IndexedCache(records={len(self)}, indexes={list(self._indexes)})"
