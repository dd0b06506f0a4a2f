from __future__ import annotations
import typing
from collections import defaultdict
from ..types import *
from ..errors import DuplicateKeyError

if typing.TYPE_CHECKING:
    from ..collection import Collection


class _GroupingOperations(Generic[T]):
    def unique_values(self: 'Collection[T]', extractor: Any) -> Set[Any]:
        """
        distinct keys across the sequence.
        a tuple of field names builds a compound (tuple) key.
        """
        from ..extractors import as_extractor
        ext = as_extractor(extractor)
        return {ext.check(ext.key(item)) for item in self._get_data()}

    def map_by(self: 'Collection[T]', extractor: Any, overwrite: bool = False) -> Dict[Any, Any]:
        """
        one-to-one mapping key -> record (or -> value for a key-value extractor).
        a repeated key raises DuplicateKeyError unless overwrite=True, in which case the last record wins.
        """
        from ..extractors import as_extractor
        ext = as_extractor(extractor)
        result = {}
        for item in self._get_data():
            key, value = ext.extract(item)
            if not overwrite and key in result:
                raise DuplicateKeyError(key)
            result[key] = value
        return result

    def group_by(self: 'Collection[T]', extractor: Any) -> Dict[Any, List[Any]]:
        """one-to-many groups; members keep their input order"""
        from ..extractors import as_extractor
        ext = as_extractor(extractor)
        groups = defaultdict(list)
        for item in self._get_data():
            key, value = ext.extract(item)
            groups[key].append(value)
        return dict(groups)
