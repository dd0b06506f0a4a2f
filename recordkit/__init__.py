"""
recordkit: collection helpers for record-oriented code.

    from recordkit import C, FieldValue, FieldChanged

    open_deals = C(deals).filter(FieldValue('stage', '==', 'Open')).sort('amount', descending=True)
    by_account = open_deals.group_by('account_id')
"""

# expose the main class
from .collection import Collection

# expose the factory functions
from .factories import (
    from_iterable,
    empty,
    filled,
    collect,
    C
)

# one-shot functions, used as recordkit.functions.group_by(records, ...)
from . import functions

# expose strategies
from .extractors import (
    KeyExtractor,
    KeyValueExtractor,
    FieldKey,
    FieldPairKey,
    CompositeKey,
    FieldKeyValue,
    FunctionKey,
    FunctionKeyValue,
    as_extractor
)
from .predicates import (
    Predicate,
    FunctionPredicate,
    FieldValue,
    FieldValues,
    RelatedTo,
    WithinDistance,
    FieldChanged,
    Not,
    AllOf,
    AnyOf,
    as_predicate,
    distance
)
from .comparators import (
    Comparator,
    NaturalComparator,
    FieldComparator,
    FunctionComparator,
    ChainedComparator,
    ascending,
    descending,
    as_comparator
)
from .wrappers import Wrapper

# expose supporting types
from .types import ANY, CloneSpec
from .casting import convert
from .cloning import clone_record
from .cache import IndexedCache
from .config import Settings, configure, get_settings, override_settings
from .fields import get_field, set_field, identity_of
from .errors import (
    RecordkitError,
    ValidationError,
    DuplicateKeyError,
    StateError,
    ConversionError
)

# define what `import *` does
__all__ = [
    "Collection",
    "from_iterable",
    "empty",
    "filled",
    "collect",
    "C",
    "functions",
    "KeyExtractor",
    "KeyValueExtractor",
    "FieldKey",
    "FieldPairKey",
    "CompositeKey",
    "FieldKeyValue",
    "FunctionKey",
    "FunctionKeyValue",
    "as_extractor",
    "Predicate",
    "FunctionPredicate",
    "FieldValue",
    "FieldValues",
    "RelatedTo",
    "WithinDistance",
    "FieldChanged",
    "Not",
    "AllOf",
    "AnyOf",
    "as_predicate",
    "distance",
    "Comparator",
    "NaturalComparator",
    "FieldComparator",
    "FunctionComparator",
    "ChainedComparator",
    "ascending",
    "descending",
    "as_comparator",
    "Wrapper",
    "ANY",
    "CloneSpec",
    "convert",
    "clone_record",
    "IndexedCache",
    "Settings",
    "configure",
    "get_settings",
    "override_settings",
    "get_field",
    "set_field",
    "identity_of",
    "RecordkitError",
    "ValidationError",
    "DuplicateKeyError",
    "StateError",
    "ConversionError"
]
