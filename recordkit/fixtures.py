"""
test-fixture factory.

records are generated from small schemas. a schema is a dict whose leaves are:
  - a faker provider name ('word', 'company', 'email' ...)
  - a (provider, kwargs) tuple, e.g. ('pyint', {'min_value': 1, 'max_value': 9})
  - a {'_provider': ...} node: choice, ref, literal, sequence or lambda
  - a one-item list whose item may carry '_items' / '_count' for nested lists
  - anything else, taken literally

a FixtureFactory registers default schemas per record kind plus named flavors
that override some of those defaults.
"""
import datetime
import logging
import re
import numpy as np
from faker import Faker
from .types import *
from .collection import Collection
from .config import get_settings
from .errors import StateError, ValidationError
from .factories import from_iterable

logger = logging.getLogger(__name__)


class Generator:
    """schema interpreter."""

    def __init__(self, seed: Optional[int] = None):
        self._fake = Faker()
        if seed is not None:
            self._fake.seed_instance(seed)
            self._rng = np.random.default_rng(seed)
        else:
            self._rng = np.random.default_rng()
        self._sequences: Dict[str, int] = {}

    def _resolve_faker_method(self, method_name: str, kwargs: Optional[Dict] = None) -> Any:
        try:
            method = getattr(self._fake, method_name)
        except AttributeError:
            raise ValidationError(f"faker has no provider '{method_name}'")
        return method(**(kwargs or {}))

    def _next_in_sequence(self, name: str, start: int) -> int:
        value = self._sequences.get(name, start - 1) + 1
        self._sequences[name] = value
        return value

    def _resolve_provider(self, config: Dict, context: Dict) -> Any:
        provider = config["_provider"]
        if provider == "ref":
            key = config["key"]
            if key not in context:
                raise ValidationError(f"reference to '{key}' not found in current context.")
            value = context[key]
            if "format" in config:
                return config["format"].format(value)
            return value

        elif provider == "choice":
            options = config["from"]
            if not options:
                raise ValidationError("_provider 'choice' needs a non-empty 'from' list.")
            # index into the options so native python values come back untouched
            return options[int(self._rng.integers(len(options)))]

        elif provider == "sequence":
            # monotonically increasing per sequence name, e.g. generated record ids
            name = config.get("name", config.get("format", "default"))
            value = self._next_in_sequence(name, config.get("start", 1))
            if "format" in config:
                return config["format"].format(value)
            return value

        elif provider == "lambda":
            func = config["func"]
            if not callable(func):
                raise ValidationError("_provider 'lambda' requires a callable 'func'.")
            return func(context)

        elif provider == "literal":
            if "value" not in config:
                raise ValidationError("_provider 'literal' requires a 'value' key.")
            return config["value"]

        else:
            raise ValidationError(f"unknown _provider: '{provider}'")

    def create(self, schema: Any, context: Optional[Dict] = None) -> Any:
        current_context = context or {}

        if isinstance(schema, dict):
            if "_provider" in schema:
                return self._resolve_provider(schema, current_context)

            # build the record field by field so refs can see earlier siblings
            generated_obj = {}
            for k, v in schema.items():
                merged_context = {**current_context, **generated_obj}
                generated_obj[k] = self.create(v, merged_context)
            return generated_obj

        if isinstance(schema, list):
            return self._create_list(schema, current_context)

        if isinstance(schema, str):
            if hasattr(self._fake, schema):
                return self._resolve_faker_method(schema)
            return schema

        if isinstance(schema, tuple) and len(schema) == 2 and isinstance(schema[1], dict):
            return self._resolve_faker_method(schema[0], schema[1])

        return schema

    def _create_list(self, schema: List[Any], context: Dict) -> List[Any]:
        """[item] or [{'_items': item, '_count': n | (low, high)}]; five items by default"""
        if not schema:
            return []
        node = schema[0]
        if not isinstance(node, dict) or '_provider' in node:
            return [self.create(node, context) for _ in range(5)]
        item = node['_items'] if '_items' in node else {k: v for k, v in node.items() if k != '_count'}
        return [self.create(item, context) for _ in range(self._count_of(node.get('_count', 5)))]

    def _count_of(self, spec: Any) -> int:
        if isinstance(spec, int) and not isinstance(spec, bool):
            return spec
        if isinstance(spec, (list, tuple)) and len(spec) == 2:
            return int(self._rng.integers(spec[0], spec[1], endpoint=True))
        raise ValidationError(f"_count must be an int or a (low, high) pair, got {spec!r}")


class _SchemaProvider:
    def __init__(self, schema: Any, seed: Optional[int] = None):
        self._schema = schema
        self._generator = Generator(seed)

    def take(self, count: int) -> Collection:
        return from_iterable([self._generator.create(self._schema) for _ in range(count)])


def from_schema(schema: Any, seed: Optional[int] = None) -> _SchemaProvider:
    return _SchemaProvider(schema, seed)


def literal(value: Any) -> Dict[str, Any]:
    """schema node that always yields value as-is"""
    return {'_provider': 'literal', 'value': value}


def choice(*options: Any) -> Dict[str, Any]:
    return {'_provider': 'choice', 'from': list(options)}


def sequence(format: Optional[str] = None, start: int = 1, name: Optional[str] = None) -> Dict[str, Any]:
    node = {'_provider': 'sequence', 'start': start}
    if format is not None:
        node['format'] = format
    if name is not None:
        node['name'] = name
    return node


# --- schema inference ---

_SEQUENCE_FORMAT = re.compile(r'^(?P<prefix>\D*?)(?P<digits>\d+)$')
_EMAIL = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def _identity_schema(value: Any, field: str) -> Any:
    """ids become sequences that keep the example's prefix and zero padding"""
    if isinstance(value, int) and not isinstance(value, bool):
        return sequence(name=field)
    match = _SEQUENCE_FORMAT.match(value) if isinstance(value, str) else None
    if match is None:
        return 'uuid4'
    digits = match.group('digits')
    width = f":0{len(digits)}d" if digits.startswith('0') else ''
    return sequence(format=f"{match.group('prefix')}{{{width}}}", name=field)


def _text_schema(value: str, field: str) -> Any:
    lowered = field.lower()
    if lowered.endswith('_id'):
        # foreign keys stay as given
        return literal(value)
    if _EMAIL.match(value):
        return 'email'
    if value.startswith(('http://', 'https://')):
        return 'url'
    for hint, provider in (('phone', 'phone_number'), ('city', 'city'), ('country', 'country'),
                           ('street', 'street_address'), ('company', 'company'), ('account', 'company'),
                           ('name', 'name')):
        if hint in lowered:
            return provider
    return 'word' if ' ' not in value else 'sentence'


def infer_schema(example: Any, field: str = '') -> Any:
    """
    derive a generator schema from one example record.
    the configured identity, timestamp and auto-sequence fields get sequences and
    date providers; other text fields are matched to faker providers by name or shape,
    numbers get a range around the example, and nested records and lists recurse.
    """
    settings = get_settings()
    if isinstance(example, dict):
        return {key: infer_schema(value, key) for key, value in example.items()}
    if isinstance(example, list):
        return [{'_items': infer_schema(example[0], field), '_count': len(example)}] if example else []
    if example is None:
        return literal(None)
    if field == settings.id_field or field in settings.auto_sequence_fields:
        return _identity_schema(example, field)
    if field in settings.timestamp_fields or isinstance(example, (datetime.date, datetime.datetime)):
        if isinstance(example, datetime.datetime):
            return 'date_time'
        return 'date_object' if isinstance(example, datetime.date) else 'iso8601'
    if isinstance(example, bool):
        return choice(True, False)
    if isinstance(example, int):
        return 'pyint', {'min_value': min(0, example), 'max_value': max(2 * example, 10)}
    if isinstance(example, float):
        return 'pyfloat', {'min_value': min(0.0, example), 'max_value': max(2 * example, 10.0)}
    if isinstance(example, str):
        return _text_schema(example, field)
    return literal(example)


# --- factory ---

class FixtureFactory:
    """per-kind default schemas with named flavors layered on top"""

    def __init__(self, seed: Optional[int] = None):
        self._generator = Generator(seed)
        self._defaults: Dict[str, Dict[str, Any]] = {}
        self._flavors: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def register(self, kind: str, defaults: Dict[str, Any],
                 flavors: Optional[Dict[str, Dict[str, Any]]] = None) -> 'FixtureFactory':
        if not isinstance(defaults, dict):
            raise ValidationError(f"defaults for {kind!r} must be a dict schema")
        self._defaults[kind] = dict(defaults)
        self._flavors[kind] = {}
        for name, overrides in (flavors or {}).items():
            self.flavor(kind, name, overrides)
        logger.debug(f"registered fixture kind {kind!r} with flavors {sorted(self._flavors[kind])}")
        return self

    def register_example(self, kind: str, example: Dict[str, Any]) -> 'FixtureFactory':
        """register a kind whose defaults are inferred from an example record"""
        return self.register(kind, infer_schema(example))

    def flavor(self, kind: str, name: str, overrides: Dict[str, Any]) -> 'FixtureFactory':
        self._check_kind(kind)
        self._flavors[kind][name] = dict(overrides)
        return self

    def kinds(self) -> List[str]:
        return list(self._defaults)

    def _check_kind(self, kind: str) -> None:
        if kind not in self._defaults:
            raise ValidationError(f"unknown fixture kind {kind!r}; registered: {', '.join(self._defaults) or 'none'}")

    def schema_for(self, kind: str, flavor: Optional[str] = None) -> Dict[str, Any]:
        """default schema merged with the flavor's overrides"""
        self._check_kind(kind)
        schema = dict(self._defaults[kind])
        if flavor is not None:
            if flavor not in self._flavors[kind]:
                raise ValidationError(f"unknown flavor {flavor!r} for {kind!r}")
            schema.update(self._flavors[kind][flavor])
        return schema

    def build(self, kind: str, flavor: Optional[str] = None, **overrides: Any) -> Dict[str, Any]:
        """one record; keyword overrides are literal values"""
        schema = self.schema_for(kind, flavor)
        schema.update({field: literal(value) for field, value in overrides.items()})
        return self._generator.create(schema)

    def build_many(self, kind: str, count: int, flavor: Optional[str] = None, **overrides: Any) -> Collection:
        if count < 0:
            raise ValidationError(f"count must be zero or positive, got {count!r}")
        return from_iterable([self.build(kind, flavor, **overrides) for _ in range(count)])

    def builder(self) -> 'FixtureBuilder':
        return FixtureBuilder(self)


class FixtureBuilder:
    """
    accumulates fixtures across calls.
    create() anchors a kind/flavor/overrides; similarly() repeats that anchor
    with extra overrides, and fails when nothing has been anchored yet.
    """

    def __init__(self, factory: FixtureFactory):
        self._factory = factory
        self._anchor: Optional[Tuple[str, Optional[str], Dict[str, Any]]] = None
        self._created: List[Tuple[str, Dict[str, Any]]] = []

    def create(self, kind: str, count: int = 1, flavor: Optional[str] = None, **overrides: Any) -> 'FixtureBuilder':
        records = self._factory.build_many(kind, count, flavor, **overrides)
        self._anchor = (kind, flavor, dict(overrides))
        self._created.extend((kind, record) for record in records)
        return self

    def similarly(self, count: int = 1, kind: Optional[str] = None, **overrides: Any) -> 'FixtureBuilder':
        if self._anchor is None:
            raise StateError("similarly() needs a prior create() to copy from")
        anchor_kind, flavor, anchor_overrides = self._anchor
        if kind is not None and kind != anchor_kind:
            raise StateError(f"similarly() cannot switch from {anchor_kind!r} to {kind!r}; call create() instead")
        merged = {**anchor_overrides, **overrides}
        records = self._factory.build_many(anchor_kind, count, flavor, **merged)
        self._created.extend((anchor_kind, record) for record in records)
        return self

    def records(self, kind: Optional[str] = None) -> Collection:
        return from_iterable([record for k, record in self._created if kind is None or k == kind])
