import suite
from recordkit import (
    C, empty, FieldKey, FieldPairKey, CompositeKey, FieldKeyValue, FunctionKeyValue,
    DuplicateKeyError, ValidationError
)
from recordkit.fixtures import from_schema, choice

# --- setup ---
test = suite.test
assert_that = suite.assert_that
assert_raises = suite.assert_raises

# --- test data & schemas ---
contact_schema = {
    'id': {'_provider': 'sequence'},
    'name': 'name',
    'account_id': ('pyint', {'min_value': 1, 'max_value': 4}),
    'region': choice('na', 'eu', 'apac'),
    'active': choice(True, False),
}

deals = [
    {'id': 1, 'name': 'A', 'stage': 'Open', 'owner': 'x'},
    {'id': 2, 'name': 'B', 'stage': 'Closed', 'owner': 'y'},
    {'id': 3, 'name': 'C', 'stage': 'Open', 'owner': 'y'},
]


# --- group_by ---

@test("group_by groups records by a field, keeping input order")
def test_group_by_example():
    grouped = C(deals).group_by('stage')
    assert_that(set(grouped) == {'Open', 'Closed'}, "two stages")
    assert_that([d['name'] for d in grouped['Open']] == ['A', 'C'], "Open group holds A then C")
    assert_that([d['name'] for d in grouped['Closed']] == ['B'], "Closed group holds B")


@test("group_by partitions the sequence exactly")
def test_group_by_partition():
    data = from_schema(contact_schema, seed=3).take(80)
    grouped = data.group_by(FieldKey('region'))
    flattened = [item for members in grouped.values() for item in members]
    assert_that(len(flattened) == len(data), "no record dropped or duplicated")
    assert_that(sorted(x['id'] for x in flattened) == sorted(x['id'] for x in data), "same records")
    for region, members in grouped.items():
        assert_that(all(m['region'] == region for m in members), f"group '{region}' is homogeneous")
        ids = [m['id'] for m in members]
        assert_that(ids == sorted(ids), "sequence ids prove input order is kept")


@test("group_by with a key-value extractor collects values")
def test_group_by_values():
    names = C(deals).group_by(FieldKeyValue('owner', 'name'))
    assert_that(names == {'x': ['A'], 'y': ['B', 'C']}, "owner -> names")


@test("group_by with a compound key")
def test_group_by_compound():
    grouped = C(deals).group_by(FieldPairKey('stage', 'owner'))
    assert_that(set(grouped) == {('Open', 'x'), ('Closed', 'y'), ('Open', 'y')}, "tuple keys")


@test("group_by on empty or none data is an empty dict")
def test_group_by_empty():
    assert_that(empty().group_by('stage') == {}, "empty collection")
    assert_that(C(None).group_by('stage') == {}, "none source")


# --- map_by ---

@test("map_by over unique keys has one entry per record")
def test_map_by_unique():
    data = from_schema(contact_schema, seed=5).take(25)
    mapped = data.map_by('id')
    assert_that(len(mapped) == len(data), "one entry per record")
    assert_that(all(mapped[x['id']] is x for x in data), "values are the records themselves")


@test("map_by fails fast on duplicate keys")
def test_map_by_duplicates():
    error = assert_raises(DuplicateKeyError, C(deals).map_by, 'stage')
    assert_that(error.key == 'Open', "the error names the duplicated key")
    assert_that(isinstance(error, ValidationError), "duplicates are a validation error")


@test("map_by with overwrite keeps the last record")
def test_map_by_overwrite():
    mapped = C(deals).map_by('stage', overwrite=True)
    assert_that(mapped['Open']['name'] == 'C', "last write wins")


@test("map_by with key-value extractors")
def test_map_by_key_value():
    assert_that(C(deals).map_by(FieldKeyValue('id', 'name')) == {1: 'A', 2: 'B', 3: 'C'}, "id -> name")
    upper = C(deals).map_by(FunctionKeyValue(lambda d: d['name'].lower(), lambda d: d['id']))
    assert_that(upper == {'a': 1, 'b': 2, 'c': 3}, "function key-value extractor")


@test("declared key types are enforced")
def test_key_type():
    assert_that(len(C(deals).map_by(FieldKey('id', key_type=int))) == 3, "int keys pass")
    assert_raises(ValidationError, C(deals).map_by, FieldKey('name', key_type=int))


# --- unique_values ---

@test("unique_values returns the distinct keys")
def test_unique_values():
    assert_that(C(deals).unique_values('stage') == {'Open', 'Closed'}, "single field")
    assert_that(C(deals).unique_values(('stage', 'owner')) == {('Open', 'x'), ('Closed', 'y'), ('Open', 'y')},
                "compound key from a tuple of fields")
    assert_that(C(deals).unique_values(CompositeKey('owner')) == {('x',), ('y',)}, "one-field composite")
    assert_that(C(None).unique_values('stage') == set(), "none source gives an empty set")


@test("unique_values on generated data matches a set comprehension")
def test_unique_values_generated():
    data = from_schema(contact_schema, seed=9).take(50)
    assert_that(data.unique_values('account_id') == {x['account_id'] for x in data}, "same distinct set")


@test("compound keys need at least one field")
def test_composite_validation():
    assert_raises(ValidationError, CompositeKey)


# --- run the suite ---
if __name__ == "__main__":
    suite.run(title="recordkit grouping test")
