from typing import Dict, List

import suite
from recordkit import functions as fn
from recordkit import FieldValue, FieldChanged, CloneSpec, Wrapper, DuplicateKeyError, descending
from recordkit.fixtures import from_schema, choice

# --- setup ---
test = suite.test
assert_that = suite.assert_that
assert_raises = suite.assert_raises

case_schema = {
    'id': {'_provider': 'sequence', 'format': 'CASE-{}'},
    'subject': 'sentence',
    'priority': choice('low', 'medium', 'high'),
    'hours': ('pyint', {'min_value': 1, 'max_value': 40}),
}


def records():
    return [
        {'id': 1, 'name': 'A', 'stage': 'Open'},
        {'id': 2, 'name': 'B', 'stage': 'Closed'},
        {'id': 3, 'name': 'C', 'stage': 'Open'},
    ]


@test("read-only functions treat none as an empty sequence")
def test_none_inputs():
    assert_that(fn.is_empty(None) and not fn.is_not_empty(None), "none is empty")
    assert_that(fn.unique_values(None, 'x') == set(), "unique_values")
    assert_that(fn.map_by(None, 'x') == {}, "map_by")
    assert_that(fn.group_by(None, 'x') == {}, "group_by")
    assert_that(fn.filter(None, lambda r: True) == [], "filter")
    assert_that(fn.find(None, lambda r: True) is None, "find")
    assert_that(fn.reduce(None, lambda a, r, i: a + 1, 0) == 0, "reduce")
    assert_that(fn.sort(None) == [], "sort")
    assert_that(fn.wrap(None, Wrapper) == [], "wrap")


@test("one-shot functions match the chained forms")
def test_matches_chain():
    data = from_schema(case_schema, seed=31).take(30)
    source = data.to.list()
    pred = FieldValue('priority', '==', 'high')
    assert_that(fn.filter(source, pred) == data.filter(pred).to.list(), "filter")
    assert_that(fn.group_by(source, 'priority') == data.group_by('priority'), "group_by")
    assert_that(fn.map_by(source, 'id') == data.map_by('id'), "map_by")
    assert_that(fn.unique_values(source, 'priority') == data.unique_values('priority'), "unique_values")
    total = fn.reduce(source, lambda acc, r, i: acc + r['hours'], 0)
    assert_that(total == sum(r['hours'] for r in source), "reduce")


@test("non-mutating functions leave the caller's list alone")
def test_no_mutation():
    source = records()
    snapshot = [dict(r) for r in source]
    fn.filter(source, ('stage', '==', 'Open'))
    fn.group_by(source, 'stage')
    fn.map_by(source, 'id')
    fn.wrap(source, Wrapper)
    fn.for_each(source, lambda r, i: None)
    assert_that(source == snapshot, "records unchanged")


@test("sort and fill work in place on the given list")
def test_in_place():
    source = records()
    returned = fn.sort(source, descending('name'))
    assert_that(returned is source, "sort returns the same list")
    assert_that([r['name'] for r in source] == ['C', 'B', 'A'], "sorted in place")
    fn.fill(source, 2, {'id': 10, 'name': 'proto'}, CloneSpec(preserve_identity=True))
    assert_that(len(source) == 5 and source[-1]['id'] == 10, "copies appended in place")
    assert_that(len(fn.fill(None, 3, {'id': 1})) == 3, "fill on none gives a new list")


@test("filter with prior versions")
def test_filter_prior():
    current = records()
    prior = {1: {'id': 1, 'stage': 'Closed'}, 3: {'id': 3, 'stage': 'Closed'}}
    reopened = fn.filter(current, FieldChanged('stage', 'Closed', 'Open'), prior=prior)
    assert_that([r['name'] for r in reopened] == ['A', 'C'], "both reopened")


@test("for_each returns the sequence it was given")
def test_for_each():
    source = records()
    names = []
    assert_that(fn.for_each(source, lambda r, i: names.append(r['name'])) is source, "same list back")
    assert_that(names == ['A', 'B', 'C'], "visited in order")
    visited = []
    returned = fn.for_each((r for r in records()), lambda r, i: visited.append(i))
    assert_that(visited == [0, 1, 2], "generator visited once")
    assert_that([r['name'] for r in returned] == ['A', 'B', 'C'], "generator input comes back as a list")


@test("map_by duplicate policy applies to the function form")
def test_map_by_policy():
    assert_raises(DuplicateKeyError, fn.map_by, records(), 'stage')
    assert_that(fn.map_by(records(), 'stage', overwrite=True)['Open']['name'] == 'C', "last wins")


@test("cast converts grouped output")
def test_cast():
    grouped = fn.group_by(records(), 'stage')
    typed = fn.cast(grouped, Dict[str, List[dict]])
    assert_that(typed == grouped and typed is not grouped, "equal but independent")


# --- run the suite ---
if __name__ == "__main__":
    suite.run(title="recordkit functions test")
