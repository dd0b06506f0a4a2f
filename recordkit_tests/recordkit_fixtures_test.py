import suite
from recordkit import Collection, StateError, ValidationError
from recordkit.fixtures import (
    FixtureFactory, Generator, from_schema, infer_schema, choice, literal, sequence
)

# --- setup ---
test = suite.test
assert_that = suite.assert_that
assert_raises = suite.assert_raises


def factory(seed=1):
    return FixtureFactory(seed=seed).register(
        'account',
        {
            'id': sequence('001{:06d}', name='account'),
            'name': 'company',
            'industry': choice('retail', 'energy', 'media'),
            'annual_revenue': ('pyint', {'min_value': 1000, 'max_value': 90000}),
            'active': literal(True),
        },
        flavors={
            'enterprise': {'industry': literal('energy'), 'annual_revenue': literal(1_000_000)},
            'dormant': {'active': literal(False)},
        },
    ).register(
        'contact',
        {
            'id': sequence('003{:06d}', name='contact'),
            'first_name': 'first_name',
            'email': {'_provider': 'lambda', 'func': lambda ctx: f"{ctx['first_name'].lower()}@example.com"},
        },
    )


# --- generator ---

@test("generator resolves faker providers, refs and nested lists")
def test_generator():
    schema = {
        'name': 'word',
        'label': {'_provider': 'ref', 'key': 'name', 'format': '<{}>'},
        'lines': [{'_items': {'qty': ('pyint', {'min_value': 1, 'max_value': 3})}, '_count': 4}],
        'note': 'not a provider',
    }
    record = Generator(seed=3).create(schema)
    assert_that(record['label'] == f"<{record['name']}>", "ref sees earlier siblings")
    assert_that(len(record['lines']) == 4 and all(1 <= l['qty'] <= 3 for l in record['lines']), "nested list")
    assert_that(record['note'] == 'not a provider', "unknown strings are literals")


@test("generator is reproducible with a seed")
def test_seeded():
    schema = {'n': ('pyint', {'min_value': 0, 'max_value': 10 ** 6}), 'c': choice('a', 'b', 'c', 'd')}
    first = from_schema(schema, seed=42).take(10).to.list()
    second = from_schema(schema, seed=42).take(10).to.list()
    assert_that(first == second, "same seed, same data")


@test("generator rejects bad provider nodes")
def test_generator_errors():
    gen = Generator(seed=1)
    assert_raises(ValidationError, gen.create, {'_provider': 'nope'})
    assert_raises(ValidationError, gen.create, {'_provider': 'ref', 'key': 'missing'})
    assert_raises(ValidationError, gen.create, {'_provider': 'literal'})
    assert_raises(ValidationError, gen.create, {'_provider': 'choice', 'from': []})


# --- factory ---

@test("factory builds records from defaults")
def test_build_defaults():
    account = factory().build('account')
    assert_that(account['id'] == '001000001', "sequence ids")
    assert_that(account['industry'] in {'retail', 'energy', 'media'}, "choice default")
    assert_that(account['active'] is True, "literal default")


@test("flavors override defaults")
def test_flavors():
    enterprise = factory().build('account', flavor='enterprise')
    assert_that(enterprise['industry'] == 'energy' and enterprise['annual_revenue'] == 1_000_000, "flavor applied")
    dormant = factory().build('account', 'dormant', name='Acme')
    assert_that(dormant['active'] is False and dormant['name'] == 'Acme', "flavor plus literal override")


@test("build_many returns a collection with unique ids")
def test_build_many():
    accounts = factory().build_many('account', 5)
    assert_that(isinstance(accounts, Collection) and len(accounts) == 5, "five accounts")
    assert_that(len(accounts.unique_values('id')) == 5, "distinct ids")
    contact = factory().build('contact')
    assert_that(contact['email'] == f"{contact['first_name'].lower()}@example.com", "lambda sees context")


@test("unknown kinds and flavors fail fast")
def test_unknown():
    f = factory()
    assert_raises(ValidationError, f.build, 'opportunity')
    assert_raises(ValidationError, f.build, 'account', flavor='galactic')
    assert_raises(ValidationError, f.flavor, 'lead', 'hot', {})
    assert_raises(ValidationError, f.build_many, 'account', -1)


@test("register_example infers a schema")
def test_register_example():
    f = FixtureFactory(seed=5).register_example('lead', {
        'company_name': 'Acme Corp', 'email': 'a@b.com', 'score': 50, 'hot': True, 'tags': ['x', 'y'],
    })
    lead = f.build('lead')
    assert_that(isinstance(lead['score'], int) and 0 <= lead['score'] <= 100, "int range inferred")
    assert_that('@' in lead['email'], "email inferred")
    assert_that(len(lead['tags']) == 2, "list length inferred")
    assert_that(infer_schema(None) == literal(None), "unknown values are literals")


@test("inferred schemas treat ids, timestamps and foreign keys as record fields")
def test_infer_record_fields():
    example = {'id': 'LEAD-0007', 'account_id': 'ACC-1', 'created_date': '2024-01-01T00:00:00',
               'auto_number': 12, 'name': 'Ada Lovelace'}
    schema = infer_schema(example)
    assert_that(schema['id'] == sequence(format='LEAD-{:04d}', name='id'), f"padded id sequence: {schema['id']}")
    assert_that(schema['account_id'] == literal('ACC-1'), "foreign key kept")
    assert_that(schema['created_date'] == 'iso8601', "timestamp provider")
    assert_that(schema['auto_number'] == sequence(name='auto_number'), "auto number sequence")
    assert_that(schema['name'] == 'name', "name provider")
    f = FixtureFactory(seed=8).register_example('lead', example)
    first, second = f.build('lead'), f.build('lead')
    assert_that([first['id'], second['id']] == ['LEAD-0001', 'LEAD-0002'], "ids follow the example's format")
    assert_that([first['auto_number'], second['auto_number']] == [1, 2], "auto numbers count up")
    assert_that(first['account_id'] == 'ACC-1' and isinstance(first['created_date'], str), "foreign key and timestamp")


@test("list nodes validate their count")
def test_list_count():
    g = Generator(seed=2)
    assert_that(len(g.create([{'_items': 'word', '_count': 3}])) == 3, "fixed count")
    assert_that(2 <= len(g.create([{'_items': 'word', '_count': (2, 4)}])) <= 4, "count range")
    assert_that(len(g.create(['word'])) == 5, "default count")
    assert_raises(ValidationError, g.create, [{'_items': 'word', '_count': 'many'}])


# --- builder ---

@test("builder create and similarly share the anchor")
def test_builder():
    b = factory().builder()
    b.create('account', 2, flavor='enterprise', name='Big').similarly(3, active=False)
    accounts = b.records('account')
    assert_that(len(accounts) == 5, "2 created + 3 similar")
    assert_that(all(a['industry'] == 'energy' and a['name'] == 'Big' for a in accounts), "anchor flavor and overrides")
    assert_that([a['active'] for a in accounts] == [True, True, False, False, False], "similarly overrides")
    b.create('contact').similarly(kind='contact')
    assert_that(len(b.records('contact')) == 2 and len(b.records()) == 7, "records filter by kind")


@test("similarly fails without an anchor or across kinds")
def test_builder_state():
    b = factory().builder()
    assert_raises(StateError, b.similarly)
    b.create('account')
    assert_raises(StateError, b.similarly, kind='contact')


# --- run the suite ---
if __name__ == "__main__":
    suite.run(title="recordkit fixtures test")
