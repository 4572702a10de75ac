import pytest

from spanr.constants import SINGLE_GROUP
from spanr.error import ParseError, SchemaError
from spanr.intspan import IntSpan
from spanr.setmap import GroupedSetMap, SetMap, keys_union


class TestSetMap:
    def test_from_runlists(self):
        setmap = SetMap.from_runlists({'II': '1-5', 'I': '-', 1: 9, 'III': None})
        assert setmap['II'] == IntSpan('1-5')
        assert setmap['I'].is_empty()
        assert setmap['1'] == IntSpan('9')
        assert setmap['III'].is_empty()

    def test_to_runlists_sorted(self):
        setmap = SetMap.from_runlists({'II': '1-5', 'I': ''})
        assert list(setmap.to_runlists().items()) == [('I', '-'), ('II', '1-5')]

    def test_non_scalar_value(self):
        with pytest.raises(SchemaError):
            SetMap.from_runlists({'I': ['1-5']})

    def test_malformed_runlist_names_the_chromosome(self):
        with pytest.raises(ParseError) as err:
            SetMap.from_runlists({'I': 'abc'})
        assert 'I' in str(err.value)

    def test_fill_up(self):
        setmap = SetMap.from_runlists({'I': '1-5'})
        setmap.fill_up(['I', 'II'])
        assert setmap['I'] == IntSpan('1-5')
        assert setmap['II'].is_empty()
        before = setmap.to_runlists()
        assert setmap.fill_up(['I', 'II']).to_runlists() == before

    def test_copy(self):
        setmap = SetMap.from_runlists({'I': '1-5'})
        copy = setmap.copy()
        copy['I'].add_range(10, 20)
        assert setmap['I'] == IntSpan('1-5')

    def test_cardinality(self):
        assert SetMap.from_runlists({'I': '1-5', 'II': '10'}).cardinality() == 6


class TestGroupedSetMap:
    def test_flat_document(self):
        collection = GroupedSetMap.from_document({'I': '1-10', 'II': '5'})
        assert not collection.multi
        assert collection.names() == [SINGLE_GROUP]
        assert collection.single()['I'] == IntSpan('1-10')
        assert collection.to_document() == {'I': '1-10', 'II': '5'}

    def test_grouped_document(self):
        collection = GroupedSetMap.from_document({'S288c': {'I': '1-10'}, 'Spar': {'II': '1-5'}})
        assert collection.multi
        assert collection.names() == ['S288c', 'Spar']
        assert collection['Spar']['II'] == IntSpan('1-5')
        assert collection.to_document() == {'S288c': {'I': '1-10'}, 'Spar': {'II': '1-5'}}

    def test_empty_document(self):
        collection = GroupedSetMap.from_document(None)
        assert not collection.multi
        assert collection.single() == SetMap()

    def test_mixed_document(self):
        with pytest.raises(SchemaError):
            GroupedSetMap.from_document({'I': '1-10', 'S288c': {'I': '1-10'}})

    def test_list_document(self):
        with pytest.raises(SchemaError):
            GroupedSetMap.from_document(['1-10'])

    def test_list_values(self):
        with pytest.raises(SchemaError):
            GroupedSetMap.from_document({'I': ['1-10']})

    def test_single_with_several_groups(self):
        collection = GroupedSetMap.from_document({'a': {'I': '1'}, 'b': {'I': '2'}})
        with pytest.raises(SchemaError):
            collection.single()

    def test_flat_with_named_group(self):
        with pytest.raises(SchemaError):
            GroupedSetMap({'S288c': SetMap()}, multi=False)

    def test_fill_up_and_chromosomes(self):
        collection = GroupedSetMap.from_document({'a': {'I': '1'}, 'b': {'II': '2'}})
        assert collection.chromosomes() == ['I', 'II']
        collection.fill_up(collection.chromosomes())
        assert sorted(collection['a']) == ['I', 'II']
        assert collection['a']['II'].is_empty()
        assert collection['b']['I'].is_empty()

    def test_iteration_is_sorted(self):
        collection = GroupedSetMap.from_document({'b': {'I': '1'}, 'a': {'I': '2'}})
        assert [name for name, _ in collection] == ['a', 'b']
        assert len(collection) == 2

    def test_equality(self):
        assert GroupedSetMap.from_document({'I': '1'}) == GroupedSetMap.flat(SetMap.from_runlists({'I': '1'}))
        assert GroupedSetMap.from_document({'I': '1'}) != GroupedSetMap({SINGLE_GROUP: SetMap.from_runlists({'I': '1'})})


def test_keys_union():
    first = SetMap.from_runlists({'I': '1', 'III': '1'})
    second = GroupedSetMap.from_document({'a': {'II': '1'}, 'b': {'I': '5'}})
    assert keys_union(first, second) == ['I', 'II', 'III']
    assert keys_union() == []
