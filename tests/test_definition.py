import copy

import pytest

from ldcontext import (
    Container, ContainerItem, Direction, NULL, TermDefinitionBuilder)
from ldcontext.nullable import is_null, value_of


class TestContainer:
    def test_single_keyword(self):
        container = Container.from_json('@set')
        assert container.items is ContainerItem.SET
        assert not container.array
        assert '@set' in container
        assert ContainerItem.SET in container
        assert '@list' not in container

    def test_array(self):
        container = Container.from_json(['@set', '@index'])
        assert container.array
        assert len(container) == 2
        assert container.keywords() == ['@index', '@set']
        assert container.is_valid()

    def test_unknown_keyword_is_not_contained(self):
        assert '@foo' not in Container.from_json('@set')

    @pytest.mark.parametrize('value', [
        '@foo', 5, None, ['@set', '@set'], ['@set', 5], {'@set': True}])
    def test_invalid_json(self, value):
        with pytest.raises(ValueError):
            Container.from_json(value)

    @pytest.mark.parametrize('value', [
        '@graph', '@type', ['@graph'], ['@graph', '@id'],
        ['@graph', '@index', '@set'], ['@set', '@type'],
        ['@language', '@set']])
    def test_valid_grammar(self, value):
        assert Container.from_json(value).is_valid()

    @pytest.mark.parametrize('value', [
        ['@graph', '@id', '@index'], ['@list', '@set'], ['@index', '@id'],
        ['@graph', '@language'], ['@list', '@index'], ['@graph', '@set'],
        []])
    def test_invalid_grammar(self, value):
        assert not Container.from_json(value).is_valid()

    def test_equality(self):
        assert Container.from_json('@set') == Container.from_json('@set')
        assert Container.from_json('@set') != Container.from_json(['@set'])
        assert hash(Container.from_json(['@id', '@graph'])) == \
            hash(Container.from_json(['@graph', '@id']))

    def test_item_keyword(self):
        assert ContainerItem.LANGUAGE.keyword == '@language'
        assert ContainerItem.from_keyword('@graph') is ContainerItem.GRAPH
        with pytest.raises(ValueError):
            ContainerItem.from_keyword('graph')


class TestDirection:
    def test_from_json(self):
        assert Direction.from_json('ltr') is Direction.LTR
        assert Direction.from_json('rtl') is Direction.RTL
        assert Direction.from_json(None) is NULL

    @pytest.mark.parametrize('value', ['LTR', 'up', 5, True])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            Direction.from_json(value)


class TestTermDefinition:
    def _builder(self):
        builder = TermDefinitionBuilder()
        builder.iri = 'http://schema.org/name'
        builder.reverse = False
        return builder

    def test_defaults(self):
        definition = self._builder().build()
        assert definition.type is None
        assert definition.container is None
        assert not definition.is_prefix
        assert not definition.is_protected

    def test_same_other_than_protected(self):
        builder = self._builder()
        unprotected = builder.build()
        builder.protected = True
        protected = builder.build()
        assert protected != unprotected
        assert protected.same_other_than_protected(unprotected)
        builder.type = '@id'
        assert not builder.build().same_other_than_protected(unprotected)

    def test_build_requires_iri(self):
        builder = TermDefinitionBuilder()
        builder.reverse = False
        with pytest.raises(AssertionError):
            builder.build()


class TestNull:
    def test_null_is_singleton(self):
        assert copy.copy(NULL) is NULL
        assert copy.deepcopy({'a': NULL})['a'] is NULL

    def test_null_is_falsy(self):
        assert not NULL
        assert NULL is not None

    def test_helpers(self):
        assert is_null(NULL)
        assert not is_null(None)
        assert value_of(NULL) is None
        assert value_of(None) is None
        assert value_of('en') == 'en'
