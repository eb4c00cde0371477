import pytest

from ldcontext import ErrorCode, JsonLdError, Profile, parse_link_header
from ldcontext import processor
from ldcontext.remote import (
    LINK_HEADER_REL, apply_link_header, load_document_options)

CONTEXT_URL = 'http://example.com/context.jsonld'
NAME_CONTEXT = {'@context': {'name': 'http://schema.org/name'}}


def _chain(count):
    """Documents where each context references the next one."""
    documents = {}
    for i in range(count - 1):
        documents[f'http://example.com/{i}'] = {
            '@context': f'http://example.com/{i + 1}'}
    documents[f'http://example.com/{count - 1}'] = {
        '@context': {'end': 'http://example.com/end'}}
    return documents


class TestRemoteContext:
    def test_load(self, join, fake_loader):
        loader = fake_loader({CONTEXT_URL: NAME_CONTEXT})
        ctx = join(CONTEXT_URL, options={'documentLoader': loader})
        assert ctx.term_definition('name').iri == 'http://schema.org/name'
        assert loader.calls == [CONTEXT_URL]

    def test_loader_options(self, join, fake_loader):
        loader = fake_loader({CONTEXT_URL: NAME_CONTEXT})
        join(CONTEXT_URL, options={'documentLoader': loader})
        options = loader.options[0]
        assert options['profile'] is Profile.CONTEXT
        assert options['headers']['Accept'].startswith(
            'application/ld+json;profile=http://www.w3.org/ns/json-ld#context')

    def test_async_loader(self, join, async_fake_loader):
        loader = async_fake_loader({CONTEXT_URL: NAME_CONTEXT})
        ctx = join(CONTEXT_URL, options={'documentLoader': loader})
        assert 'name' in ctx

    def test_json_text_document(self, join, fake_loader):
        loader = fake_loader({
            CONTEXT_URL: '{"@context": {"name": "http://schema.org/name"}}'})
        ctx = join(CONTEXT_URL, options={'documentLoader': loader})
        assert 'name' in ctx

    def test_loaded_once_per_run(self, join, fake_loader):
        loader = fake_loader({CONTEXT_URL: NAME_CONTEXT})
        join([CONTEXT_URL, {'a': 'http://example.com/a'}, CONTEXT_URL],
             options={'documentLoader': loader})
        assert loader.calls == [CONTEXT_URL]

    def test_relative_reference(self, join, fake_loader):
        loader = fake_loader({CONTEXT_URL: NAME_CONTEXT})
        ctx = join('context.jsonld', options={
            'documentLoader': loader, 'base': 'http://example.com/doc'})
        assert 'name' in ctx

    def test_relative_reference_without_base(self, join, fake_loader):
        with pytest.raises(JsonLdError) as e:
            join('context.jsonld',
                 options={'documentLoader': fake_loader({})})
        assert e.value.code == ErrorCode.LOADING_REMOTE_CONTEXT_FAILED

    def test_nested_reference_resolves_against_document_url(
            self, join, fake_loader):
        loader = fake_loader({
            'http://example.com/a/outer': {'@context': 'inner'},
            'http://example.com/moved/inner': NAME_CONTEXT
        }, document_urls={
            'http://example.com/a/outer': 'http://example.com/moved/outer'
        })
        ctx = join('http://example.com/a/outer',
                   options={'documentLoader': loader})
        assert 'name' in ctx
        assert loader.calls[-1] == 'http://example.com/moved/inner'

    def test_base_ignored_in_remote_context(self, join, fake_loader):
        loader = fake_loader({CONTEXT_URL: {'@context': {
            '@base': 'http://other.example/', 'a': 'http://example.com/a'}}})
        ctx = join(CONTEXT_URL, options={'documentLoader': loader})
        assert ctx.base is None
        assert 'a' in ctx

    def test_loader_failure(self, join, fake_loader):
        with pytest.raises(JsonLdError) as e:
            join(CONTEXT_URL, options={'documentLoader': fake_loader({})})
        assert e.value.code == ErrorCode.LOADING_REMOTE_CONTEXT_FAILED
        assert e.value.cause.code == ErrorCode.LOADING_DOCUMENT_FAILED

    @pytest.mark.parametrize('document', [
        {'name': 'http://schema.org/name'}, ['not', 'an', 'object']])
    def test_document_without_context(self, join, fake_loader, document):
        loader = fake_loader({CONTEXT_URL: document})
        with pytest.raises(JsonLdError) as e:
            join(CONTEXT_URL, options={'documentLoader': loader})
        assert e.value.code == ErrorCode.INVALID_REMOTE_CONTEXT

    def test_default_document_loader(self, join, fake_loader, monkeypatch):
        loader = fake_loader({CONTEXT_URL: NAME_CONTEXT})
        monkeypatch.setattr(processor, '_default_document_loader', loader)
        assert processor.get_document_loader() is loader
        ctx = join(CONTEXT_URL)
        assert 'name' in ctx


class TestContextOverflow:
    def test_limit_reached(self, join, fake_loader):
        loader = fake_loader(_chain(3))
        ctx = join('http://example.com/0', options={
            'documentLoader': loader, 'maxRemoteContexts': 3})
        assert 'end' in ctx

    def test_limit_exceeded(self, join, fake_loader):
        loader = fake_loader(_chain(4))
        with pytest.raises(JsonLdError) as e:
            join('http://example.com/0', options={
                'documentLoader': loader, 'maxRemoteContexts': 3})
        assert e.value.code == ErrorCode.CONTEXT_OVERFLOW
        assert len(loader.calls) == 3

    def test_default_limit(self, join, fake_loader):
        loader = fake_loader(_chain(processor.MAX_CONTEXT_URLS + 1))
        with pytest.raises(JsonLdError) as e:
            join('http://example.com/0', options={'documentLoader': loader})
        assert e.value.code == ErrorCode.CONTEXT_OVERFLOW

    def test_cycle(self, join, fake_loader):
        loader = fake_loader({
            'http://example.com/a': {'@context': 'http://example.com/b'},
            'http://example.com/b': {'@context': 'http://example.com/a'}
        })
        with pytest.raises(JsonLdError) as e:
            join('http://example.com/a', options={'documentLoader': loader})
        assert e.value.code == ErrorCode.CONTEXT_OVERFLOW
        assert len(loader.calls) == 2


class TestScopedRemoteContext:
    def test_scoped_reference(self, join, fake_loader):
        loader = fake_loader({CONTEXT_URL: NAME_CONTEXT})
        ctx = join({'person': {
            '@id': 'http://schema.org/Person', '@context': CONTEXT_URL}},
            options={'documentLoader': loader})
        scoped = ctx.term_definition('person').context
        assert 'name' in scoped
        assert 'name' not in ctx

    def test_scoped_reference_shares_cache(self, join, fake_loader):
        loader = fake_loader({CONTEXT_URL: NAME_CONTEXT})
        join([CONTEXT_URL, {'person': {
            '@id': 'http://schema.org/Person', '@context': CONTEXT_URL}}],
            options={'documentLoader': loader})
        assert loader.calls == [CONTEXT_URL]

    def test_scoped_reference_failure(self, join, fake_loader):
        with pytest.raises(JsonLdError) as e:
            join({'person': {
                '@id': 'http://schema.org/Person', '@context': CONTEXT_URL}},
                options={'documentLoader': fake_loader({})})
        assert e.value.code == ErrorCode.INVALID_SCOPED_CONTEXT
        assert e.value.cause.code == ErrorCode.LOADING_REMOTE_CONTEXT_FAILED


class TestImport:
    IMPORT_URL = 'http://example.com/import.jsonld'

    def _loader(self, fake_loader, context):
        return fake_loader({self.IMPORT_URL: {'@context': context}})

    def test_import(self, join, fake_loader):
        loader = self._loader(fake_loader, {
            'a': 'http://example.com/imported-a',
            'b': 'http://example.com/b'
        })
        ctx = join({'@import': self.IMPORT_URL,
                    'a': 'http://example.com/local-a'},
                   options={'documentLoader': loader})
        assert ctx.term_definition('a').iri == 'http://example.com/local-a'
        assert ctx.term_definition('b').iri == 'http://example.com/b'

    def test_import_relative(self, join, fake_loader):
        loader = self._loader(fake_loader, {'b': 'http://example.com/b'})
        ctx = join({'@import': 'import.jsonld'}, options={
            'documentLoader': loader, 'base': 'http://example.com/doc'})
        assert 'b' in ctx

    def test_import_is_loaded_each_time(self, join, fake_loader):
        loader = self._loader(fake_loader, {'b': 'http://example.com/b'})
        join([{'@import': self.IMPORT_URL}, {'@import': self.IMPORT_URL}],
             options={'documentLoader': loader})
        assert loader.calls == [self.IMPORT_URL, self.IMPORT_URL]

    def test_import_not_string(self, join):
        with pytest.raises(JsonLdError) as e:
            join({'@import': {'b': 'http://example.com/b'}})
        assert e.value.code == ErrorCode.INVALID_IMPORT_VALUE

    def test_import_of_array(self, join, fake_loader):
        loader = self._loader(fake_loader, [{'b': 'http://example.com/b'}])
        with pytest.raises(JsonLdError) as e:
            join({'@import': self.IMPORT_URL},
                 options={'documentLoader': loader})
        assert e.value.code == ErrorCode.INVALID_REMOTE_CONTEXT

    def test_nested_import(self, join, fake_loader):
        loader = self._loader(fake_loader, {
            '@import': 'http://example.com/other.jsonld'})
        with pytest.raises(JsonLdError) as e:
            join({'@import': self.IMPORT_URL},
                 options={'documentLoader': loader})
        assert e.value.code == ErrorCode.INVALID_CONTEXT_ENTRY

    def test_import_failure(self, join, fake_loader):
        with pytest.raises(JsonLdError) as e:
            join({'@import': self.IMPORT_URL},
                 options={'documentLoader': fake_loader({})})
        assert e.value.code == ErrorCode.LOADING_REMOTE_CONTEXT_FAILED


class TestLinkHeader:
    def test_parse_link_header(self):
        header = (
            '<http://json-ld.org/contexts/person.jsonld>; '
            'rel="http://www.w3.org/ns/json-ld#context"; '
            'type="application/ld+json"')
        links = parse_link_header(header)
        assert links[LINK_HEADER_REL] == {
            'target': 'http://json-ld.org/contexts/person.jsonld',
            'rel': LINK_HEADER_REL,
            'type': 'application/ld+json'
        }

    def test_parse_repeated_rel(self):
        header = '<a.jsonld>; rel="alternate", <b.jsonld>; rel="alternate"'
        links = parse_link_header(header)
        assert [link['target'] for link in links['alternate']] == [
            'a.jsonld', 'b.jsonld']

    def _doc(self, content_type):
        return {'contentType': content_type, 'contextUrl': None,
                'documentUrl': 'http://example.com/doc', 'document': None}

    def test_context_link(self):
        doc = self._doc('application/json')
        alternate = apply_link_header(
            doc, 'http://example.com/doc',
            '<context.jsonld>; rel="http://www.w3.org/ns/json-ld#context"')
        assert alternate is None
        assert doc['contextUrl'] == 'http://example.com/context.jsonld'

    def test_context_link_ignored_for_json_ld(self):
        doc = self._doc('application/ld+json')
        apply_link_header(
            doc, 'http://example.com/doc',
            '<context.jsonld>; rel="http://www.w3.org/ns/json-ld#context"')
        assert doc['contextUrl'] is None

    def test_multiple_context_links(self):
        header = (
            '<a.jsonld>; rel="http://www.w3.org/ns/json-ld#context", '
            '<b.jsonld>; rel="http://www.w3.org/ns/json-ld#context"')
        with pytest.raises(JsonLdError) as e:
            apply_link_header(
                self._doc('application/json'), 'http://example.com/doc',
                header)
        assert e.value.code == ErrorCode.MULTIPLE_CONTEXT_LINK_HEADERS

    def test_alternate_link(self):
        alternate = apply_link_header(
            self._doc('text/html'), 'https://schema.org/',
            '</docs/jsonldcontext.jsonld>; rel="alternate"; '
            'type="application/ld+json"')
        assert alternate == 'https://schema.org/docs/jsonldcontext.jsonld'


class TestProfile:
    def test_iri(self):
        assert Profile.CONTEXT.iri == 'http://www.w3.org/ns/json-ld#context'

    def test_load_document_options(self):
        options = load_document_options(
            Profile.EXPANDED, [Profile.EXPANDED, Profile.COMPACTED])
        assert options['profile'] is Profile.EXPANDED
        assert options['headers']['Accept'] == (
            'application/ld+json;profile=http://www.w3.org/ns/json-ld#expanded'
            ', application/ld+json;profile=http://www.w3.org/ns/json-ld#'
            'compacted, application/ld+json, application/json')

    def test_no_profile(self):
        options = load_document_options()
        assert options['headers']['Accept'] == \
            'application/ld+json, application/json'
